# routers/portfolio_routes.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from routers.funds_routes import FundIn, resolve_funds
from services.portfolio.portfolio_analyzer import (
    InvalidPortfolioError,
    analyze_portfolio,
    analyze_portfolio_detailed,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class PortfolioRequest(BaseModel):
    funds: List[FundIn] = Field(default_factory=list)
    riskProfile: Optional[str] = None


@router.post("/analyze")
def portfolio_analyze(payload: PortfolioRequest) -> Dict[str, Any]:
    funds = resolve_funds(payload.funds)
    try:
        analysis = analyze_portfolio(funds, payload.riskProfile)
    except InvalidPortfolioError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("portfolio_analysis_failed funds=%d: %s", len(funds), e)
        raise HTTPException(status_code=500, detail="Portfolio analysis failed")

    logger.info("portfolio_analysis_completed funds=%d warnings=%d", len(funds), len(analysis.warnings))
    return analysis.to_dict()


@router.post("/detailed-analysis")
def portfolio_detailed_analysis(payload: PortfolioRequest) -> Dict[str, Any]:
    """
    Overlapping shares and sectors, diversification score, potential sectors
    and fund recommendations. Non-empty portfolios also carry the basic view.
    """
    funds = resolve_funds(payload.funds)
    try:
        detailed = analyze_portfolio_detailed(funds)
        if detailed.score is None:
            return detailed.to_dict()
        basic = analyze_portfolio(funds, payload.riskProfile)
    except InvalidPortfolioError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("portfolio_detailed_analysis_failed funds=%d: %s", len(funds), e)
        raise HTTPException(status_code=500, detail="Failed to generate detailed analysis")

    logger.info(
        "portfolio_detailed_analysis_completed funds=%d score=%d",
        len(funds), detailed.score.overall,
    )
    return {
        **detailed.to_dict(),
        "riskProfile": basic.riskProfile,
        "basicAnalysis": {
            "sectorDistribution": [s.model_dump() for s in basic.sectorDistribution],
            "companyExposure": [c.model_dump() for c in basic.companyExposure],
            "warnings": [w.model_dump() for w in basic.warnings],
        },
    }
