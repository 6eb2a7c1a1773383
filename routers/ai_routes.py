# routers/ai_routes.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from routers.funds_routes import FundIn, resolve_funds
from schemas.ai_insights import InvestorAnswers
from services.ai.insights.insights_service import generate_insights
from services.portfolio.portfolio_analyzer import (
    InvalidPortfolioError,
    analyze_portfolio,
    analyze_portfolio_detailed,
)
from services.portfolio.risk_profile import derive_risk_profile

logger = logging.getLogger(__name__)

router = APIRouter()


class InsightsBody(BaseModel):
    userType: Literal["new", "existing"]
    answers: Optional[InvestorAnswers] = None
    funds: Optional[List[FundIn]] = None
    riskProfile: Optional[str] = None


def _risk_profile_for(payload: InsightsBody) -> Optional[str]:
    if payload.riskProfile:
        return payload.riskProfile
    if payload.answers is not None:
        return derive_risk_profile(
            payload.answers.investmentHorizon,
            payload.answers.riskAppetite,
        ).value
    return None


@router.post("/insights")
async def ai_insights(payload: InsightsBody) -> Dict[str, Any]:
    """
    New investors send onboarding answers; existing investors send their
    funds. Always answers with the narrative schema, AI-written or fallback.
    """
    logger.info("ai_insights_requested user_type=%s", payload.userType)

    if payload.userType == "new":
        insights = await generate_insights("new", answers=payload.answers or InvestorAnswers())
        return insights.to_dict()

    if not payload.funds:
        raise HTTPException(status_code=400, detail="No funds found for analysis")

    funds = resolve_funds(payload.funds)
    try:
        portfolio_data = analyze_portfolio(funds, _risk_profile_for(payload))
        analysis_data = analyze_portfolio_detailed(funds)
    except InvalidPortfolioError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("ai_insights_analysis_failed funds=%d: %s", len(funds), e)
        raise HTTPException(status_code=500, detail="Failed to generate AI insights")

    insights = await generate_insights(
        "existing",
        portfolio_data=portfolio_data,
        analysis_data=analysis_data,
    )
    return insights.to_dict()
