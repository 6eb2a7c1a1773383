# services/portfolio/portfolio_analyzer.py
"""
Portfolio analysis engine.

Turns a list of (fund, amount, holdings) records into sector exposure,
company overlap, a diversification score and warnings. Pure functions of the
input: no I/O, no shared state, safe to call concurrently.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from schemas.portfolio_analysis import (
    BasicAnalysis,
    CompanyExposure,
    DetailedAnalysis,
    FundHolding,
    OverlapWarning,
    SectorSlice,
)
from services.portfolio.diversification import score_diversification
from services.portfolio.exposure import aggregate_exposure
from services.portfolio.overlap import find_overlapping_companies, find_overlapping_sectors
from services.portfolio.recommendations import (
    find_potential_sectors,
    generate_warnings,
    recommend_funds,
)
from services.portfolio.risk_profile import RiskProfile, resolve_risk_profile

logger = logging.getLogger(__name__)

FundInput = Union[FundHolding, Mapping[str, Any]]


class InvalidPortfolioError(ValueError):
    """A fund or holding record is malformed. Raised instead of skipping it."""


def coerce_funds(funds: Optional[Sequence[FundInput]]) -> List[FundHolding]:
    out: List[FundHolding] = []
    for i, f in enumerate(funds or []):
        if isinstance(f, FundHolding):
            out.append(f)
            continue
        try:
            out.append(FundHolding.model_validate(f))
        except ValidationError as e:
            raise InvalidPortfolioError(f"Invalid fund record at index {i}: {e}") from e
    return out


def analyze_portfolio(
    funds: Optional[Sequence[FundInput]],
    risk_profile: Optional[Union[str, RiskProfile]] = None,
) -> BasicAnalysis:
    records = coerce_funds(funds)
    profile = resolve_risk_profile(risk_profile)
    exposure = aggregate_exposure(records)

    if exposure.is_empty:
        return BasicAnalysis(riskProfile=profile.value)

    total = exposure.total_investment

    overlap_warnings = [
        OverlapWarning(
            company=row.company,
            fundCount=row.numberOfFunds,
            exposure=row.totalExposurePercent,
        )
        for row in find_overlapping_companies(records, total, sort=False)
    ]

    warnings = generate_warnings(exposure.sector_values, overlap_warnings, profile, total)

    logger.debug(
        "portfolio_analyzed funds=%d sectors=%d companies=%d warnings=%d",
        len(records), len(exposure.sector_values), len(exposure.company_values), len(warnings),
    )

    return BasicAnalysis(
        totalInvestment=total,
        sectorDistribution=[
            SectorSlice(name=e.key, value=e.percent_of_portfolio)
            for e in exposure.entries("sector", 1)
        ],
        companyExposure=[
            CompanyExposure(name=e.key, exposure=e.percent_of_portfolio)
            for e in exposure.entries("company", 2)
        ],
        sectorExposure=exposure.percentages("sector", 1),
        overlapWarnings=overlap_warnings,
        warnings=warnings,
        riskProfile=profile.value,
    )


def analyze_portfolio_detailed(funds: Optional[Sequence[FundInput]]) -> DetailedAnalysis:
    records = coerce_funds(funds)
    if not records:
        return DetailedAnalysis()

    exposure = aggregate_exposure(records)
    if exposure.is_empty:
        # funds exist but nothing is invested: same zeroed shape
        return DetailedAnalysis(totalFunds=len(records), totalInvestment=exposure.total_investment)

    total = exposure.total_investment
    score = score_diversification(exposure)
    potential = find_potential_sectors(exposure.sector_values.keys())

    logger.debug(
        "portfolio_detailed_analyzed funds=%d score=%d level=%s",
        len(records), score.overall, score.assessment.level,
    )

    return DetailedAnalysis(
        totalFunds=len(records),
        totalInvestment=total,
        uniqueSectors=len(exposure.sector_values),
        uniqueShares=len(exposure.company_values),
        overlappingShares=find_overlapping_companies(records, total),
        overlappingSectors=find_overlapping_sectors(records, total),
        diversificationScore=score,
        potentialSectors=potential,
        fundRecommendations=recommend_funds(potential),
    )
