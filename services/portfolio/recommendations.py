# services/portfolio/recommendations.py
from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence

from schemas.portfolio_analysis import (
    AnalysisWarning,
    FundRecommendation,
    OverlapWarning,
    PotentialSector,
)
from services.portfolio.analysis_config import (
    COMMON_SECTORS,
    DEFAULT_CHARACTERISTICS,
    DEFAULT_FUND_TYPE,
    MAX_FUND_RECOMMENDATIONS,
    MIN_SECTOR_COUNT,
    OVERLAP_WARNING_PCT,
    SECTOR_CHARACTERISTICS,
    SECTOR_FUND_TYPES,
    SHARE_EPSILON,
)
from services.portfolio.risk_profile import RiskProfile
from utils.common_helpers import format_number


def generate_warnings(
    sector_values: Mapping[str, float],
    overlap_warnings: Sequence[OverlapWarning],
    risk_profile: RiskProfile,
    total_investment: float,
) -> List[AnalysisWarning]:
    """
    Sector warnings (in sector order), then company overlap warnings, then
    the sector-count warning. Thresholds are strict: a sector sitting exactly
    on the profile limit does not warn.
    """
    warnings: List[AnalysisWarning] = []
    limit = risk_profile.limits.max_sector_pct

    for sector, value in sector_values.items():
        share = value / total_investment * 100.0 if total_investment else 0.0
        if share - limit > SHARE_EPSILON:
            warnings.append(
                AnalysisWarning(
                    type="sector",
                    title=f"High {sector} Exposure",
                    message=(
                        f"{sector} sector represents {share:.1f}% of your portfolio, which exceeds "
                        f"the recommended {format_number(limit)}% for {risk_profile.value.lower()} investors."
                    ),
                )
            )

    for ow in overlap_warnings:
        if ow.exposure > OVERLAP_WARNING_PCT:
            warnings.append(
                AnalysisWarning(
                    type="overlap",
                    title=f"Company Overlap: {ow.company}",
                    message=(
                        f"{ow.company} appears in {ow.fundCount} funds with {format_number(ow.exposure)}% "
                        "total exposure, reducing diversification benefits."
                    ),
                )
            )

    sector_count = len(sector_values)
    if sector_count < MIN_SECTOR_COUNT:
        warnings.append(
            AnalysisWarning(
                type="diversification",
                title="Limited Sector Diversification",
                message=(
                    f"Your portfolio spans only {sector_count} sectors. Consider adding funds "
                    "in other sectors for better diversification."
                ),
            )
        )

    return warnings


def determine_fund_type(sector: str) -> str:
    return SECTOR_FUND_TYPES.get(sector, DEFAULT_FUND_TYPE)


def expected_characteristics(sector: str) -> List[str]:
    return list(SECTOR_CHARACTERISTICS.get(sector, DEFAULT_CHARACTERISTICS))


def find_potential_sectors(present_sectors: Iterable[str]) -> List[PotentialSector]:
    """Common market sectors the portfolio does not hold yet, in master-list order."""
    present = set(present_sectors)
    return [
        PotentialSector(sector=s, reason="Currently not represented in portfolio")
        for s in COMMON_SECTORS
        if s not in present
    ]


def recommend_funds(
    potential_sectors: Sequence[PotentialSector],
    limit: int = MAX_FUND_RECOMMENDATIONS,
) -> List[FundRecommendation]:
    return [
        FundRecommendation(
            sector=ps.sector,
            recommendation=f"Explore mutual funds focused on {ps.sector} to add diversification",
            rationale=f"{ps.sector} is not currently in your portfolio and can diversify your risk",
            fundType=determine_fund_type(ps.sector),
            expectedCharacteristics=expected_characteristics(ps.sector),
        )
        for ps in potential_sectors[:limit]
    ]
