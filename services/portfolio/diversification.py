# services/portfolio/diversification.py
from __future__ import annotations

from typing import Iterable

from schemas.portfolio_analysis import Assessment, DiversificationScore
from services.portfolio.analysis_config import (
    ASSESSMENT_BANDS,
    COMPANY_COUNT_CAP,
    CONCENTRATION_POINTS,
    SECTOR_COUNT_CAP,
    SECTOR_DIVERSITY_POINTS,
    SHARE_DIVERSITY_POINTS,
)
from services.portfolio.exposure import PortfolioExposure
from utils.common_helpers import round_half_up


def herfindahl_index(values: Iterable[float], total: float) -> float:
    """Sum of squared fractions of total (1 = fully concentrated)."""
    if total <= 0:
        return 0.0
    return sum((v / total) ** 2 for v in values)


def assess_diversification(score: int) -> Assessment:
    for floor, level, description, suggestion in ASSESSMENT_BANDS:
        if score >= floor:
            return Assessment(level=level, description=description, suggestion=suggestion)
    # negative scores cannot happen, lowest band is the catch-all
    _, level, description, suggestion = ASSESSMENT_BANDS[-1]
    return Assessment(level=level, description=description, suggestion=suggestion)


def score_diversification(exposure: PortfolioExposure) -> DiversificationScore:
    sector_count = min(len(exposure.sector_values), SECTOR_COUNT_CAP)
    company_count = min(len(exposure.company_values), COMPANY_COUNT_CAP)

    sector_diversity = sector_count / SECTOR_COUNT_CAP * SECTOR_DIVERSITY_POINTS
    share_diversity = company_count / COMPANY_COUNT_CAP * SHARE_DIVERSITY_POINTS

    if exposure.sector_values:
        hhi = herfindahl_index(exposure.sector_values.values(), exposure.total_investment)
        concentration = max(0.0, (1 - hhi) * CONCENTRATION_POINTS)
    else:
        # no sectors means nothing to be diversified across
        concentration = 0.0

    overall = round_half_up(sector_diversity + share_diversity + concentration)

    return DiversificationScore(
        overall=overall,
        sectorDiversity=round_half_up(sector_diversity),
        shareDiversity=round_half_up(share_diversity),
        concentrationScore=round_half_up(concentration),
        assessment=assess_diversification(overall),
    )
