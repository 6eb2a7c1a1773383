# services/portfolio/overlap.py
"""
Companies and sectors held through more than one fund.

One accumulation pass over every holding, then a filter on distinct fund
count. A fund counts once per entity no matter how many of its holdings map
to it; exposure still sums every holding.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from schemas.portfolio_analysis import (
    FundContribution,
    FundHolding,
    OverlappingSector,
    OverlappingShare,
)
from services.portfolio.exposure import holding_value
from utils.common_helpers import pct


@dataclass
class _Occurrences:
    funds: Dict[str, None] = field(default_factory=dict)  # ordered set of fund names
    occurrences: int = 0
    total_weight: float = 0.0
    total_exposure: float = 0.0
    details: List[FundContribution] = field(default_factory=list)

    @property
    def fund_count(self) -> int:
        return len(self.funds)

    def add(self, fund: FundHolding, weight: float) -> None:
        value = holding_value(weight, fund.amount)
        self.funds.setdefault(fund.name, None)
        self.occurrences += 1
        self.total_weight += weight
        self.total_exposure += value
        self.details.append(FundContribution(fundName=fund.name, weight=weight, exposure=value))


def _accumulate(funds: Sequence[FundHolding], *, by: str) -> Dict[str, _Occurrences]:
    acc: Dict[str, _Occurrences] = {}
    for fund in funds:
        for h in fund.holdings:
            key = h.company if by == "company" else h.sector
            acc.setdefault(key, _Occurrences()).add(fund, h.weight)
    return acc


def find_overlapping_companies(
    funds: Sequence[FundHolding],
    total_investment: float,
    *,
    sort: bool = True,
) -> List[OverlappingShare]:
    """Companies present in 2+ distinct funds, most widely held first (stable on ties)."""
    if total_investment <= 0:
        return []

    rows = [
        OverlappingShare(
            company=company,
            numberOfFunds=occ.fund_count,
            funds=list(occ.funds),
            totalExposurePercent=pct(occ.total_exposure, total_investment, 2),
            averageWeight=round(occ.total_weight / occ.occurrences, 2),
            fundDetails=occ.details,
        )
        for company, occ in _accumulate(funds, by="company").items()
        if occ.fund_count > 1
    ]
    if sort:
        rows.sort(key=lambda r: r.numberOfFunds, reverse=True)
    return rows


def find_overlapping_sectors(
    funds: Sequence[FundHolding],
    total_investment: float,
) -> List[OverlappingSector]:
    if total_investment <= 0:
        return []

    rows = [
        OverlappingSector(
            sector=sector,
            numberOfFunds=occ.fund_count,
            funds=list(occ.funds),
            totalExposurePercent=pct(occ.total_exposure, total_investment, 2),
        )
        for sector, occ in _accumulate(funds, by="sector").items()
        if occ.fund_count > 1
    ]
    rows.sort(key=lambda r: r.numberOfFunds, reverse=True)
    return rows
