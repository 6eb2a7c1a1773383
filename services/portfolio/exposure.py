# services/portfolio/exposure.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Literal, Mapping, Sequence

from schemas.portfolio_analysis import FundHolding
from utils.common_helpers import pct

ExposureKind = Literal["sector", "company"]


@dataclass(frozen=True)
class ExposureEntry:
    key: str
    absolute_value: float
    percent_of_portfolio: float


@dataclass(frozen=True)
class PortfolioExposure:
    """
    Absolute currency exposure per sector and per company across all funds.
    Maps keep first-appearance order.
    """

    total_investment: float
    sector_values: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    company_values: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_empty(self) -> bool:
        return self.total_investment <= 0

    def _values(self, kind: ExposureKind) -> Mapping[str, float]:
        return self.sector_values if kind == "sector" else self.company_values

    def percentages(self, kind: ExposureKind, digits: int) -> Dict[str, float]:
        if self.is_empty:
            return {}
        return {
            key: pct(value, self.total_investment, digits)
            for key, value in self._values(kind).items()
        }

    def entries(self, kind: ExposureKind, digits: int) -> List[ExposureEntry]:
        """Exposure entries, largest share first."""
        if self.is_empty:
            return []
        rows = [
            ExposureEntry(
                key=key,
                absolute_value=value,
                percent_of_portfolio=pct(value, self.total_investment, digits),
            )
            for key, value in self._values(kind).items()
        ]
        return sorted(rows, key=lambda e: e.percent_of_portfolio, reverse=True)


def holding_value(weight: float, amount: float) -> float:
    return (weight / 100.0) * amount


def aggregate_exposure(funds: Sequence[FundHolding]) -> PortfolioExposure:
    total_investment = sum(f.amount for f in funds)
    if total_investment <= 0:
        return PortfolioExposure(total_investment=total_investment)

    sectors: Dict[str, float] = {}
    companies: Dict[str, float] = {}
    for fund in funds:
        for h in fund.holdings:
            value = holding_value(h.weight, fund.amount)
            sectors[h.sector] = sectors.get(h.sector, 0.0) + value
            companies[h.company] = companies.get(h.company, 0.0) + value

    return PortfolioExposure(
        total_investment=total_investment,
        sector_values=MappingProxyType(sectors),
        company_values=MappingProxyType(companies),
    )
