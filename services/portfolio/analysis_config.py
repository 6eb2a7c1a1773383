# services/portfolio/analysis_config.py
"""
Static tables used by the portfolio analysis engine.

Everything here is built once at import and never mutated: tuples for lists,
MappingProxyType for dicts.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple


@dataclass(frozen=True)
class SectorLimits:
    max_sector_pct: float
    reference_sectors: Tuple[str, ...]


RISK_PROFILE_LIMITS: Mapping[str, SectorLimits] = MappingProxyType({
    "Conservative": SectorLimits(30, ("Banking", "IT")),
    "Balanced": SectorLimits(40, ("Banking", "IT", "Energy")),
    "Aggressive": SectorLimits(50, ("Banking", "IT", "Energy", "FMCG")),
})

DEFAULT_RISK_PROFILE = "Balanced"

OVERLAP_WARNING_PCT = 10.0  # company exposure (% of portfolio) that triggers a warning
MIN_SECTOR_COUNT = 5
# sector share must beat its limit by more than float noise (0.3 * 100 != 30)
SHARE_EPSILON = 1e-9

# Diversification caps: this many distinct sectors / companies earns full marks
SECTOR_COUNT_CAP = 10
COMPANY_COUNT_CAP = 30
SECTOR_DIVERSITY_POINTS = 30
SHARE_DIVERSITY_POINTS = 40
CONCENTRATION_POINTS = 30

MAX_FUND_RECOMMENDATIONS = 5

# Common Indian market sectors
COMMON_SECTORS: Tuple[str, ...] = (
    "Financial Services",
    "Information Technology",
    "Banking",
    "Insurance",
    "FMCG",
    "Healthcare",
    "Pharmaceuticals",
    "Utilities",
    "Telecommunications",
    "Consumer Discretionary",
    "Real Estate",
    "Energy",
    "Oil & Gas",
    "Infrastructure",
    "Industrial Manufacturing",
    "Materials",
    "Metals",
    "Automobiles",
    "Construction",
    "Media & Entertainment",
)

SECTOR_FUND_TYPES: Mapping[str, str] = MappingProxyType({
    "Financial Services": "Sector Fund / Focused Fund",
    "Information Technology": "Sector Fund / Tech Fund",
    "Banking": "Sector Fund / Banking Fund",
    "Insurance": "Sector Fund / Financial Services Fund",
    "FMCG": "Sector Fund / FMCG Fund",
    "Healthcare": "Sector Fund / Healthcare Fund",
    "Pharmaceuticals": "Sector Fund / Healthcare Fund",
    "Utilities": "Sector Fund / Infrastructure Fund",
    "Telecommunications": "Sector Fund / Telecom Fund",
    "Consumer Discretionary": "Thematic Fund",
    "Real Estate": "Sector Fund / Realty Fund",
    "Energy": "Sector Fund / Energy Fund",
    "Oil & Gas": "Sector Fund / Energy Fund",
    "Infrastructure": "Sector Fund / Infrastructure Fund",
    "Industrial Manufacturing": "Sector Fund",
    "Materials": "Sector Fund / Commodities Fund",
    "Metals": "Thematic Fund / Commodities Fund",
    "Automobiles": "Sector Fund / Auto Fund",
    "Construction": "Sector Fund / Construction Fund",
    "Media & Entertainment": "Thematic Fund",
})
DEFAULT_FUND_TYPE = "Sector Fund"

SECTOR_CHARACTERISTICS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Financial Services": ("Growth potential", "Cyclical", "Market-sensitive"),
    "Information Technology": ("High growth", "Volatile", "Global exposure"),
    "Banking": ("Stable returns", "Dividend-paying", "Interest rate sensitive"),
    "Insurance": ("Stable earnings", "Growth potential", "Regulatory sensitive"),
    "FMCG": ("Defensive", "Stable", "Inflation hedge"),
    "Healthcare": ("Growth", "Defensive", "Regulatory risks"),
    "Pharmaceuticals": ("Growth", "Quality earnings", "Global demand"),
    "Utilities": ("Defensive", "Dividend-paying", "Regular returns"),
    "Telecommunications": ("Stable", "Cyclical", "Infrastructure"),
    "Consumer Discretionary": ("Cyclical", "Growth", "Discretionary spending"),
    "Real Estate": ("Cyclical", "Growth", "Interest-rate sensitive"),
    "Energy": ("Cyclical", "Commodity-dependent", "High volatility"),
    "Oil & Gas": ("Commodity-dependent", "High volatility", "Capital intensive"),
    "Infrastructure": ("Growth", "Long-term", "Policy dependent"),
    "Industrial Manufacturing": ("Cyclical", "Economic growth dependent", "Volatile"),
    "Materials": ("Cyclical", "Commodity-dependent", "Global demand"),
    "Metals": ("Commodity-dependent", "Inflation hedge", "Volatile"),
    "Automobiles": ("Cyclical", "Growth potential", "Economic sensitive"),
    "Construction": ("Cyclical", "Growth", "Policy dependent"),
    "Media & Entertainment": ("Cyclical", "Growth", "Discretionary spending"),
})
DEFAULT_CHARACTERISTICS: Tuple[str, ...] = ("Growth potential", "Diversification")

# (min overall score, level, description, suggestion), checked top-down
ASSESSMENT_BANDS: Tuple[Tuple[int, str, str, str], ...] = (
    (
        80,
        "Excellent",
        "Your portfolio is very well-diversified across sectors and holdings with low concentration risk",
        "Maintain current diversification and rebalance periodically",
    ),
    (
        60,
        "Good",
        "Your portfolio has reasonable diversification but can be improved",
        "Consider adding 1-2 funds in underrepresented sectors",
    ),
    (
        40,
        "Fair",
        "Your portfolio shows concentration in certain sectors or stocks",
        "Diversify into new sectors and reduce overlap with existing holdings",
    ),
    (
        0,
        "Poor",
        "Your portfolio is concentrated with high overlap and limited sector diversity",
        "Prioritize adding funds in new sectors and replacing overlapping funds",
    ),
)
