# services/portfolio/risk_profile.py
from __future__ import annotations

from enum import Enum
from typing import Optional

from services.portfolio.analysis_config import (
    DEFAULT_RISK_PROFILE,
    RISK_PROFILE_LIMITS,
    SectorLimits,
)


class RiskProfile(str, Enum):
    CONSERVATIVE = "Conservative"
    BALANCED = "Balanced"
    AGGRESSIVE = "Aggressive"

    @property
    def limits(self) -> SectorLimits:
        return RISK_PROFILE_LIMITS[self.value]


def resolve_risk_profile(value: Optional[str]) -> RiskProfile:
    """Unknown or missing profiles fall back to Balanced."""
    if isinstance(value, RiskProfile):
        return value
    try:
        return RiskProfile((value or "").strip())
    except ValueError:
        return RiskProfile(DEFAULT_RISK_PROFILE)


def derive_risk_profile(
    investment_horizon: Optional[str],
    risk_appetite: Optional[str],
) -> RiskProfile:
    """Map onboarding answers (short/medium/long, low/moderate/high) to a profile."""
    horizon = (investment_horizon or "").strip().lower()
    appetite = (risk_appetite or "").strip().lower()

    if horizon == "short" and appetite == "low":
        return RiskProfile.CONSERVATIVE
    if horizon == "long" and appetite == "high":
        return RiskProfile.AGGRESSIVE
    return RiskProfile.BALANCED
