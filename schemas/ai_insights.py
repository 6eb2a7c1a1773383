# schemas/ai_insights.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

NarrativeSource = Literal["ai", "fallback"]


# ============================================================================
# NEW INVESTOR
# ============================================================================

class InvestorAnswers(BaseModel):
    """Onboarding answers of a first-time investor. Every field is optional."""
    model_config = ConfigDict(extra="ignore")

    hasInsurance: Optional[str] = None        # "yes" / "no"
    hasEmergencyFund: Optional[str] = None    # "yes" / "no"
    monthlyInvestment: Optional[Union[float, str]] = None  # free text allowed
    riskAppetite: Optional[str] = None        # low / moderate / high
    investmentHorizon: Optional[str] = None   # short / medium / long

    @field_validator("hasInsurance", "hasEmergencyFund", mode="before")
    @classmethod
    def _yes_no(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return "yes" if v else "no"
        return v


class NewInvestorInsights(BaseModel):
    model_config = ConfigDict(extra="ignore")

    financialReadiness: str
    priorityChecklist: List[str] = Field(default_factory=list)
    investmentGuidance: str
    nextSteps: str
    source: NarrativeSource = Field("ai", serialization_alias="_source")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ============================================================================
# EXISTING INVESTOR
# ============================================================================

class RiskWarning(BaseModel):
    title: str
    message: str


class OverlappingShareDetail(BaseModel):
    company: str
    numberOfFunds: int
    funds: List[str] = Field(default_factory=list)
    totalExposurePercent: float


class OverlappingSectorDetail(BaseModel):
    sector: str
    numberOfFunds: int
    funds: List[str] = Field(default_factory=list)
    totalExposurePercent: float


class DiversificationScoreDetail(BaseModel):
    overall: int
    level: str
    sectorDiversity: int
    shareDiversity: int
    concentrationScore: int


class SuggestedSector(BaseModel):
    sector: str
    reason: str
    expectedCharacteristics: List[str] = Field(default_factory=list)


class FundRecommendationDetail(BaseModel):
    sector: str
    fundType: str
    recommendation: str
    rationale: str


class ExistingInvestorInsights(BaseModel):
    """
    Narrative for an investor with a portfolio.

    The five core sections come back from both prompts; the overlap and
    diversification sections only when a detailed analysis was available.
    """
    model_config = ConfigDict(extra="ignore")

    portfolioHealth: str
    riskWarnings: List[RiskWarning] = Field(default_factory=list)
    sectorCongestion: str
    suggestedAdjustments: str
    riskAlignment: str

    overlappingHoldings: Optional[str] = None
    overlappingSharesDetail: Optional[List[OverlappingShareDetail]] = None
    overlappingSectorsDetail: Optional[List[OverlappingSectorDetail]] = None
    diversificationAssessment: Optional[str] = None
    diversificationScoreDetail: Optional[DiversificationScoreDetail] = None
    potentialSectors: Optional[List[SuggestedSector]] = None
    fundRecommendations: Optional[str] = None
    fundRecommendationsDetail: Optional[List[FundRecommendationDetail]] = None

    source: NarrativeSource = Field("ai", serialization_alias="_source")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


Insights = Union[ExistingInvestorInsights, NewInvestorInsights]
