# schemas/portfolio_analysis.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# INPUT
# ============================================================================

class Holding(BaseModel):
    model_config = ConfigDict(frozen=True)

    company: str = Field(..., min_length=1)
    sector: str = Field(..., min_length=1)
    weight: float = Field(..., ge=0, le=100)  # % of the fund's assets


class FundHolding(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)  # invested amount, currency units
    holdings: List[Holding] = Field(default_factory=list)


# ============================================================================
# BASIC ANALYSIS
# ============================================================================

class SectorSlice(BaseModel):
    name: str
    value: float  # % of portfolio, 1dp


class CompanyExposure(BaseModel):
    name: str
    exposure: float  # % of portfolio, 2dp


class OverlapWarning(BaseModel):
    company: str
    fundCount: int
    exposure: float


class AnalysisWarning(BaseModel):
    type: Literal["sector", "overlap", "diversification"]
    title: str
    message: str


class BasicAnalysis(BaseModel):
    totalInvestment: float = 0
    sectorDistribution: List[SectorSlice] = Field(default_factory=list)
    companyExposure: List[CompanyExposure] = Field(default_factory=list)
    sectorExposure: Dict[str, float] = Field(default_factory=dict)
    overlapWarnings: List[OverlapWarning] = Field(default_factory=list)
    warnings: List[AnalysisWarning] = Field(default_factory=list)
    riskProfile: str = "Balanced"

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


# ============================================================================
# DETAILED ANALYSIS
# ============================================================================

class FundContribution(BaseModel):
    fundName: str
    weight: float
    exposure: float  # absolute currency value


class OverlappingShare(BaseModel):
    company: str
    numberOfFunds: int
    funds: List[str]
    totalExposurePercent: float
    averageWeight: float
    fundDetails: List[FundContribution] = Field(default_factory=list)


class OverlappingSector(BaseModel):
    sector: str
    numberOfFunds: int
    funds: List[str]
    totalExposurePercent: float


class Assessment(BaseModel):
    level: str
    description: str
    suggestion: str


class DiversificationScore(BaseModel):
    overall: int = Field(..., ge=0, le=100)
    sectorDiversity: int = Field(..., ge=0, le=30)
    shareDiversity: int = Field(..., ge=0, le=40)
    concentrationScore: int = Field(..., ge=0, le=30)
    assessment: Assessment


class PotentialSector(BaseModel):
    sector: str
    reason: str


class FundRecommendation(BaseModel):
    sector: str
    recommendation: str
    rationale: str
    fundType: str
    expectedCharacteristics: List[str] = Field(default_factory=list)


class DetailedAnalysis(BaseModel):
    totalFunds: int = 0
    totalInvestment: float = 0
    # absent from the empty-portfolio payload
    uniqueSectors: Optional[int] = None
    uniqueShares: Optional[int] = None
    overlappingShares: List[OverlappingShare] = Field(default_factory=list)
    overlappingSectors: List[OverlappingSector] = Field(default_factory=list)
    # bare 0 for an empty portfolio, kept for existing callers
    diversificationScore: Union[DiversificationScore, int] = 0
    potentialSectors: List[PotentialSector] = Field(default_factory=list)
    fundRecommendations: List[FundRecommendation] = Field(default_factory=list)

    @property
    def score(self) -> Optional[DiversificationScore]:
        if isinstance(self.diversificationScore, DiversificationScore):
            return self.diversificationScore
        return None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
