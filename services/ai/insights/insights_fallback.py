# services/ai/insights/insights_fallback.py
"""
Template-based narrative used when the language model is unavailable.

Built only from the computed analysis (or onboarding answers): no clock, no
randomness, so the same input always renders the same text.
"""
from __future__ import annotations

from typing import List, Optional

from schemas.ai_insights import (
    DiversificationScoreDetail,
    ExistingInvestorInsights,
    FundRecommendationDetail,
    InvestorAnswers,
    NewInvestorInsights,
    OverlappingSectorDetail,
    OverlappingShareDetail,
    RiskWarning,
    SuggestedSector,
)
from schemas.portfolio_analysis import BasicAnalysis, DetailedAnalysis
from services.portfolio.recommendations import determine_fund_type, expected_characteristics
from utils.common_helpers import format_amount, format_number, round_half_up, to_number

LOW_SCORE_WARNING_BELOW = 50
DEFAULT_SIP_AMOUNT = 1000
SIP_SHARE_OF_CAPACITY = 0.10
EMERGENCY_FUND_MONTHS = 6

ALLOCATION_TEMPLATES = {
    "low": "60% debt, 30% equity, 10% balanced",
    "high": "70% equity, 20% growth, 10% debt",
    "moderate": "50% equity, 30% debt, 20% hybrid",
}


def _sentence_case(s: str) -> str:
    return s[:1].lower() + s[1:] if s else s


# ============================================================================
# EXISTING INVESTOR
# ============================================================================

def build_existing_investor_fallback(
    portfolio: Optional[BasicAnalysis],
    analysis: Optional[DetailedAnalysis],
) -> ExistingInvestorInsights:
    total = (
        f"₹{format_amount(portfolio.totalInvestment)}"
        if portfolio is not None and portfolio.totalInvestment
        else "an undisclosed amount"
    )
    risk_profile = portfolio.riskProfile if portfolio is not None else "unknown"

    overlaps = analysis.overlappingShares if analysis is not None else []
    sector_overlaps = analysis.overlappingSectors if analysis is not None else []
    potential = analysis.potentialSectors if analysis is not None else []
    score = analysis.score if analysis is not None else None
    if score is not None and not score.overall:
        score = None
    fund_count = analysis.totalFunds if analysis is not None and analysis.totalFunds else "multiple"

    suggested = [p.sector for p in potential[:3]]
    suggested_text = ", ".join(suggested) if suggested else "new sectors"

    score_text = f"{score.overall}/100 ({score.assessment.level})" if score else "N/A/100"
    portfolio_health = (
        f"Your portfolio has {total} across {fund_count} funds with a {risk_profile} risk profile. "
        f"With a diversification score of {score_text}, the portfolio has moderate to high "
        "concentration risk. Reducing overlaps and adding new sectors will improve portfolio quality."
    )

    if overlaps:
        top = overlaps[0]
        names = ", ".join(o.company for o in overlaps[:2])
        overlapping_holdings = (
            f"Companies like {names} appear across multiple funds, with total exposure of "
            f"{format_number(top.totalExposurePercent)}%. This overlap means you're concentrated in "
            "the same holdings across different funds, which defeats the purpose of diversification. "
            "Consider replacing funds with overlapping holdings."
        )
    else:
        overlapping_holdings = (
            "Your portfolio shows minimal overlap in individual holdings, which is positive for "
            "true diversification."
        )

    if sector_overlaps:
        names = ", ".join(s.sector for s in sector_overlaps[:2])
        sector_congestion = (
            f"Sectors like {names} appear across {sector_overlaps[0].numberOfFunds} or more funds. "
            "This concentration increases sector-specific risk: if that sector underperforms, "
            "multiple funds will be impacted similarly. Diversify into unrepresented sectors."
        )
    else:
        sector_congestion = "Sectors are generally well-distributed without major concentration."

    if score:
        a = score.assessment
        diversification_assessment = (
            f"Your diversification score of {score.overall}/100 ({a.level}) indicates "
            f"{_sentence_case(a.description)}. To improve: {_sentence_case(a.suggestion)}. "
            f"Specifically, consider adding funds in {suggested_text}."
        )
    else:
        diversification_assessment = (
            "A diversification score is not available for this portfolio yet. To improve: add "
            f"more diverse sectors. Specifically, consider adding funds in {suggested_text}."
        )

    risk_warnings: List[RiskWarning] = []
    if overlaps:
        top = overlaps[0]
        risk_warnings.append(RiskWarning(
            title="Significant Holding Overlap",
            message=(
                f"{top.company} appears in {top.numberOfFunds} funds with "
                f"{format_number(top.totalExposurePercent)}% exposure. This overlap reduces "
                "diversification benefits and increases company-specific risk."
            ),
        ))
    if sector_overlaps:
        top_sector = sector_overlaps[0]
        risk_warnings.append(RiskWarning(
            title="Sector Concentration",
            message=(
                f"{top_sector.sector} is present across multiple funds with "
                f"{format_number(top_sector.totalExposurePercent)}% total exposure. Sector "
                "concentration increases systematic risk. Add unrepresented sectors to reduce this risk."
            ),
        ))
    if score and score.overall < LOW_SCORE_WARNING_BELOW:
        risk_warnings.append(RiskWarning(
            title="Low Diversification",
            message=(
                "Your portfolio needs significant diversification improvements. Prioritize adding "
                "funds in new sectors and replacing overlapping holdings."
            ),
        ))
    if not risk_warnings:
        risk_warnings.append(RiskWarning(
            title="Analysis data incomplete",
            message="Unable to assess specific overlaps from available data.",
        ))

    return ExistingInvestorInsights(
        portfolioHealth=portfolio_health,
        overlappingHoldings=overlapping_holdings,
        overlappingSharesDetail=[
            OverlappingShareDetail(
                company=o.company,
                numberOfFunds=o.numberOfFunds,
                funds=o.funds,
                totalExposurePercent=o.totalExposurePercent,
            )
            for o in overlaps
        ],
        sectorCongestion=sector_congestion,
        overlappingSectorsDetail=[
            OverlappingSectorDetail(
                sector=s.sector,
                numberOfFunds=s.numberOfFunds,
                funds=s.funds,
                totalExposurePercent=s.totalExposurePercent,
            )
            for s in sector_overlaps
        ],
        diversificationAssessment=diversification_assessment,
        diversificationScoreDetail=(
            DiversificationScoreDetail(
                overall=score.overall,
                level=score.assessment.level,
                sectorDiversity=score.sectorDiversity,
                shareDiversity=score.shareDiversity,
                concentrationScore=score.concentrationScore,
            )
            if score
            else None
        ),
        riskWarnings=risk_warnings[:3],
        potentialSectors=[
            SuggestedSector(
                sector=p.sector,
                reason=p.reason,
                expectedCharacteristics=expected_characteristics(p.sector),
            )
            for p in potential[:5]
        ],
        suggestedAdjustments=(
            "Step 1: Replace 1-2 funds with the highest overlap. "
            f"Step 2: Add sector funds in {suggested_text}. "
            "Step 3: Rebalance quarterly and monitor overlap. "
            "This will improve your diversification score and reduce concentration risk."
        ),
        fundRecommendations=(
            f"Explore funds focused on {suggested_text} such as sector-specific mutual funds or "
            "thematic funds. Look for funds with low expense ratios and minimal overlap with your "
            "existing holdings. Diversified index funds in new sectors can also add variety."
        ),
        fundRecommendationsDetail=[
            FundRecommendationDetail(
                sector=p.sector,
                fundType=determine_fund_type(p.sector),
                recommendation=f"Add a fund focused on {p.sector} to diversify away from current concentration.",
                rationale=p.reason or f"{p.sector} is underrepresented in your current portfolio.",
            )
            for p in potential[:3]
        ],
        riskAlignment=(
            f"Your portfolio does not fully align with a {risk_profile} profile due to concentration "
            "issues. With the suggested improvements, especially adding new sectors and reducing "
            "overlaps, it will better reflect your intended risk appetite."
        ),
        source="fallback",
    )


# ============================================================================
# NEW INVESTOR
# ============================================================================

def monthly_capacity(answers: InvestorAnswers) -> Optional[float]:
    """Declared monthly investment, or None when blank, non-numeric or not positive."""
    n = to_number(answers.monthlyInvestment)
    if n is None or n <= 0:
        return None
    return n


def build_new_investor_fallback(answers: Optional[InvestorAnswers]) -> NewInvestorInsights:
    answers = answers or InvestorAnswers()
    monthly = monthly_capacity(answers)
    recommended_emergency = (
        f"~₹{format_amount(monthly * EMERGENCY_FUND_MONTHS)}" if monthly else "6 months of expenses"
    )
    has_insurance = (answers.hasInsurance or "").strip().lower()
    has_emergency_fund = (answers.hasEmergencyFund or "").strip().lower()
    risk_appetite = (answers.riskAppetite or "moderate").strip().lower()

    readiness: List[str] = []
    if has_insurance != "no":
        readiness.append("You have insurance coverage, which is important.")
    else:
        readiness.append("You lack insurance; this is a priority before investing.")
    if has_emergency_fund == "yes":
        readiness.append("Your emergency fund is ready, so you can start investing.")
    else:
        readiness.append(f"Build an emergency fund of about {recommended_emergency}.")

    checklist: List[str] = []
    if has_emergency_fund != "yes":
        checklist.append(f"Build emergency fund ({recommended_emergency})")
    if has_insurance == "no":
        checklist.append("Get health and life insurance")
    checklist.append("Start a small SIP once safety net is in place")

    sip_amount = round_half_up(monthly * SIP_SHARE_OF_CAPACITY) if monthly else DEFAULT_SIP_AMOUNT
    allocation = ALLOCATION_TEMPLATES.get(risk_appetite, ALLOCATION_TEMPLATES["moderate"])

    return NewInvestorInsights(
        financialReadiness=" ".join(readiness),
        priorityChecklist=checklist,
        investmentGuidance=f"Suggested allocation: {allocation}. SIP: ₹{format_amount(sip_amount)}",
        nextSteps=" Then ".join(checklist[:3]),
        source="fallback",
    )
