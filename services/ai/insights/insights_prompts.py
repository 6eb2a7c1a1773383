# services/ai/insights/insights_prompts.py
from __future__ import annotations

import json
from typing import List, Optional

from schemas.ai_insights import InvestorAnswers
from schemas.portfolio_analysis import (
    BasicAnalysis,
    DetailedAnalysis,
    DiversificationScore,
    OverlappingSector,
    OverlappingShare,
    PotentialSector,
)
from utils.common_helpers import format_amount, format_number

PROMPT_LIST_LIMIT = 5


# ============================================================================
# SYSTEM PROMPTS
# ============================================================================

EXISTING_INVESTOR_SYSTEM_PROMPT = """You are a financial advisor reviewing a REAL mutual fund portfolio for a retail investor in India.

Rules:
- Base every statement ONLY on the portfolio data provided
- Explain WHY something is risky or good, in simple language
- No fund names - only fund categories and types
- No future return predictions
- Educational, neutral tone

You always respond with valid JSON matching the requested schema. No markdown."""


NEW_INVESTOR_SYSTEM_PROMPT = """You are a friendly financial mentor guiding a FIRST-TIME investor in India.

Rules:
- Focus on financial safety first
- No fund names
- No return promises
- No selling or aggressive language
- Beginner-friendly, educational tone

You always respond with valid JSON matching the requested schema. No markdown."""


# ============================================================================
# USER PROMPTS
# ============================================================================

DETAILED_PORTFOLIO_PROMPT = """Analyze this portfolio using the overlap and diversification analysis below.

DETAILED PORTFOLIO DATA:
- Total Funds: {total_funds}
- Total Investment: {total_investment}
- Risk Profile: {risk_profile}
- Unique Sectors: {unique_sectors}
- Unique Holdings: {unique_shares}

OVERLAPPING SHARES (Concentration Risk):
{overlapping_shares}

OVERLAPPING SECTORS:
{overlapping_sectors}

DIVERSIFICATION ASSESSMENT:
{diversification}

POTENTIAL SECTORS TO ADD:
{potential_sectors}

Instructions:
- Reference SPECIFIC shares and sectors from the analysis
- Explain HOW the overlaps reduce the benefits of diversification
- Use the diversification score (0-100) to assess portfolio quality
- Recommend adding the listed potential sectors ONLY
- Each text section should be 3-4 sentences

Respond with a JSON object matching this exact schema:
{{
  "portfolioHealth": "overall portfolio health with specific reference to overlaps",
  "overlappingHoldings": "which shares appear in multiple funds and the impact",
  "overlappingSharesDetail": [
    {{"company": "Company Name", "numberOfFunds": 3, "funds": ["Fund1", "Fund2", "Fund3"], "totalExposurePercent": 15}}
  ],
  "sectorCongestion": "overlapping sectors and concentration",
  "overlappingSectorsDetail": [
    {{"sector": "Sector Name", "numberOfFunds": 3, "funds": ["Fund1", "Fund2", "Fund3"], "totalExposurePercent": 35}}
  ],
  "diversificationAssessment": "assessment based on the diversification score with suggestions",
  "diversificationScoreDetail": {{"overall": 65, "level": "Good", "sectorDiversity": 20, "shareDiversity": 26, "concentrationScore": 19}},
  "riskWarnings": [
    {{"title": "specific risk with numbers", "message": "2-3 sentences with examples from the data"}}
  ],
  "potentialSectors": [
    {{"sector": "Sector Name", "reason": "why it is worth adding", "expectedCharacteristics": ["Growth", "Stability"]}}
  ],
  "suggestedAdjustments": "step-by-step rebalancing guidance including which sectors to add",
  "fundRecommendations": "fund types and categories for the recommended sectors",
  "fundRecommendationsDetail": [
    {{"sector": "Sector Name", "fundType": "Sector-Specific Mutual Fund", "recommendation": "Add a fund focused on ...", "rationale": "..."}}
  ],
  "riskAlignment": "portfolio vs risk profile"
}}"""


BASIC_PORTFOLIO_PROMPT = """Analyze this portfolio.

PORTFOLIO DATA:
- Total Investment: {total_investment}
- Risk Profile: {risk_profile}
- Sector Exposure (% of portfolio): {sector_exposure}
- Fund Overlaps: {overlap_warnings}
- Top Holdings: {top_holdings}

Instructions:
- Be specific and practical
- Each explanation should be at least 3-4 sentences

Respond with a JSON object matching this exact schema:
{{
  "portfolioHealth": "detailed explanation",
  "riskWarnings": [
    {{"title": "clear risk title", "message": "2-3 sentence explanation of the risk"}}
  ],
  "sectorCongestion": "which sectors are overexposed and why it matters",
  "suggestedAdjustments": "step-by-step diversification guidance (no fund names)",
  "riskAlignment": "whether the portfolio suits the risk profile"
}}"""


NEW_INVESTOR_PROMPT = """User details:
- Insurance: {has_insurance}
- Emergency Fund (6 months): {has_emergency_fund}
- Monthly Investment Capacity: {monthly_investment}
- Risk Appetite: {risk_appetite}
- Investment Horizon: {investment_horizon}

Explain concepts clearly and calmly; each explanation must be 3-4 sentences.

Respond with a JSON object matching this exact schema:
{{
  "financialReadiness": "whether the user is ready to invest and why",
  "priorityChecklist": [
    "actionable step with reason",
    "actionable step with reason",
    "actionable step with reason"
  ],
  "investmentGuidance": "how and when the user should start investing",
  "nextSteps": "clear next 2-3 actions"
}}"""


# ============================================================================
# FORMATTERS
# ============================================================================

def _or_unknown(v) -> str:
    return "unknown" if v in (None, "") else str(v)


def format_overlapping_shares(shares: List[OverlappingShare]) -> str:
    if not shares:
        return "No significant overlapping shares detected."
    return "\n".join(
        f"- {s.company}: Found in {s.numberOfFunds} funds ({', '.join(s.funds[:3])}), "
        f"Total Exposure: {format_number(s.totalExposurePercent)}%"
        for s in shares[:PROMPT_LIST_LIMIT]
    )


def format_overlapping_sectors(sectors: List[OverlappingSector]) -> str:
    if not sectors:
        return "Sectors are well-distributed across funds."
    return "\n".join(
        f"- {s.sector}: Present in {s.numberOfFunds} funds ({', '.join(s.funds[:3])}), "
        f"Total Exposure: {format_number(s.totalExposurePercent)}%"
        for s in sectors[:PROMPT_LIST_LIMIT]
    )


def format_diversification_score(score: Optional[DiversificationScore]) -> str:
    if score is None or not score.overall:
        return "Diversification data not available."
    a = score.assessment
    return f"Overall Score: {score.overall}/100 ({a.level}). {a.description}. {a.suggestion}"


def format_potential_sectors(sectors: List[PotentialSector]) -> str:
    if not sectors:
        return "All major sectors are already represented."
    return "\n".join(f"- {s.sector}: {s.reason}" for s in sectors[:PROMPT_LIST_LIMIT])


def _total(portfolio: Optional[BasicAnalysis]) -> str:
    if portfolio is None or not portfolio.totalInvestment:
        return "unknown"
    return f"₹{format_amount(portfolio.totalInvestment)}"


def build_detailed_prompt(analysis: DetailedAnalysis, portfolio: Optional[BasicAnalysis]) -> str:
    return DETAILED_PORTFOLIO_PROMPT.format(
        total_funds=_or_unknown(analysis.totalFunds or None),
        total_investment=_total(portfolio),
        risk_profile=_or_unknown(portfolio.riskProfile if portfolio else None),
        unique_sectors=_or_unknown(analysis.uniqueSectors or None),
        unique_shares=_or_unknown(analysis.uniqueShares or None),
        overlapping_shares=format_overlapping_shares(analysis.overlappingShares),
        overlapping_sectors=format_overlapping_sectors(analysis.overlappingSectors),
        diversification=format_diversification_score(analysis.score),
        potential_sectors=format_potential_sectors(analysis.potentialSectors),
    )


def build_basic_prompt(portfolio: Optional[BasicAnalysis]) -> str:
    p = portfolio or BasicAnalysis()
    return BASIC_PORTFOLIO_PROMPT.format(
        total_investment=_total(portfolio),
        risk_profile=_or_unknown(portfolio.riskProfile if portfolio else None),
        sector_exposure=json.dumps(p.sectorExposure, ensure_ascii=False),
        overlap_warnings=json.dumps([w.model_dump() for w in p.overlapWarnings], ensure_ascii=False),
        top_holdings=json.dumps([c.model_dump() for c in p.companyExposure[:5]], ensure_ascii=False),
    )


def build_new_investor_prompt(answers: InvestorAnswers) -> str:
    monthly = answers.monthlyInvestment
    if isinstance(monthly, (int, float)):
        monthly = format_amount(monthly)
    return NEW_INVESTOR_PROMPT.format(
        has_insurance=_or_unknown(answers.hasInsurance),
        has_emergency_fund=_or_unknown(answers.hasEmergencyFund),
        monthly_investment=f"₹{monthly}" if monthly not in (None, "") else "unknown",
        risk_appetite=_or_unknown(answers.riskAppetite),
        investment_horizon=_or_unknown(answers.investmentHorizon),
    )
