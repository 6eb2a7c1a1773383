# services/ai/insights/insights_service.py
"""
AI insights for new and existing investors.

The language model is an optional collaborator. `request_narrative` never
raises: it returns either a validated narrative or a `CollaboratorError`.
`generate_insights` turns any `CollaboratorError` into the deterministic
fallback, so callers always get a response matching the schema.
"""
from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Tuple, Type, Union

from pydantic import ValidationError

from schemas.ai_insights import (
    ExistingInvestorInsights,
    Insights,
    InvestorAnswers,
    NewInvestorInsights,
)
from schemas.portfolio_analysis import BasicAnalysis, DetailedAnalysis
from services.ai.insights.insights_fallback import (
    build_existing_investor_fallback,
    build_new_investor_fallback,
)
from services.ai.insights.insights_prompts import (
    EXISTING_INVESTOR_SYSTEM_PROMPT,
    NEW_INVESTOR_SYSTEM_PROMPT,
    build_basic_prompt,
    build_detailed_prompt,
    build_new_investor_prompt,
)
from services.ai.llm_service import LLMNotConfiguredError, get_llm_service

logger = logging.getLogger(__name__)

UserType = Literal["new", "existing"]

INSIGHTS_TIMEOUT_S = float(os.getenv("INSIGHTS_TIMEOUT_S", "30"))


@dataclass(frozen=True)
class InsightsRequest:
    user_type: UserType
    answers: Optional[InvestorAnswers] = None
    portfolio: Optional[BasicAnalysis] = None
    analysis: Optional[DetailedAnalysis] = None

    @property
    def uses_detailed_prompt(self) -> bool:
        return (
            self.user_type == "existing"
            and self.analysis is not None
            and bool(self.analysis.totalFunds)
        )


@dataclass(frozen=True)
class CollaboratorError:
    kind: Literal["unconfigured", "timeout", "upstream", "invalid_response"]
    detail: str = ""


NarrativeResult = Union[ExistingInvestorInsights, NewInvestorInsights, CollaboratorError]


def build_prompt(req: InsightsRequest) -> Tuple[str, str, Type[Insights]]:
    """(system, user, response model) for a request."""
    if req.user_type == "new":
        return (
            NEW_INVESTOR_SYSTEM_PROMPT,
            build_new_investor_prompt(req.answers or InvestorAnswers()),
            NewInvestorInsights,
        )
    if req.uses_detailed_prompt:
        user = build_detailed_prompt(req.analysis, req.portfolio)
    else:
        user = build_basic_prompt(req.portfolio)
    return EXISTING_INVESTOR_SYSTEM_PROMPT, user, ExistingInvestorInsights


def build_fallback(req: InsightsRequest) -> Insights:
    if req.user_type == "new":
        return build_new_investor_fallback(req.answers)
    return build_existing_investor_fallback(req.portfolio, req.analysis)


async def request_narrative(
    req: InsightsRequest,
    *,
    llm: Any = None,
    timeout_s: float = INSIGHTS_TIMEOUT_S,
) -> NarrativeResult:
    try:
        llm = llm or get_llm_service()
    except LLMNotConfiguredError as e:
        return CollaboratorError("unconfigured", str(e))
    except Exception as e:
        # malformed provider settings, e.g. AI_TEMPERATURE=warm
        return CollaboratorError("unconfigured", f"{type(e).__name__}: {e}")

    system, user, model = build_prompt(req)

    try:
        data: Dict[str, Any] = await asyncio.wait_for(
            llm.generate_json(system=system, user=user),
            timeout=timeout_s,
        )
    except asyncio.TimeoutError:
        return CollaboratorError("timeout", f"no response within {timeout_s:.0f}s")
    except ValueError as e:
        # unparsable JSON out of the model
        return CollaboratorError("invalid_response", str(e))
    except Exception as e:
        return CollaboratorError("upstream", f"{type(e).__name__}: {e}")

    try:
        return model.model_validate(data)
    except ValidationError as e:
        return CollaboratorError("invalid_response", f"{e.error_count()} schema errors")


async def generate_insights(
    user_type: UserType,
    *,
    answers: Optional[InvestorAnswers] = None,
    portfolio_data: Optional[BasicAnalysis] = None,
    analysis_data: Optional[DetailedAnalysis] = None,
    llm: Any = None,
    timeout_s: float = INSIGHTS_TIMEOUT_S,
) -> Insights:
    req = InsightsRequest(
        user_type=user_type,
        answers=answers,
        portfolio=portfolio_data,
        analysis=analysis_data,
    )
    result = await request_narrative(req, llm=llm, timeout_s=timeout_s)

    if isinstance(result, CollaboratorError):
        logger.warning(
            "insights_fallback user_type=%s reason=%s detail=%s",
            user_type, result.kind, result.detail,
        )
        return build_fallback(req)

    logger.info("insights_generated user_type=%s detailed=%s", user_type, req.uses_detailed_prompt)
    return result
