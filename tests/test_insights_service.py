import asyncio
import unittest
from unittest.mock import patch

from schemas.ai_insights import ExistingInvestorInsights, InvestorAnswers, NewInvestorInsights
from services.ai.insights.insights_service import (
    CollaboratorError,
    InsightsRequest,
    build_prompt,
    generate_insights,
    request_narrative,
)
from services.ai.llm_service import (
    LLMConfig,
    LLMNotConfiguredError,
    LLMService,
    OpenAIClient,
)
from services.portfolio.portfolio_analyzer import analyze_portfolio, analyze_portfolio_detailed

FUNDS = [
    {"name": "Fund A", "amount": 60000, "holdings": [
        {"company": "HDFC Bank", "sector": "Banking", "weight": 40},
        {"company": "Infosys", "sector": "IT", "weight": 60},
    ]},
    {"name": "Fund B", "amount": 40000, "holdings": [
        {"company": "HDFC Bank", "sector": "Banking", "weight": 50},
        {"company": "ITC", "sector": "FMCG", "weight": 50},
    ]},
]

EXISTING_PAYLOAD = {
    "portfolioHealth": "Concentrated in banking.",
    "riskWarnings": [{"title": "Overlap", "message": "HDFC Bank is in both funds."}],
    "sectorCongestion": "Banking dominates.",
    "suggestedAdjustments": "Add a pharma fund.",
    "riskAlignment": "Too aggressive for a balanced investor.",
}

NEW_PAYLOAD = {
    "financialReadiness": "Ready.",
    "priorityChecklist": ["Start SIP"],
    "investmentGuidance": "Index funds.",
    "nextSteps": "Open an account.",
}


class _FakeLLM:
    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    async def generate_json(self, *, system: str, user: str):
        self.calls.append((system, user))
        return self.payload


class _FailingLLM:
    async def generate_json(self, *, system: str, user: str):
        raise RuntimeError("LLM unavailable")


class _GarbageLLM:
    async def generate_json(self, *, system: str, user: str):
        raise ValueError("Expected a JSON object")


class _SlowLLM:
    async def generate_json(self, *, system: str, user: str):
        await asyncio.sleep(5)
        return EXISTING_PAYLOAD


class _RawTextClient:
    async def generate_json(self, *, system: str, user: str) -> str:
        return '```json\n{"ok": true,}\n```'


def _existing_request():
    return InsightsRequest(
        user_type="existing",
        portfolio=analyze_portfolio(FUNDS, "Balanced"),
        analysis=analyze_portfolio_detailed(FUNDS),
    )


class TestRequestNarrative(unittest.IsolatedAsyncioTestCase):
    async def test_success_returns_validated_narrative(self):
        llm = _FakeLLM(EXISTING_PAYLOAD)
        result = await request_narrative(_existing_request(), llm=llm)
        self.assertIsInstance(result, ExistingInvestorInsights)
        self.assertEqual(result.portfolioHealth, "Concentrated in banking.")
        self.assertEqual(result.source, "ai")
        self.assertEqual(len(llm.calls), 1)

    async def test_upstream_failure(self):
        result = await request_narrative(_existing_request(), llm=_FailingLLM())
        self.assertEqual(result.kind, "upstream")
        self.assertIn("LLM unavailable", result.detail)

    async def test_unparsable_output(self):
        result = await request_narrative(_existing_request(), llm=_GarbageLLM())
        self.assertEqual(result, CollaboratorError("invalid_response", "Expected a JSON object"))

    async def test_schema_mismatch(self):
        result = await request_narrative(_existing_request(), llm=_FakeLLM({"portfolioHealth": "only"}))
        self.assertIsInstance(result, CollaboratorError)
        self.assertEqual(result.kind, "invalid_response")

    async def test_timeout(self):
        result = await request_narrative(_existing_request(), llm=_SlowLLM(), timeout_s=0.01)
        self.assertIsInstance(result, CollaboratorError)
        self.assertEqual(result.kind, "timeout")

    async def test_unconfigured_provider(self):
        with patch(
            "services.ai.insights.insights_service.get_llm_service",
            side_effect=LLMNotConfiguredError("Missing GEMINI_API_KEY or GCP_PROJECT_ID"),
        ):
            result = await request_narrative(_existing_request())
        self.assertEqual(result.kind, "unconfigured")

    async def test_malformed_provider_settings(self):
        env = {"AI_TEMPERATURE": "warm", "GEMINI_API_KEY": "k"}
        with patch.dict("os.environ", env, clear=False), patch(
            "services.ai.llm_service._llm_singleton", None
        ):
            result = await request_narrative(_existing_request())
            insights = await generate_insights("new", answers=InvestorAnswers())
        self.assertEqual(result.kind, "unconfigured")
        self.assertIn("ValueError", result.detail)
        self.assertEqual(insights.source, "fallback")


class TestGenerateInsights(unittest.IsolatedAsyncioTestCase):
    async def test_existing_investor_ai_narrative(self):
        req = _existing_request()
        insights = await generate_insights(
            "existing",
            portfolio_data=req.portfolio,
            analysis_data=req.analysis,
            llm=_FakeLLM(EXISTING_PAYLOAD),
        )
        d = insights.to_dict()
        self.assertEqual(d["_source"], "ai")
        self.assertEqual(d["sectorCongestion"], "Banking dominates.")
        self.assertNotIn("overlappingSharesDetail", d)

    async def test_failure_falls_back_deterministically(self):
        req = _existing_request()
        first = await generate_insights(
            "existing", portfolio_data=req.portfolio, analysis_data=req.analysis, llm=_FailingLLM(),
        )
        second = await generate_insights(
            "existing", portfolio_data=req.portfolio, analysis_data=req.analysis, llm=_GarbageLLM(),
        )
        self.assertEqual(first.source, "fallback")
        self.assertEqual(first.to_dict(), second.to_dict())

    async def test_new_investor_unconfigured_uses_fallback(self):
        with patch(
            "services.ai.insights.insights_service.get_llm_service",
            side_effect=LLMNotConfiguredError("Missing GEMINI_API_KEY or GCP_PROJECT_ID"),
        ):
            insights = await generate_insights("new", answers=InvestorAnswers(riskAppetite="high"))
        self.assertIsInstance(insights, NewInvestorInsights)
        self.assertEqual(insights.source, "fallback")
        self.assertIn("70% equity", insights.investmentGuidance)

    async def test_new_investor_ai_narrative(self):
        llm = _FakeLLM(NEW_PAYLOAD)
        insights = await generate_insights("new", answers=InvestorAnswers(monthlyInvestment="5000"), llm=llm)
        self.assertEqual(insights.source, "ai")
        self.assertEqual(insights.priorityChecklist, ["Start SIP"])
        self.assertIn("₹5000", llm.calls[0][1])


class TestBuildPrompt(unittest.TestCase):
    def test_detailed_prompt_when_analysis_available(self):
        system, user, model = build_prompt(_existing_request())
        self.assertIs(model, ExistingInvestorInsights)
        self.assertIn("DETAILED PORTFOLIO DATA", user)
        self.assertIn("HDFC Bank: Found in 2 funds (Fund A, Fund B)", user)
        self.assertIn("Risk Profile: Balanced", user)

    def test_basic_prompt_without_analysis(self):
        req = InsightsRequest(user_type="existing", portfolio=analyze_portfolio(FUNDS))
        _, user, _ = build_prompt(req)
        self.assertIn("PORTFOLIO DATA", user)
        self.assertNotIn("DETAILED PORTFOLIO DATA", user)
        self.assertIn("₹100,000", user)

    def test_new_investor_prompt(self):
        req = InsightsRequest(user_type="new", answers=InvestorAnswers(hasInsurance="yes"))
        _, user, model = build_prompt(req)
        self.assertIs(model, NewInvestorInsights)
        self.assertIn("Insurance: yes", user)
        self.assertIn("Monthly Investment Capacity: unknown", user)

    def test_numeric_monthly_investment_is_formatted(self):
        req = InsightsRequest(user_type="new", answers=InvestorAnswers(monthlyInvestment=5000))
        _, user, _ = build_prompt(req)
        self.assertIn("Monthly Investment Capacity: ₹5,000\n", user)
        self.assertNotIn("5000.0", user)


class TestLLMService(unittest.IsolatedAsyncioTestCase):
    async def test_missing_credentials(self):
        with self.assertRaises(LLMNotConfiguredError):
            LLMService(LLMConfig(provider="gemini"))
        with self.assertRaises(LLMNotConfiguredError):
            LLMService(LLMConfig(provider="openai"))

    async def test_openai_provider_selected(self):
        svc = LLMService(LLMConfig(provider="openai", openai_api_key="sk-test"))
        self.assertIsInstance(svc.client, OpenAIClient)

    async def test_generate_json_parses_raw_model_text(self):
        svc = LLMService(LLMConfig(provider="openai", openai_api_key="sk-test"))
        svc.client = _RawTextClient()
        self.assertEqual(await svc.generate_json(system="s", user="u"), {"ok": True})

    async def test_config_from_env(self):
        env = {"AI_PROVIDER": "OpenAI", "OPENAI_API_KEY": "k", "AI_TEMPERATURE": "0.1"}
        with patch.dict("os.environ", env, clear=False):
            cfg = LLMConfig.from_env()
        self.assertEqual(cfg.provider, "openai")
        self.assertEqual(cfg.openai_api_key, "k")
        self.assertEqual(cfg.temperature, 0.1)


if __name__ == "__main__":
    unittest.main()
