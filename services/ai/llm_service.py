# services/ai/llm_service.py
from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from services.ai.json_helpers import extract_json_object


# ============================================================================
# PUBLIC INTERFACE
# ============================================================================

class LLMClient(Protocol):
    async def generate_json(self, *, system: str, user: str) -> str:
        """Return raw text that should be JSON."""


class LLMNotConfiguredError(RuntimeError):
    """No credentials for the selected provider."""


@dataclass
class LLMConfig:
    provider: str = "gemini"  # gemini | openai
    temperature: float = 0.3

    # Gemini: API key (AI Studio) or Vertex AI project
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gcp_project_id: str = ""
    gcp_location: str = "us-central1"

    # OpenAI-compatible chat completions
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_timeout_s: float = 60.0

    @staticmethod
    def from_env() -> "LLMConfig":
        return LLMConfig(
            provider=(os.getenv("AI_PROVIDER") or "gemini").lower(),
            temperature=float(os.getenv("AI_TEMPERATURE", "0.3")),

            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            gemini_model=os.getenv("GEMINI_MODEL") or "gemini-2.5-flash",
            gcp_project_id=os.getenv("GCP_PROJECT_ID", ""),
            gcp_location=os.getenv("GCP_LOCATION") or "us-central1",

            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL") or "gpt-4o-mini",
            openai_base_url=os.getenv("OPENAI_BASE_URL") or "https://api.openai.com/v1",
            openai_timeout_s=float(os.getenv("OPENAI_TIMEOUT_S", "60")),
        )


# ============================================================================
# PROVIDER CLIENTS
# ============================================================================

class OpenAIClient:
    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float,
        *,
        base_url: str = "https://api.openai.com/v1",
        timeout_s: float = 60.0,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

    async def generate_json(self, *, system: str, user: str) -> str:
        import httpx
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            r = await client.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": system},
                        {"role": "user", "content": user},
                    ],
                    "temperature": self.temperature,
                    "response_format": {"type": "json_object"},
                },
            )
            r.raise_for_status()
            data = r.json()
            return data["choices"][0]["message"]["content"]


class GeminiClient:
    def __init__(
        self,
        model: str,
        *,
        api_key: str = "",
        project: str = "",
        location: str = "us-central1",
        temperature: float = 0.3,
    ):
        self.model = model
        self.api_key = api_key
        self.project = project
        self.location = location
        self.temperature = temperature

    async def generate_json(self, *, system: str, user: str) -> str:
        # google-genai SDK is sync-ish; run in thread.
        return await asyncio.to_thread(self._sync_call, system, user)

    def _make_client(self):
        from google import genai

        if self.api_key:
            return genai.Client(api_key=self.api_key)
        return genai.Client(vertexai=True, project=self.project, location=self.location)

    def _sync_call(self, system: str, user: str) -> str:
        from google.genai import types

        client = self._make_client()
        config = types.GenerateContentConfig(
            system_instruction=system,
            temperature=self.temperature,
            response_mime_type="application/json",
        )
        resp = client.models.generate_content(
            model=self.model,
            contents=user,
            config=config,
        )
        return resp.text if getattr(resp, "text", None) else str(resp)


# ============================================================================
# LLM SERVICE
# ============================================================================

class LLMService:
    def __init__(self, cfg: Optional[LLMConfig] = None):
        self.cfg = cfg or LLMConfig.from_env()
        self.client: LLMClient = self._resolve_client(self.cfg)

    def _resolve_client(self, cfg: LLMConfig) -> LLMClient:
        p = (cfg.provider or "gemini").lower()

        if p == "openai":
            if not cfg.openai_api_key:
                raise LLMNotConfiguredError("Missing OPENAI_API_KEY")
            return OpenAIClient(
                api_key=cfg.openai_api_key,
                model=cfg.openai_model,
                temperature=cfg.temperature,
                base_url=cfg.openai_base_url,
                timeout_s=cfg.openai_timeout_s,
            )

        # default: gemini
        if not cfg.gemini_api_key and not cfg.gcp_project_id:
            raise LLMNotConfiguredError("Missing GEMINI_API_KEY or GCP_PROJECT_ID")
        return GeminiClient(
            model=cfg.gemini_model,
            api_key=cfg.gemini_api_key,
            project=cfg.gcp_project_id,
            location=cfg.gcp_location,
            temperature=cfg.temperature,
        )

    async def generate_json(self, *, system: str, user: str) -> Dict[str, Any]:
        raw = await self.client.generate_json(system=system, user=user)
        return extract_json_object(raw)


_llm_singleton: Optional[LLMService] = None

def get_llm_service() -> LLMService:
    """Shared service; raises LLMNotConfiguredError when no provider is set up."""
    global _llm_singleton
    if _llm_singleton is None:
        _llm_singleton = LLMService()
    return _llm_singleton
