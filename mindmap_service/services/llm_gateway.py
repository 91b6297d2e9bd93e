"""
LLM Gateway
===========
Thin async wrappers around the generative text providers:
  - Gemini (google-generativeai), the default
  - Groq (Llama 3)

One prompt in, raw text out. No retry, backoff or provider failover
happens here; callers decide. Any provider failure is re-raised as
ProviderError with the underlying exception name and message preserved.
"""

import asyncio
import logging
from typing import Optional

import google.generativeai as genai
from groq import AsyncGroq

from mindmap_service.core.config import Settings
from mindmap_service.core.exceptions import ConfigError, ProviderError

logger = logging.getLogger(__name__)


class LLMGateway:
    """Prompt-in, text-out interface shared by every provider."""

    name = "llm"

    async def generate(self, prompt: str) -> str:
        raise NotImplementedError


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# GEMINI
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class GeminiGateway(LLMGateway):
    name = "Gemini"

    def __init__(self, api_key: str, model_name: str = "gemini-2.0-flash"):
        genai.configure(api_key=api_key, transport="rest")
        self.model_name = model_name
        self.model = genai.GenerativeModel(model_name=model_name)
        logger.info(f"[LLM] ✓ Gemini client ready ({model_name})")

    async def generate(self, prompt: str) -> str:
        logger.info(f"[LLM] Calling Gemini ({self.model_name})...")
        try:
            response = await asyncio.to_thread(self.model.generate_content, prompt)
            text = response.text
        except Exception as e:
            raise ProviderError(self.name, e) from e

        if not text or not text.strip():
            raise ProviderError(self.name, ValueError("Empty response received"))
        logger.info("[LLM] ✓ Gemini call succeeded")
        return text


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# GROQ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class GroqGateway(LLMGateway):
    name = "Groq"

    def __init__(self, api_key: str, model_name: str = "llama-3.3-70b-versatile"):
        self.client = AsyncGroq(api_key=api_key)
        self.model_name = model_name
        logger.info(f"[LLM] ✓ Groq client ready ({model_name})")

    async def generate(self, prompt: str) -> str:
        logger.info(f"[LLM] Calling Groq ({self.model_name})...")
        try:
            completion = await self.client.chat.completions.create(
                model=self.model_name,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=8000,
            )
            text: Optional[str] = completion.choices[0].message.content
        except Exception as e:
            raise ProviderError(self.name, e) from e

        if not text or not text.strip():
            raise ProviderError(self.name, ValueError("Empty response received"))
        logger.info("[LLM] ✓ Groq call succeeded")
        return text


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# FACTORY
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def build_gateway(settings: Settings) -> LLMGateway:
    """Create the gateway for settings.AI_PROVIDER, or raise ConfigError."""
    api_key = settings.active_api_key
    if not api_key:
        logger.error(f"[LLM] ✗ API key for provider '{settings.AI_PROVIDER}' is not set")
        raise ConfigError("API key is not configured")

    if settings.AI_PROVIDER == "groq":
        return GroqGateway(api_key, settings.GROQ_MODEL)
    return GeminiGateway(api_key, settings.GEMINI_MODEL)
