"""Completion service contract and its Google Gemini implementation."""

import logging
from abc import ABC, abstractmethod
from typing import Literal

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel

from config import settings
from services.errors import CompletionError

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


class CompletionResult(BaseModel):
    content: str
    tokens_used: int = 0
    finish_reason: Literal["stop", "length"] = "stop"


class CompletionService(ABC):
    """Black-box text completion used by the extraction stages.

    Implementations raise CompletionError on transport failure or a non-2xx
    response; they never validate the content.
    """

    @abstractmethod
    async def complete(
        self,
        system_instruction: str,
        user_prompt: str,
        max_output_tokens: int,
    ) -> CompletionResult:
        """Return the raw completion for one prompt."""


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - Gemini features disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence (```json ... ```) if present."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


class GeminiCompletionService(CompletionService):
    """JSON-only, low-temperature Gemini completion."""

    def __init__(
        self,
        client: genai.Client | None = None,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.1,
    ) -> None:
        self._client = client
        self.model = model
        self.temperature = temperature

    def _get_client(self) -> genai.Client:
        client = self._client or get_client()
        if client is None:
            raise CompletionError("Gemini client not configured (GEMINI_API_KEY missing)")
        return client

    async def complete(
        self,
        system_instruction: str,
        user_prompt: str,
        max_output_tokens: int,
    ) -> CompletionResult:
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=user_prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    temperature=self.temperature,
                    max_output_tokens=max_output_tokens,
                    response_mime_type="application/json",
                ),
            )
        except genai_errors.APIError as e:
            logger.error("Gemini API error %s: %s", e.code, e.message)
            raise CompletionError(f"Gemini API error {e.code}: {e.message}", status_code=e.code) from e
        except Exception as e:
            logger.error("Gemini transport error: %s", e)
            raise CompletionError(f"Gemini transport error: {e}") from e

        finish_reason = "stop"
        if response.candidates and response.candidates[0].finish_reason == types.FinishReason.MAX_TOKENS:
            finish_reason = "length"

        usage = response.usage_metadata
        tokens_used = (usage.total_token_count or 0) if usage else 0

        return CompletionResult(
            content=response.text or "",
            tokens_used=tokens_used,
            finish_reason=finish_reason,
        )
