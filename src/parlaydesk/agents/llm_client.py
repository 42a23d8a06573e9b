"""OpenAI Chat Completions gateway."""

from __future__ import annotations

import logging

from openai import OpenAI

from parlaydesk.config import Settings, get_settings
from parlaydesk.errors import GatewayUnavailable

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a careful sports analytics assistant. You produce research material only, "
    "cite the data you are given and never guarantee outcomes."
)


class LLMClient:
    """Single-shot text completion; unavailable when no API key is configured."""

    def __init__(self, client: OpenAI | None = None, model: str | None = None) -> None:
        self._client = client
        self.model = model or get_settings().openai_model

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> LLMClient:
        settings = settings or get_settings()
        if not settings.openai_api_key:
            logger.info("OPENAI_API_KEY is not configured; AI features use built-in content")
            return cls(client=None, model=settings.openai_model)
        return cls(client=OpenAI(api_key=settings.openai_api_key), model=settings.openai_model)

    def is_available(self) -> bool:
        return self._client is not None

    def complete(self, prompt: str, max_tokens: int, temperature: float = 0.3) -> str:
        if self._client is None:
            raise GatewayUnavailable("OPENAI_API_KEY is not configured.")
        response = self._client.chat.completions.create(
            model=self.model,
            temperature=temperature,
            max_tokens=max_tokens,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        )
        return response.choices[0].message.content or ""
