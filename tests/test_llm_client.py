"""Tests for the OpenAI text gateway."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from parlaydesk.agents.llm_client import SYSTEM_PROMPT, LLMClient
from parlaydesk.config import Settings
from parlaydesk.errors import GatewayUnavailable


class DummyCompletions:
    def __init__(self, content: str | None) -> None:
        self.content = content
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(content: str | None) -> tuple[LLMClient, DummyCompletions]:
    completions = DummyCompletions(content)
    dummy = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return LLMClient(client=dummy, model="test-model"), completions  # type: ignore[arg-type]


def test_complete_sends_system_and_user_prompt() -> None:
    client, completions = _client("hello")
    assert client.is_available()
    assert client.complete("pick three", max_tokens=42) == "hello"

    call = completions.calls[0]
    assert call["model"] == "test-model"
    assert call["max_tokens"] == 42
    assert call["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert call["messages"][1] == {"role": "user", "content": "pick three"}


def test_empty_content_becomes_empty_string() -> None:
    client, _ = _client(None)
    assert client.complete("x", max_tokens=10) == ""


def test_missing_key_means_unavailable() -> None:
    client = LLMClient.from_settings(Settings(OPENAI_API_KEY=""))
    assert not client.is_available()
    with pytest.raises(GatewayUnavailable):
        client.complete("x", max_tokens=10)
