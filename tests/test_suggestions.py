# tests/test_suggestions.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from doit_tracker.llm.client import OpenRouterSuggestionClient, parse_string_list
from doit_tracker.llm.offline import OfflineSuggestionClient
from doit_tracker.llm.suggestions import suggest_habits, suggest_tasks

from .fakes import FakeSuggestionClient


class _Completions:
    """Stands in for `client.chat.completions` of the openai SDK."""

    def __init__(self, replies: dict[str, object]) -> None:
        self.replies = replies
        self.models: list[str] = []

    def create(self, *, model: str, messages, extra_headers=None):
        self.models.append(model)
        reply = self.replies[model]
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(replies: dict[str, object]) -> tuple[OpenRouterSuggestionClient, _Completions]:
    completions = _Completions(replies)
    sdk = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    settings = SimpleNamespace(llm_models=list(replies), extra_headers={}, openrouter_base_url="")
    return OpenRouterSuggestionClient(settings, client=sdk), completions


def test_parse_string_list() -> None:
    assert parse_string_list('["Walk", "Read"]') == ["Walk", "Read"]
    assert parse_string_list('Sure!\n```json\n["Walk", 3, " "]\n```') == ["Walk"]
    assert parse_string_list("no list here") == []
    assert parse_string_list(None) == []


def test_client_falls_through_models() -> None:
    client, completions = _client({"m1": RuntimeError("network"), "m2": "garbage", "m3": '["Plan", "Ship"]'})
    assert client.suggest("x") == ["Plan", "Ship"]
    assert completions.models == ["m1", "m2", "m3"]


def test_client_all_fail_returns_empty() -> None:
    client, _ = _client({"m1": RuntimeError("a"), "m2": RuntimeError("b")})
    assert client.suggest("x") == []


def test_client_requires_key_without_injected_sdk() -> None:
    settings = SimpleNamespace(openrouter_api_key=None, openrouter_base_url="https://x", llm_models=["m"])
    with pytest.raises(RuntimeError):
        OpenRouterSuggestionClient(settings)


def test_suggest_helpers_prompt_and_clean() -> None:
    fake = FakeSuggestionClient(["Walk", "Walk", " ", "Read", "Sleep", "Stretch", "Hydrate", "Extra"])
    assert suggest_habits(fake, "be healthier") == ["Walk", "Read", "Sleep", "Stretch", "Hydrate"]
    assert "be healthier" in fake.prompts[-1]
    assert "daily habits" in fake.prompts[-1]

    assert suggest_tasks(fake, "launch app")[:2] == ["Walk", "Read"]
    assert "Break down this project" in fake.prompts[-1]

    assert suggest_habits(fake, "   ") == []


def test_suggest_never_raises() -> None:
    fake = FakeSuggestionClient(error=RuntimeError("boom"))
    assert suggest_tasks(fake, "launch") == []


def test_offline_client_fixed_lists() -> None:
    offline = OfflineSuggestionClient()
    assert suggest_habits(offline, "focus") == OfflineSuggestionClient.HABITS
    assert suggest_tasks(offline, "launch") == OfflineSuggestionClient.TASKS
