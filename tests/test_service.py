from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from grammar_checker.llm.provider import (
    LLMProviderError,
    LLMQuotaError,
    ProviderStatus,
)
from grammar_checker.llm.service import LLMService


class _Provider:
    def __init__(self, name: str, *, result: Any = None, error: Exception | None = None) -> None:
        self.name = name
        self.system_prompt = ""
        self._result = result
        self._error = error
        self.calls = 0

    async def generate(
        self,
        user_prompts: Sequence[str],
        *,
        filter_json: bool = False,
    ) -> Any:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return self._result


def _recorder() -> tuple[list[tuple[str, ProviderStatus]], Any]:
    events: list[tuple[str, ProviderStatus]] = []

    def reporter(name: str, status: ProviderStatus, error: Exception | None) -> None:
        events.append((name, status))

    return events, reporter


def test_provider_order() -> None:
    service = LLMService([_Provider("openai"), _Provider("gemini")])

    assert service.provider_order() == ["openai", "gemini"]


def test_first_provider_success_skips_the_rest() -> None:
    first = _Provider("openai", result={"errors": []})
    second = _Provider("gemini", result={"errors": ["unused"]})
    events, reporter = _recorder()

    value = asyncio.run(LLMService([first, second], reporter=reporter).generate(["x"]))

    assert value == {"errors": []}
    assert second.calls == 0
    assert events == [("openai", ProviderStatus.SUCCESS)]


def test_quota_error_falls_back_to_next_provider(caplog: pytest.LogCaptureFixture) -> None:
    first = _Provider("openai", error=LLMQuotaError("quota"))
    second = _Provider("mistral", result={"errors": []})
    events, reporter = _recorder()

    with caplog.at_level(logging.WARNING, logger="grammar_checker.llm.service"):
        value = asyncio.run(
            LLMService([first, second], reporter=reporter).generate(["x"], filter_json=True)
        )

    assert value == {"errors": []}
    assert events == [
        ("openai", ProviderStatus.QUOTA),
        ("mistral", ProviderStatus.SUCCESS),
    ]
    assert "openai hit its quota" in caplog.text


def test_all_providers_out_of_quota() -> None:
    providers = [
        _Provider("openai", error=LLMQuotaError("q1")),
        _Provider("gemini", error=LLMQuotaError("q2")),
    ]

    with pytest.raises(LLMQuotaError, match="All providers exceeded quota") as excinfo:
        asyncio.run(LLMService(providers).generate(["x"]))

    assert str(excinfo.value.__cause__) == "q2"
    assert str(excinfo.value) == "All providers exceeded quota: q2"


def test_non_quota_failure_is_reported_and_raised() -> None:
    first = _Provider("openai", error=LLMProviderError("bad auth"))
    second = _Provider("gemini", result={})
    events, reporter = _recorder()

    with pytest.raises(LLMProviderError, match="bad auth"):
        asyncio.run(LLMService([first, second], reporter=reporter).generate(["x"]))

    assert second.calls == 0
    assert events == [("openai", ProviderStatus.FAILURE)]


def test_sdk_errors_are_not_swallowed() -> None:
    events, reporter = _recorder()
    provider = _Provider("openai", error=TimeoutError("timed out"))

    with pytest.raises(TimeoutError):
        asyncio.run(LLMService([provider], reporter=reporter).generate(["x"]))

    assert events == [("openai", ProviderStatus.FAILURE)]


def test_no_providers_configured() -> None:
    with pytest.raises(LLMProviderError, match="No LLM providers configured"):
        asyncio.run(LLMService([]).generate(["x"]))
