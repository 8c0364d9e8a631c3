from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, cast

import pytest
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from grammar_checker.llm.gemini_llm import GeminiLLM
from grammar_checker.llm.provider import LLMParseError, LLMQuotaError


class _DummyResponse:
    def __init__(self, text: Any) -> None:
        self.text = text


class _DummyModels:
    def __init__(self, response_text: Any, error: Exception | None = None) -> None:
        self.calls: list[dict[str, object]] = []
        self._response_text = response_text
        self._error = error

    async def generate_content(self, **kwargs: object) -> _DummyResponse:
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return _DummyResponse(text=self._response_text)


class _DummyClient:
    def __init__(self, response_text: Any = '{"errors": []}', error: Exception | None = None) -> None:
        self.aio = SimpleNamespace(models=_DummyModels(response_text, error))


def _llm(client: _DummyClient, **kwargs: Any) -> GeminiLLM:
    return GeminiLLM(
        system_prompt="## System\nFind grammar errors.",
        client=cast(genai.Client, client),
        **kwargs,
    )


def test_generate_joins_prompts_and_requests_json() -> None:
    client = _DummyClient()
    llm = _llm(client)

    result = asyncio.run(llm.generate(["Line one", "Line two"]))

    assert isinstance(result, _DummyResponse)
    call = client.aio.models.calls[0]
    assert call["model"] == llm.MODEL
    assert call["contents"] == "Line one\nLine two"
    config = call["config"]
    assert isinstance(config, types.GenerateContentConfig)
    assert config.system_instruction == "## System\nFind grammar errors."
    assert config.response_mime_type == "application/json"
    assert config.temperature == 0.2


def test_filter_json_parses_text() -> None:
    client = _DummyClient('{"errors": [{"type": "punctuation"}]}')

    payload = asyncio.run(_llm(client, filter_json=True).generate(["text"]))

    assert payload == {"errors": [{"type": "punctuation"}]}


def test_missing_text_decodes_to_empty_object() -> None:
    client = _DummyClient(None)

    payload = asyncio.run(_llm(client).generate(["text"], filter_json=True))

    assert payload == {}


def test_invalid_text_raises_parse_error() -> None:
    client = _DummyClient("not json at all")

    with pytest.raises(LLMParseError) as excinfo:
        asyncio.run(_llm(client).generate(["text"], filter_json=True))

    assert excinfo.value.response_text == "not json at all"


def test_resource_exhausted_becomes_quota_error() -> None:
    error = genai_errors.ClientError(
        429,
        {"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}},
    )
    client = _DummyClient(error=error)

    with pytest.raises(LLMQuotaError, match="Quota exceeded"):
        asyncio.run(_llm(client).generate(["text"]))


def test_other_api_errors_propagate() -> None:
    error = genai_errors.ClientError(
        400,
        {"error": {"code": 400, "message": "Bad request", "status": "INVALID_ARGUMENT"}},
    )
    client = _DummyClient(error=error)

    with pytest.raises(genai_errors.ClientError):
        asyncio.run(_llm(client).generate(["text"]))


def test_system_prompt_property_returns_file_contents(tmp_path: Path) -> None:
    system_prompt_path = tmp_path / "system.md"
    system_prompt_path.write_text("Obey orders.", encoding="utf-8")

    llm = GeminiLLM(system_prompt=system_prompt_path, client=cast(genai.Client, _DummyClient()))

    assert llm.system_prompt == "Obey orders."
