from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Sequence

import openai
from dotenv import load_dotenv
from openai import AsyncOpenAI

from .json_utils import parse_json_response
from .provider import LLMParseError, LLMQuotaError, load_system_prompt

logger = logging.getLogger(__name__)

# Used when no key is configured; the API rejects it, which is how an
# unconfigured install surfaces.
PLACEHOLDER_API_KEY = "default_key"


def resolve_openai_api_key() -> str:
    return (
        os.environ.get("OPENAI_API_KEY")
        or os.environ.get("OPENAI_API_KEY_ENV_VAR")
        or PLACEHOLDER_API_KEY
    )


class OpenAILLM:
    """Wrapper around the async OpenAI SDK with system instructions.

    Requests use the chat completions endpoint with a JSON object response
    format, so replies are expected to be a single JSON document.
    """

    name = "openai"
    MODEL = "gpt-4o"

    def __init__(
        self,
        system_prompt: str | Path,
        *,
        client: AsyncOpenAI | None = None,
        dotenv_path: str | Path | None = None,
        filter_json: bool = False,
        model: str | None = None,
        temperature: float | None = None,
    ) -> None:
        self._system_prompt = load_system_prompt(system_prompt)

        if dotenv_path is not None:
            load_dotenv(dotenv_path=Path(dotenv_path))
        else:
            load_dotenv()

        if client is None:
            api_key = resolve_openai_api_key()
            if api_key == PLACEHOLDER_API_KEY:
                logger.warning(
                    "Neither OPENAI_API_KEY nor OPENAI_API_KEY_ENV_VAR is set; "
                    "requests will fail authentication"
                )
            client = AsyncOpenAI(
                api_key=api_key,
                base_url=os.environ.get("OPENAI_BASE_URL") or None,
            )
        self._client = client
        self._filter_json = filter_json
        self._model = model or os.environ.get("OPENAI_MODEL") or self.MODEL
        self._temperature = temperature

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    @property
    def model(self) -> str:
        return self._model

    async def generate(
        self,
        user_prompts: Sequence[str],
        *,
        filter_json: bool | None = None,
    ) -> Any:
        if not user_prompts:
            raise ValueError("user_prompts must not be empty.")

        apply_filter = self._filter_json if filter_json is None else filter_json

        request: dict[str, Any] = dict(
            model=self._model,
            messages=[
                {"role": "system", "content": self._system_prompt},
                {"role": "user", "content": "\n".join(user_prompts)},
            ],
            response_format={"type": "json_object"},
        )
        if self._temperature is not None:
            request["temperature"] = self._temperature

        try:
            response = await self._client.chat.completions.create(**request)
        except openai.RateLimitError as exc:
            raise LLMQuotaError(
                f"OpenAI provider: quota exhausted or rate limited: {exc}"
            ) from exc

        if not apply_filter:
            return response
        return self._parse_response_json(response, prompts=list(user_prompts))

    def _parse_response_json(
        self, response: Any, prompts: list[str] | None = None
    ) -> Any:
        """Decode the first choice's message content as JSON.

        A choice with no content decodes to an empty object.

        Raises:
            LLMParseError: If the response has no choices or the content is not JSON
        """
        choices = getattr(response, "choices", None)
        if not choices:
            raise LLMParseError(
                "OpenAI response contains no choices.",
                response_text=str(response),
                prompts=prompts,
            )

        message = getattr(choices[0], "message", None)
        text = getattr(message, "content", None) or ""
        if not isinstance(text, str):
            raise LLMParseError(
                "Response message content is not a string for JSON parsing.",
                response_text=str(response),
                prompts=prompts,
            )

        try:
            return parse_json_response(text)
        except (ValueError, json.JSONDecodeError) as exc:
            raise LLMParseError(
                str(exc),
                response_text=text,
                prompts=prompts,
            ) from exc
