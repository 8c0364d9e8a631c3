from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from dotenv import load_dotenv
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .json_utils import parse_json_response
from .provider import LLMParseError, LLMQuotaError, load_system_prompt


class GeminiLLM:
    """Wrapper around the Gemini SDK with system instructions.

    The SDK reads ``GEMINI_API_KEY`` (or ``GOOGLE_API_KEY``) itself; requests ask
    for an ``application/json`` response so the reply text is a JSON document.
    """

    name = "gemini"
    MODEL = "gemini-2.5-flash"

    def __init__(
        self,
        system_prompt: str | Path,
        *,
        client: genai.Client | None = None,
        dotenv_path: str | Path | None = None,
        filter_json: bool = False,
        temperature: float = 0.2,
    ) -> None:
        self._system_prompt = load_system_prompt(system_prompt)

        if dotenv_path is not None:
            load_dotenv(dotenv_path=Path(dotenv_path))
        else:
            load_dotenv()
        self._client = client or genai.Client()
        self._filter_json = filter_json
        self._temperature = temperature

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    async def generate(
        self,
        user_prompts: Sequence[str],
        *,
        filter_json: bool | None = None,
    ) -> Any:
        if not user_prompts:
            raise ValueError("user_prompts must not be empty.")

        apply_filter = self._filter_json if filter_json is None else filter_json

        config = types.GenerateContentConfig(
            system_instruction=self._system_prompt,
            response_mime_type="application/json",
            temperature=self._temperature,
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=self.MODEL,
                contents="\n".join(user_prompts),
                config=config,
            )
        except genai_errors.APIError as exc:
            if getattr(exc, "code", None) == 429:
                raise LLMQuotaError(
                    f"Gemini provider: quota exhausted or rate limited: {exc}"
                ) from exc
            raise

        if not apply_filter:
            return response
        return self._parse_response_json(response, prompts=list(user_prompts))

    def _parse_response_json(
        self, response: Any, prompts: list[str] | None = None
    ) -> Any:
        """Extract and repair JSON content from a Gemini response.

        Raises:
            LLMParseError: If JSON parsing fails, with response text and prompts attached
        """
        text = getattr(response, "text", None)
        if text is None:
            text = ""
        if not isinstance(text, str):
            raise LLMParseError(
                "Response object does not expose a text attribute for JSON parsing.",
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
