from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Sequence

from dotenv import load_dotenv
from mistralai import Mistral

from .json_utils import parse_json_response
from .provider import (
    LLMParseError,
    LLMProviderConfigurationError,
    LLMQuotaError,
    load_system_prompt,
)


class MistralLLM:
    """Wrapper around the Mistral SDK with system instructions.

    The system prompt can be provided either as a string directly or as a Path to a file.
    """

    name = "mistral"
    MODEL = "mistral-large-latest"

    def __init__(
        self,
        system_prompt: str | Path,
        *,
        client: Mistral | None = None,
        dotenv_path: str | Path | None = None,
        filter_json: bool = False,
        temperature: float = 0.2,
    ) -> None:
        self._system_prompt = load_system_prompt(system_prompt)

        if dotenv_path is not None:
            # Existing environment values take precedence over the file
            load_dotenv(dotenv_path=Path(dotenv_path))
        else:
            load_dotenv()

        # Mistral SDK does not automatically read MISTRAL_API_KEY from environment
        if client is None:
            api_key = os.environ.get("MISTRAL_API_KEY")
            if not api_key:
                raise LLMProviderConfigurationError(
                    "MISTRAL_API_KEY environment variable is required but not set. "
                    "Please set it in your .env file or environment."
                )
            client = Mistral(api_key=api_key)
        self._client = client
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

        try:
            response = await self._client.chat.complete_async(
                model=self.MODEL,
                messages=[
                    {"role": "system", "content": self._system_prompt},
                    {"role": "user", "content": "\n".join(user_prompts)},
                ],
                response_format={"type": "json_object"},
                temperature=self._temperature,
            )
        except Exception as exc:
            # Only rate limiting is translated; everything else propagates as-is
            if getattr(exc, "status_code", None) == 429:
                raise LLMQuotaError(
                    f"Mistral provider: quota exhausted or rate limited: {exc}"
                ) from exc
            raise

        if not apply_filter:
            return response
        return self._parse_response_json(response, prompts=list(user_prompts))

    def _parse_response_json(
        self, response: Any, prompts: list[str] | None = None
    ) -> Any:
        """Extract and repair JSON content from a Mistral chat response.

        Message content may be a plain string or a list of content chunks
        exposing ``text``; chunks are concatenated in order.

        Raises:
            LLMParseError: If JSON parsing fails, with response text and prompts attached
        """
        choices = getattr(response, "choices", None)
        if not choices:
            raise LLMParseError(
                "Mistral response contains no choices.",
                response_text=str(response),
                prompts=prompts,
            )

        content = getattr(getattr(choices[0], "message", None), "content", None)
        if isinstance(content, list):
            content = "".join(self._chunk_text(chunk) for chunk in content)
        if content is None:
            content = ""
        if not isinstance(content, str):
            raise LLMParseError(
                "Response message content is not a string for JSON parsing.",
                response_text=str(response),
                prompts=prompts,
            )

        try:
            return parse_json_response(content)
        except (ValueError, json.JSONDecodeError) as exc:
            raise LLMParseError(
                str(exc),
                response_text=content,
                prompts=prompts,
            ) from exc

    @staticmethod
    def _chunk_text(chunk: Any) -> str:
        if isinstance(chunk, dict):
            return str(chunk.get("text") or "")
        return str(getattr(chunk, "text", None) or "")
