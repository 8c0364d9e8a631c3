from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .llm.provider_registry import split_provider_names


@dataclass
class CheckerSettings:
    """Provider selection for a grammar checker.

    Environment variables:
      LLM_PRIMARY   Primary LLM provider (default: openai)
      LLM_FALLBACK  Fallback providers, comma-separated (default: none)

    Provider credentials (``OPENAI_API_KEY``, ``MISTRAL_API_KEY``, ...) are read
    by the providers themselves.
    """

    primary: str | None = None
    fallbacks: list[str] = field(default_factory=list)
    dotenv_path: Path | None = None

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> "CheckerSettings":
        if dotenv_path is not None:
            load_dotenv(dotenv_path=Path(dotenv_path), override=True)
        else:
            load_dotenv()
        return cls(
            primary=os.environ.get("LLM_PRIMARY") or None,
            fallbacks=split_provider_names(os.environ.get("LLM_FALLBACK")),
            dotenv_path=Path(dotenv_path) if dotenv_path is not None else None,
        )
