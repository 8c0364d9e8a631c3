from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv

from .gemini_llm import GeminiLLM
from .mistral_llm import MistralLLM
from .openai_llm import OpenAILLM
from .provider import LLMProvider, ProviderFactory


def _openai_factory(
    *,
    system_prompt: str | Path,
    filter_json: bool,
    dotenv_path: str | Path | None,
) -> LLMProvider:
    return OpenAILLM(
        system_prompt=system_prompt,
        filter_json=filter_json,
        dotenv_path=dotenv_path,
    )


def _gemini_factory(
    *,
    system_prompt: str | Path,
    filter_json: bool,
    dotenv_path: str | Path | None,
) -> LLMProvider:
    return GeminiLLM(
        system_prompt=system_prompt,
        filter_json=filter_json,
        dotenv_path=dotenv_path,
    )


def _mistral_factory(
    *,
    system_prompt: str | Path,
    filter_json: bool,
    dotenv_path: str | Path | None,
) -> LLMProvider:
    return MistralLLM(
        system_prompt=system_prompt,
        filter_json=filter_json,
        dotenv_path=dotenv_path,
    )


_PROVIDER_FACTORIES: dict[str, ProviderFactory] = {
    "openai": _openai_factory,
    "gemini": _gemini_factory,
    "mistral": _mistral_factory,
}

# Used when neither arguments nor LLM_PRIMARY/LLM_FALLBACK name a provider
_DEFAULT_PROVIDERS: tuple[str, ...] = ("openai",)


def available_providers() -> list[str]:
    return list(_PROVIDER_FACTORIES)


def split_provider_names(value: str | None) -> list[str]:
    if not value:
        return []
    return [chunk.strip().lower() for chunk in value.split(",") if chunk.strip()]


def resolve_provider_order(
    *,
    primary: str | None = None,
    fallbacks: Sequence[str] | None = None,
) -> list[str]:
    """Return de-duplicated provider names from arguments, environment or defaults."""

    candidates: list[str] = []
    if primary:
        candidates.extend(split_provider_names(primary))
    else:
        candidates.extend(split_provider_names(os.environ.get("LLM_PRIMARY")))

    if fallbacks:
        candidates.extend(name.strip().lower() for name in fallbacks if name.strip())
    else:
        candidates.extend(split_provider_names(os.environ.get("LLM_FALLBACK")))

    if not candidates:
        candidates = list(_DEFAULT_PROVIDERS)

    order: list[str] = []
    for name in candidates:
        if name in order:
            continue
        if name not in _PROVIDER_FACTORIES:
            raise ValueError(f"Unknown LLM provider '{name}'")
        order.append(name)
    return order


def create_provider_chain(
    *,
    system_prompt: str | Path,
    filter_json: bool = False,
    dotenv_path: str | Path | None = None,
    primary: str | None = None,
    fallbacks: Sequence[str] | None = None,
) -> list[LLMProvider]:
    """Return configured providers honoring environment/priority hints."""

    # Load an explicit .env early so LLM_PRIMARY/LLM_FALLBACK are visible
    if dotenv_path is not None:
        load_dotenv(dotenv_path=str(dotenv_path), override=True)

    order = resolve_provider_order(primary=primary, fallbacks=fallbacks)
    return [
        _PROVIDER_FACTORIES[name](
            system_prompt=system_prompt,
            filter_json=filter_json,
            dotenv_path=dotenv_path,
        )
        for name in order
    ]
