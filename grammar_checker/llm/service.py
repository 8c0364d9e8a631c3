from __future__ import annotations

import logging
from typing import Any, Sequence

from .provider import (
    LLMProvider,
    LLMProviderError,
    LLMQuotaError,
    ProviderReporter,
    ProviderStatus,
)

logger = logging.getLogger(__name__)


class LLMService:
    """Facade that routes LLM requests across a priority-ordered provider list."""

    def __init__(
        self,
        providers: Sequence[LLMProvider],
        *,
        reporter: ProviderReporter | None = None,
    ) -> None:
        self._providers = list(providers)
        self._reporter = reporter

    def provider_order(self) -> list[str]:
        """Return the provider names in configured order."""

        return [provider.name for provider in self._providers]

    async def generate(
        self,
        user_prompts: Sequence[str],
        *,
        filter_json: bool = False,
    ) -> Any:
        """Try each provider until one succeeds or all quotas are exhausted."""

        if not self._providers:
            raise LLMProviderError("No LLM providers configured")

        last_error: LLMQuotaError | None = None
        for provider in self._providers:
            try:
                value = await provider.generate(user_prompts, filter_json=filter_json)
            except LLMQuotaError as exc:
                last_error = exc
                logger.warning("Provider %s hit its quota: %s", provider.name, exc)
                self._report(provider.name, ProviderStatus.QUOTA, exc)
                continue
            except Exception as exc:
                self._report(provider.name, ProviderStatus.FAILURE, exc)
                raise
            self._report(provider.name, ProviderStatus.SUCCESS)
            return value
        raise LLMQuotaError(f"All providers exceeded quota: {last_error}") from last_error

    def _report(
        self,
        provider_name: str,
        status: ProviderStatus,
        error: Exception | None = None,
    ) -> None:
        if self._reporter is None:
            return
        self._reporter(provider_name, status, error)
