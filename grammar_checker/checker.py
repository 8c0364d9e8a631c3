"""Grammar, spelling and punctuation checking backed by a chat-completion model.

The model does all of the linguistic work. This module builds the request,
validates the JSON it sends back, assigns ids and computes the summary.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Any, Callable, Iterable, Sequence

from pydantic import ValidationError

from .config import CheckerSettings
from .llm.provider import ProviderReporter
from .llm.provider_registry import create_provider_chain
from .llm.service import LLMService
from .models import (
    ErrorType,
    GrammarCheckResult,
    GrammarError,
    GrammarSummary,
    RawGrammarError,
)
from .prompt.render_prompt import render_system_prompt, render_user_prompt

logger = logging.getLogger(__name__)


class GrammarCheckError(Exception):
    """Raised when a check cannot be completed. Wraps the underlying failure."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Failed to check grammar: {message}")


def accuracy_score(text: str, errors: Iterable[GrammarError]) -> int:
    """Percentage of ``text`` not covered by flagged spans, rounded half up.

    Empty text scores 100. The score never drops below 0, even when spans
    overlap or add up to more than the text length.
    """
    length = len(text)
    if length == 0:
        return 100
    flagged = sum(error.span_length for error in errors)
    score = math.floor((length - flagged) * 100 / length + 0.5)
    return max(0, score)


def summarise(
    text: str, errors: Sequence[GrammarError], processing_time: float
) -> GrammarSummary:
    def count(kind: ErrorType) -> int:
        return sum(1 for error in errors if error.type == kind)

    return GrammarSummary(
        total_errors=len(errors),
        grammar_errors=count(ErrorType.GRAMMAR),
        spelling_errors=count(ErrorType.SPELLING),
        punctuation_errors=count(ErrorType.PUNCTUATION),
        accuracy_score=accuracy_score(text, errors),
        processing_time=processing_time,
    )


def build_errors(payload: Any, text: str) -> list[GrammarError]:
    """Turn the decoded model reply into validated issues.

    A payload without a list under ``errors`` yields no issues. Entries that
    fail validation are logged and dropped; the rest keep their order, get a
    fresh id and have their span clamped to ``text``.
    """
    raw_errors = payload.get("errors") if isinstance(payload, dict) else None
    if raw_errors is None:
        return []
    if not isinstance(raw_errors, list):
        logger.warning(
            "Ignoring 'errors' field of type %s; expected a list",
            type(raw_errors).__name__,
        )
        return []

    errors: list[GrammarError] = []
    for position, entry in enumerate(raw_errors):
        if not isinstance(entry, dict):
            logger.warning("Dropping error entry %d: not an object (%r)", position, entry)
            continue
        try:
            raw = RawGrammarError.model_validate(entry)
        except ValidationError as exc:
            logger.warning(
                "Dropping error entry %d: %s",
                position,
                "; ".join(err["msg"] for err in exc.errors()),
            )
            continue
        errors.append(GrammarError.from_raw(raw, len(text)))
    return errors


class GrammarChecker:
    """Checks text through an injected :class:`LLMService`.

    The service (and the SDK clients behind it) is built once by the caller and
    shared across checks; the checker keeps no other state.
    """

    def __init__(
        self,
        service: LLMService,
        *,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._service = service
        self._clock = clock

    @property
    def service(self) -> LLMService:
        return self._service

    async def check_grammar(self, text: str) -> GrammarCheckResult:
        """Check ``text`` and return its issues with summary statistics.

        Raises:
            GrammarCheckError: If the remote call or reply parsing fails. No
                partial result is returned.
        """
        started = self._clock()
        try:
            payload = await self._service.generate(
                [render_user_prompt(text)], filter_json=True
            )
        except Exception as exc:
            raise GrammarCheckError(str(exc)) from exc

        errors = build_errors(payload, text)
        processing_time = max(0.0, self._clock() - started)
        summary = summarise(text, errors, processing_time)
        logger.debug(
            "Checked %d characters: %d error(s), accuracy %d%% in %.2fs",
            len(text),
            summary.total_errors,
            summary.accuracy_score,
            processing_time,
        )
        return GrammarCheckResult(text=text, errors=errors, summary=summary)


def build_checker(
    settings: CheckerSettings | None = None,
    *,
    reporter: ProviderReporter | None = None,
) -> GrammarChecker:
    """Create the provider chain once and wrap it in a :class:`GrammarChecker`."""
    settings = settings or CheckerSettings.from_env()
    providers = create_provider_chain(
        system_prompt=render_system_prompt(),
        filter_json=True,
        dotenv_path=settings.dotenv_path,
        primary=settings.primary,
        fallbacks=settings.fallbacks or None,
    )
    return GrammarChecker(LLMService(providers, reporter=reporter))
