"""Accept suggestions from a check result and produce the corrected result.

Results are immutable, so every function here returns a new
:class:`GrammarCheckResult`: the text with the replacement spliced in, the
accepted issue removed, issues overlapping the replaced span dropped, later
issues shifted, and the summary recomputed. ``processingTime`` is carried over
from the original check.
"""

from __future__ import annotations

from .checker import summarise
from .models import GrammarCheckResult, GrammarError


def _shift(error: GrammarError, delta: int) -> GrammarError:
    return error.model_copy(
        update={
            "start_index": error.start_index + delta,
            "end_index": error.end_index + delta,
        }
    )


def apply_suggestion(
    result: GrammarCheckResult,
    error_id: str,
    suggestion: str | None = None,
) -> GrammarCheckResult:
    """Replace the span of ``error_id`` with its suggestion (or ``suggestion``).

    Raises:
        KeyError: If no issue has ``error_id``.
        ValueError: If the issue has no suggestion and none is given.
    """
    target = result.find_error(error_id)
    replacement = target.suggestion if suggestion is None else suggestion
    if suggestion is None and not replacement:
        raise ValueError(f"Error {error_id!r} has no suggestion to apply")

    start, end = target.start_index, target.end_index
    text = result.text[:start] + replacement + result.text[end:]
    delta = len(replacement) - (end - start)

    remaining: list[GrammarError] = []
    for error in result.errors:
        if error.id == target.id:
            continue
        if error.end_index <= start:
            remaining.append(error)
        elif error.start_index >= end:
            remaining.append(_shift(error, delta))
        # anything else overlaps the replaced span and no longer applies

    return GrammarCheckResult(
        text=text,
        errors=remaining,
        summary=summarise(text, remaining, result.summary.processing_time),
    )


def apply_all_suggestions(result: GrammarCheckResult) -> GrammarCheckResult:
    """Apply every non-overlapping suggestion, working right to left.

    Issues without a suggestion are left in place. Where spans overlap, the
    issue starting later wins and the other is dropped.
    """
    accepted: list[str] = []
    boundary = len(result.text)
    candidates = sorted(
        (error for error in result.errors if error.suggestion),
        key=lambda error: (error.start_index, error.end_index),
        reverse=True,
    )
    for error in candidates:
        if error.end_index <= boundary:
            accepted.append(error.id)
            boundary = error.start_index

    corrected = result
    for error_id in accepted:
        corrected = apply_suggestion(corrected, error_id)
    return corrected
