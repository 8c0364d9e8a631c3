"""Enumerations used by the grammar check models.

Values match the wording the model is asked to emit in
`grammar_checker/prompt/promptFiles/system_grammar_checker.md`.
"""

from __future__ import annotations

from enum import Enum


class ErrorType(str, Enum):
    """The three kinds of issue the checker reports."""

    GRAMMAR = "grammar"
    SPELLING = "spelling"
    PUNCTUATION = "punctuation"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]
