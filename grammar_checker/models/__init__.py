"""Public model exports for the project.

Tests and other modules should import
``from grammar_checker.models import GrammarError, GrammarCheckResult``.
"""

from __future__ import annotations

from .check_result import GrammarCheckResult, GrammarSummary
from .enums import ErrorType
from .grammar_error import GrammarError, RawGrammarError

__all__ = [
    "ErrorType",
    "GrammarCheckResult",
    "GrammarError",
    "GrammarSummary",
    "RawGrammarError",
]
