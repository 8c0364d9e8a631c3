"""Grammar, spelling and punctuation checking through a chat-completion model."""

from __future__ import annotations

from .checker import GrammarCheckError, GrammarChecker, build_checker
from .config import CheckerSettings
from .corrections import apply_all_suggestions, apply_suggestion
from .models import ErrorType, GrammarCheckResult, GrammarError, GrammarSummary

__all__ = [
    "CheckerSettings",
    "ErrorType",
    "GrammarCheckError",
    "GrammarCheckResult",
    "GrammarChecker",
    "GrammarError",
    "GrammarSummary",
    "apply_all_suggestions",
    "apply_suggestion",
    "build_checker",
]
