from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .grammar_error import GrammarError


class GrammarSummary(BaseModel):
    """Aggregate counts and score for one check."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    total_errors: int = Field(alias="totalErrors", ge=0)
    grammar_errors: int = Field(alias="grammarErrors", ge=0)
    spelling_errors: int = Field(alias="spellingErrors", ge=0)
    punctuation_errors: int = Field(alias="punctuationErrors", ge=0)
    accuracy_score: int = Field(alias="accuracyScore", ge=0, le=100)
    processing_time: float = Field(alias="processingTime", ge=0)

    @model_validator(mode="after")
    def _check_counts(self) -> "GrammarSummary":
        per_type = self.grammar_errors + self.spelling_errors + self.punctuation_errors
        if per_type != self.total_errors:
            raise ValueError(
                "grammarErrors + spellingErrors + punctuationErrors must equal totalErrors"
            )
        return self


class GrammarCheckResult(BaseModel):
    """Everything returned by a single grammar check."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    text: str
    errors: List[GrammarError] = Field(default_factory=list)
    summary: GrammarSummary

    def find_error(self, error_id: str) -> GrammarError:
        for error in self.errors:
            if error.id == error_id:
                return error
        raise KeyError(f"No error with id {error_id!r}")
