"""Models for a single reported grammar issue.

Two shapes live here:
1. ``RawGrammarError`` validates one entry of the model's ``errors`` list at the
   boundary. Anything the model returns passes through it before use.
2. ``GrammarError`` is the issue handed back to callers, with a locally
   generated ``id`` and indices already clamped to the checked text.

Both accept camelCase (wire) or snake_case (Python) field names and dump as
camelCase with ``by_alias=True``.
"""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import ErrorType


def _coerce_index(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("index must be an integer, not a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"index must be a whole number, got {value!r}")
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ValueError(f"index must be an integer, got {value!r}") from exc
    raise ValueError(f"index must be an integer, got {type(value).__name__}")


class RawGrammarError(BaseModel):
    """One issue exactly as reported by the model, after normalisation.

    - type: "grammar", "spelling" or "punctuation" (case and whitespace ignored)
    - message: explanation of the issue
    - suggestion: corrected text
    - start_index / end_index: 0-based character offsets (not yet clamped)
    - original_text: the flagged text
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: ErrorType
    message: str = ""
    suggestion: str = ""
    start_index: int = Field(alias="startIndex")
    end_index: int = Field(alias="endIndex")
    original_text: str = Field(default="", alias="originalText")

    @field_validator("type", mode="before")
    def _normalise_type(cls, value: object) -> str:
        return str(value or "").strip().lower()

    @field_validator("message", "suggestion", "original_text", mode="before")
    def _coerce_strings(cls, value: object) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("start_index", "end_index", mode="before")
    def _coerce_indices(cls, value: object) -> int:
        return _coerce_index(value)


class GrammarError(BaseModel):
    """A reported issue with a unique id, ready to hand to callers."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: ErrorType
    message: str
    suggestion: str
    start_index: int = Field(alias="startIndex", ge=0)
    end_index: int = Field(alias="endIndex", ge=0)
    original_text: str = Field(alias="originalText")

    @model_validator(mode="after")
    def _check_span(self) -> "GrammarError":
        if self.end_index < self.start_index:
            raise ValueError("endIndex must not be smaller than startIndex")
        return self

    @property
    def span_length(self) -> int:
        return self.end_index - self.start_index

    @classmethod
    def from_raw(cls, raw: RawGrammarError, text_length: int) -> "GrammarError":
        """Build an issue from a validated entry, clamping its span to the text."""
        start = min(max(raw.start_index, 0), text_length)
        end = min(max(raw.end_index, start), text_length)
        return cls(
            type=raw.type,
            message=raw.message,
            suggestion=raw.suggestion,
            start_index=start,
            end_index=end,
            original_text=raw.original_text,
        )
