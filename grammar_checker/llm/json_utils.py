"""JSON extraction and repair for chat-completion replies.

Even with a JSON response format requested, models occasionally wrap the
payload in a code fence, add a sentence of commentary, or leave a trailing
comma. These helpers locate the JSON fragment and repair it before decoding.
"""

from __future__ import annotations

import json
import re
from typing import Any

from json_repair import repair_json

_FENCE_RE = re.compile(r"\A```(?:json)?\s*(.*?)```\s*\Z", re.DOTALL | re.IGNORECASE)


def _strip_code_fence(text: str) -> str:
    # Only a fence wrapping the whole reply; backticks inside JSON strings stay
    match = _FENCE_RE.match(text.strip())
    if match:
        return match.group(1)
    return text


def parse_json_response(text: str) -> Any:
    """Extract and repair JSON content from LLM response text.

    Blank text decodes to an empty object and a reply that is already valid JSON
    is decoded as is. Otherwise the outermost object
    (or array, if it starts first) is extracted, repaired and decoded.

    Raises:
        ValueError: If the text contains no JSON object or array delimiters
        json.JSONDecodeError: If the repaired fragment still cannot be parsed

    Example:
        >>> parse_json_response('Result: {"errors": []} done')
        {'errors': []}
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected string input, got {type(text)}")

    if not text.strip():
        return {}

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    text = _strip_code_fence(text)

    start_obj = text.find("{")
    start_arr = text.find("[")
    if start_obj == -1 and start_arr == -1:
        raise ValueError(
            "Response text does not contain JSON object or array delimiters."
        )

    if start_obj == -1 or (start_arr != -1 and start_arr < start_obj):
        start, end_char = start_arr, "]"
    else:
        start, end_char = start_obj, "}"

    end = text.rfind(end_char)
    if end == -1 or end <= start:
        raise ValueError("Response text does not contain matching JSON delimiters.")

    fragment = text[start : end + 1]
    try:
        return json.loads(fragment)
    except json.JSONDecodeError:
        return json.loads(repair_json(fragment))
