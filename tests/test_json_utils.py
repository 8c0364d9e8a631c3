from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from grammar_checker.llm.json_utils import parse_json_response


def test_parse_json_object_in_text():
    text = 'Here is the result: {"errors": []}. Thanks'
    result = parse_json_response(text)
    assert result == {"errors": []}


def test_parse_json_inside_code_fence():
    text = '```json\n{"errors": [{"type": "spelling", "startIndex": 0}]}\n```'
    result = parse_json_response(text)
    assert result["errors"][0]["type"] == "spelling"


def test_parse_json_repairs_trailing_comma():
    text = '{"errors": [{"type": "grammar", "startIndex": 1, "endIndex": 3,},]}'
    result = parse_json_response(text)
    assert result["errors"][0]["endIndex"] == 3


def test_parse_json_array_before_object():
    text = 'Issues: [{"type": "punctuation"}] end'
    result = parse_json_response(text)
    assert isinstance(result, list)
    assert result[0]["type"] == "punctuation"


def test_blank_text_is_an_empty_object():
    assert parse_json_response("") == {}
    assert parse_json_response("   \n") == {}


def test_text_without_json_raises_value_error():
    with pytest.raises(ValueError, match="does not contain JSON"):
        parse_json_response("I could not find any errors.")


def test_non_string_input_raises_value_error():
    with pytest.raises(ValueError, match="Expected string input"):
        parse_json_response(None)  # type: ignore[arg-type]


def test_backticks_inside_json_string_are_kept():
    text = (
        '{"errors": [{"type": "punctuation", "message": "Close the fence.", '
        '"suggestion": "```py```", "startIndex": 0, "endIndex": 8, '
        '"originalText": "```py``"}]}'
    )
    result = parse_json_response(text)
    assert result["errors"][0]["suggestion"] == "```py```"
    assert result["errors"][0]["originalText"] == "```py``"


def test_fenced_reply_with_backticks_inside_string():
    text = '```json\n{"errors": [{"suggestion": "use ```code```"}]}\n```'
    result = parse_json_response(text)
    assert result["errors"][0]["suggestion"] == "use ```code```"
