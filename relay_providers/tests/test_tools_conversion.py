"""Tool declaration conversion and ``tool_choice`` mapping."""
from __future__ import annotations

import copy

import pytest

from relay_providers.base.tools import (
    convert_openai_tool_to_anthropic,
    convert_openai_tools_to_gemini,
    convert_tools_for_openai,
    convert_tools_for_responses,
    ensure_all_required,
    strip_unsupported_schema_fields,
    to_anthropic_tool_choice,
    to_gemini_function_calling,
    to_mistral_tool_choice,
)

READ_FILE = {
    "type": "function",
    "function": {
        "name": "read_file",
        "description": "Read a file",
        "parameters": {
            "type": "object",
            "properties": {
                "path": {"type": "string"},
                "encoding": {"type": ["string", "null"]},
                "ranges": {
                    "type": "array",
                    "minItems": 1,
                    "items": {"type": "object", "properties": {"start": {"type": "integer"}}},
                },
            },
            "required": ["path"],
        },
    },
}


def test_anthropic_conversion():
    out = convert_openai_tool_to_anthropic(READ_FILE)
    assert out["name"] == "read_file" and out["description"] == "Read a file"  # nosec B101
    assert out["input_schema"] is READ_FILE["function"]["parameters"]  # nosec B101
    bare = convert_openai_tool_to_anthropic({"type": "function", "function": {"name": "f", "parameters": {}}})
    assert bare["description"] == ""  # nosec B101


def test_anthropic_conversion_rejects_other_types():
    with pytest.raises(ValueError):
        convert_openai_tool_to_anthropic({"type": "web_search"})


def test_gemini_declarations():
    out = convert_openai_tools_to_gemini([READ_FILE])
    decl = out["functionDeclarations"][0]
    assert decl["name"] == "read_file"  # nosec B101
    assert decl["parametersJsonSchema"]["type"] == "object"  # nosec B101


def test_ensure_all_required_recurses_without_mutating():
    original = copy.deepcopy(READ_FILE["function"]["parameters"])
    schema = ensure_all_required(READ_FILE["function"]["parameters"])
    assert schema["required"] == ["path", "encoding", "ranges"]  # nosec B101
    assert schema["properties"]["encoding"]["type"] == "string"  # nosec B101
    assert schema["properties"]["ranges"]["items"]["required"] == ["start"]  # nosec B101
    assert READ_FILE["function"]["parameters"] == original  # nosec B101
    assert ensure_all_required({"type": "string"}) == {"type": "string"}  # nosec B101


def test_convert_tools_for_openai_sets_strict():
    out = convert_tools_for_openai([READ_FILE, {"type": "custom", "x": 1}])
    assert out[0]["function"]["strict"] is True  # nosec B101
    assert out[0]["function"]["parameters"]["required"] == ["path", "encoding", "ranges"]  # nosec B101
    assert out[1] == {"type": "custom", "x": 1}  # nosec B101
    assert convert_tools_for_openai(None) is None  # nosec B101


def test_schema_transform_strips_array_bounds():
    out = convert_tools_for_openai([READ_FILE], strip_unsupported_schema_fields)
    ranges = out[0]["function"]["parameters"]["properties"]["ranges"]
    assert "minItems" not in ranges  # nosec B101
    assert "minItems" in READ_FILE["function"]["parameters"]["properties"]["ranges"]  # nosec B101


def test_responses_tools_are_flat_and_strict():
    out = convert_tools_for_responses([READ_FILE, {"type": "custom"}])
    assert len(out) == 1  # nosec B101
    assert out[0]["type"] == "function" and out[0]["name"] == "read_file" and out[0]["strict"] is True  # nosec B101


@pytest.mark.parametrize(
    "choice,parallel,expected",
    [
        ("none", None, None),
        ("auto", True, {"type": "auto", "disable_parallel_tool_use": False}),
        ("required", None, {"type": "any", "disable_parallel_tool_use": True}),
        (
            {"type": "function", "function": {"name": "read_file"}},
            False,
            {"type": "tool", "name": "read_file", "disable_parallel_tool_use": True},
        ),
        (None, None, {"type": "auto", "disable_parallel_tool_use": True}),
    ],
)
def test_anthropic_tool_choice(choice, parallel, expected):
    assert to_anthropic_tool_choice(choice, parallel) == expected  # nosec B101


@pytest.mark.parametrize(
    "choice,expected",
    [
        ("none", ("NONE", None)),
        ("required", ("ANY", None)),
        ({"type": "function", "function": {"name": "f"}}, ("ANY", ["f"])),
        ("auto", ("AUTO", None)),
        ("weird", ("AUTO", None)),
    ],
)
def test_gemini_function_calling(choice, expected):
    assert to_gemini_function_calling(choice) == expected  # nosec B101


def test_mistral_always_forces_tools():
    assert to_mistral_tool_choice("auto") == "any"  # nosec B101
    assert to_mistral_tool_choice(None) == "any"  # nosec B101
