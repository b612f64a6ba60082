"""Tests for lenient model-output parsing."""
from __future__ import annotations

import json

import pytest

from app.services.plan_parser import normalize_plan_fields, parse, parse_plan_response


def test_parse_reads_direct_json() -> None:
    parsed = parse('{"goal_anchor":"health habits","affirmations":["a"],"actions":["b"],"debug":"ANCHOR_MULTI_V2"}')
    assert parsed["goal_anchor"] == "health habits"


@pytest.mark.parametrize("value", ["plain text", ["a", "b"], {"nested": {"list": [1, "two"]}}])
def test_parse_round_trips_well_formed_json(value) -> None:
    assert parse(json.dumps(value)) == value


def test_parse_recovers_object_wrapped_in_prose() -> None:
    raw = (
        "Here is your plan:\n"
        '{"goal_anchor":"career growth","affirmations":[],"actions":[],"debug":"ANCHOR_MULTI_V2"}\n'
        "Thanks"
    )
    assert parse(raw)["goal_anchor"] == "career growth"


def test_parse_recovers_object_inside_code_fence() -> None:
    raw = '```json\n{"goal_anchor": "savings routine"}\n```'
    assert parse(raw) == {"goal_anchor": "savings routine"}


@pytest.mark.parametrize("raw", ["", None, "no json here", "{broken: json", "prefix {not valid} suffix"])
def test_parse_returns_none_on_garbage(raw) -> None:
    assert parse(raw) is None


def test_parse_treats_deeply_nested_json_as_unparseable() -> None:
    depth = 100_000
    raw = '{"a": ' + "[" * depth + "]" * depth + "}"

    assert parse(raw) is None
    assert parse_plan_response(f"Plan: {raw}") is None


@pytest.mark.parametrize("raw", ["{" * 50_000, "} then {", "}" * 10 + "text"])
def test_parse_without_a_closing_brace_after_an_opening_one(raw) -> None:
    assert parse(raw) is None


def test_normalize_plan_fields_maps_action_aliases() -> None:
    for alias in ("micro_actions", "microActions", "micro-actions"):
        normalized = normalize_plan_fields({alias: ["x", "y"], "goalAnchor": "fitness base"})
        assert normalized["actions"] == ["x", "y"]
        assert normalized["goal_anchor"] == "fitness base"
        assert alias not in normalized


def test_normalize_plan_fields_keeps_canonical_key_over_alias() -> None:
    normalized = normalize_plan_fields({"actions": ["canonical"], "microActions": ["alias"]})
    assert normalized["actions"] == ["canonical"]


def test_normalize_plan_fields_flattens_text_objects() -> None:
    normalized = normalize_plan_fields(
        {"affirmations": [{"text": "I save for my home fund.", "reasoning": "identity"}, "plain", 3]}
    )
    assert normalized["affirmations"] == ["I save for my home fund.", "plain", 3]


def test_parse_plan_response_rejects_non_objects() -> None:
    assert parse_plan_response('["a", "b"]') is None
    assert parse_plan_response("not json") is None
    assert parse_plan_response('{"micro_actions": ["a"]}') == {"actions": ["a"]}
