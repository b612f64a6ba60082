"""Tests for plan prompt rendering."""
from __future__ import annotations

from app.core.config import PlanPolicy
from app.services.plan_prompts import SYSTEM_PROMPT, build_plan_prompts
from app.services.plan_result import MODEL_DEBUG_TAG


def test_prompts_describe_the_contract() -> None:
    system_prompt, user_prompt = build_plan_prompts("I want to be rich")

    assert system_prompt == SYSTEM_PROMPT
    assert "JSON" in system_prompt
    assert "markdown" in system_prompt
    assert 'User goal: "I want to be rich"' in user_prompt
    assert "EXACTLY 5" in user_prompt
    assert "EXACTLY 2" in user_prompt
    assert "5 minutes or less" in user_prompt
    for key in ('"goal_anchor"', '"affirmations"', '"actions"', f'"{MODEL_DEBUG_TAG}"'):
        assert key in user_prompt
    assert "No previous history." in user_prompt
    assert "STRICT RETRY" not in user_prompt


def test_strict_prompt_appends_retry_directive() -> None:
    _, relaxed = build_plan_prompts("grow my career")
    _, strict = build_plan_prompts("grow my career", strict=True)

    assert strict.startswith(relaxed)
    assert "Zero duplicates" in strict


def test_history_is_limited_to_recent_entries() -> None:
    history = [{"wish": f"wish-{index}"} for index in range(5)]

    _, user_prompt = build_plan_prompts("grow my career", nickname="Sam", history=history)

    assert 'User nickname: "Sam"' in user_prompt
    assert "wish-2" in user_prompt
    assert "wish-3" not in user_prompt


def test_policy_constants_are_rendered() -> None:
    policy = PlanPolicy(action_max_minutes=3, anchor_max_words=4)

    _, user_prompt = build_plan_prompts("learn piano", policy=policy)

    assert "3 minutes or less" in user_prompt
    assert "2-4 word" in user_prompt


def test_builder_does_not_mutate_history() -> None:
    history = [{"wish": "save money"}]
    snapshot = [dict(entry) for entry in history]

    build_plan_prompts("save money", history=history, strict=True)

    assert history == snapshot
