"""System and user prompts for goal-anchored plan generation."""
from __future__ import annotations

import json
from typing import Any, Dict, Optional, Sequence, Tuple

from app.core.config import PlanPolicy
from app.services.plan_result import MODEL_DEBUG_TAG

HISTORY_LIMIT = 3

SYSTEM_PROMPT = (
    "You are a behavioral science coach who turns one personal goal into a tiny, concrete plan.\n\n"
    "Hard rules:\n"
    "- Stay anchored to ONE domain: the domain of the user's goal. Never drift into unrelated areas.\n"
    "- Output a single JSON object only. No markdown, no code fences, no explanations, no extra keys.\n"
    "- Never repeat the user's goal sentence verbatim.\n"
    "- Avoid generic motivational filler (e.g. 'I can do it', 'one step at a time') "
    "unless it is made concrete with goal-specific words.\n\n"
    "Affirmations span different tracks: identity, emotional regulation, cognitive reframe, "
    "behavioral confidence, environment/support. Micro-actions are tiny, specific, and leave "
    "something visible behind (a note, a list, a message, a placed object)."
)


def build_plan_prompts(
    goal: str,
    *,
    strict: bool = False,
    nickname: Optional[str] = None,
    history: Optional[Sequence[Dict[str, Any]]] = None,
    policy: Optional[PlanPolicy] = None,
) -> Tuple[str, str]:
    """Return (system_prompt, user_prompt) for one generation attempt.

    The strict variant is only used on a retry; it adds a directive that
    demands zero duplicates and literal anchor keywords.
    """
    policy = policy or PlanPolicy()
    return SYSTEM_PROMPT, _user_prompt(goal, strict, nickname, history, policy)


def _user_prompt(
    goal: str,
    strict: bool,
    nickname: Optional[str],
    history: Optional[Sequence[Dict[str, Any]]],
    policy: PlanPolicy,
) -> str:
    hits = policy.min_keyword_hits
    schema = {
        "goal_anchor": f"short anchor phrase ({policy.anchor_min_words}-{policy.anchor_max_words} words)",
        "affirmations": ["..."] * policy.affirmation_count,
        "actions": ["..."] * policy.action_count,
        "debug": MODEL_DEBUG_TAG,
    }
    lines = [f'User goal: "{goal.strip()}"']
    if nickname:
        lines.append(f'User nickname: "{nickname.strip()}"')
    lines.append(_history_context(history))
    lines.extend(
        [
            "",
            "Steps:",
            f"1. Derive ONE goal_anchor: a concrete {policy.anchor_min_words}-{policy.anchor_max_words} word phrase "
            "that restates the goal in a fixed domain. It must NOT be the literal goal text.",
            f"2. Write EXACTLY {policy.affirmation_count} first-person affirmations. Each one must contain at least "
            f"{hits} words from goal_anchor, written exactly as they appear in goal_anchor. No two affirmations may "
            "repeat the same sentence.",
            f"3. Write EXACTLY {policy.action_count} micro-actions. Each one takes {policy.action_max_minutes} minutes "
            f"or less, names a concrete object (a note, a file, a shoe, a contact), produces a visible or written "
            f"outcome, and contains at least {hits} words from goal_anchor. The two actions must differ.",
            "",
            "Return a JSON object with exactly these keys:",
            json.dumps(schema, indent=2),
        ]
    )
    if strict:
        lines.extend(
            [
                "",
                "STRICT RETRY: the previous answer was rejected. Zero duplicates are allowed across affirmations "
                "and across actions. Every item must include the goal_anchor keywords exactly as spelled. Do not use "
                "placeholder actions such as 'write down one concrete step' or 'track one habit'.",
            ]
        )
    return "\n".join(lines)


def _history_context(history: Optional[Sequence[Dict[str, Any]]]) -> str:
    if not history:
        return "No previous history."
    recent = list(history)[:HISTORY_LIMIT]
    return f"User history: {json.dumps(recent, separators=(',', ':'), default=str)}"
