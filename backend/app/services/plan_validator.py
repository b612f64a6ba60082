"""Structural and semantic checks for model-generated plan candidates."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from app.core.config import PlanPolicy
from app.services.anchor_keywords import derive_fallback_anchor, extract_keywords
from app.services.plan_text import dedupe, normalize, tokenize

GENERIC_ACTION_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"write down one concrete step",
        r"track one habit",
        r"write one measurable action",
        r"write down one measurable action",
        r"write down one action",
        r"note one measurable action",
        r"one step at a time",
    )
]

GENERIC_ACTION_WORDS = frozenset(
    {
        "write", "down", "one", "two", "three", "four", "five", "today", "daily", "weekly",
        "step", "steps", "track", "tracking", "habit", "habits", "measurable", "action", "actions",
        "plan", "plans", "planning", "goal", "goals", "list", "lists", "note", "notes", "journal",
        "reflect", "reflection", "think", "thinking", "review", "record", "recording", "log",
        "logging", "simple", "quick", "short", "minute", "minutes", "task", "tasks", "practice",
        "practicing", "progress", "improve", "improving", "build", "building", "focus", "focusing",
        "toward", "related", "the", "and", "for", "your", "about",
    }
)

_MINUTES = re.compile(r"(\d+)\s*(?:-|\s)?\s*(?:minutes?|mins?)\b", re.IGNORECASE)


@dataclass
class ValidationReport:
    goal_anchor: str
    keywords: FrozenSet[str]
    affirmations: List[str]
    actions: List[str]
    anchor_valid: bool = False
    counts_ok: bool = False
    unique_ok: bool = False
    coverage_ok: bool = False
    actions_ok: bool = False
    uncovered_items: List[str] = field(default_factory=list)
    generic_actions: List[str] = field(default_factory=list)
    over_budget_actions: List[str] = field(default_factory=list)
    length_violations: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return all((self.anchor_valid, self.counts_ok, self.unique_ok, self.coverage_ok, self.actions_ok))

    @property
    def issues(self) -> List[str]:
        issues: List[str] = []
        if not self.anchor_valid:
            issues.append("goal_anchor missing, wrong length, or identical to the goal")
        if not self.counts_ok:
            issues.append("wrong number of affirmations or actions")
        if not self.unique_ok:
            issues.append("duplicate items after normalization")
        if self.uncovered_items:
            issues.append(f"{len(self.uncovered_items)} item(s) miss anchor keywords")
        elif not self.coverage_ok:
            issues.append("anchor has no usable keywords")
        if self.generic_actions:
            issues.append(f"generic actions: {self.generic_actions}")
        if self.over_budget_actions:
            issues.append(f"actions over time budget: {self.over_budget_actions}")
        if self.length_violations:
            issues.append(f"items outside length limits: {self.length_violations}")
        return issues

    def to_dict(self) -> Dict[str, Any]:
        return {
            "goal_anchor": self.goal_anchor,
            "keywords": sorted(self.keywords),
            "affirmations": self.affirmations,
            "actions": self.actions,
            "anchor_valid": self.anchor_valid,
            "counts_ok": self.counts_ok,
            "unique_ok": self.unique_ok,
            "coverage_ok": self.coverage_ok,
            "actions_ok": self.actions_ok,
            "is_valid": self.is_valid,
            "issues": self.issues,
        }


def coerce_string_list(value: Any, limit: int) -> List[str]:
    """First `limit` non-blank string entries of a list; anything else yields []."""
    if not isinstance(value, list):
        return []
    items = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return items[:limit]


def is_valid_anchor(anchor: Any, goal: str, policy: PlanPolicy) -> bool:
    if not isinstance(anchor, str) or not anchor.strip():
        return False
    word_count = len(tokenize(anchor))
    if word_count < policy.anchor_min_words or word_count > policy.anchor_max_words:
        return False
    return normalize(anchor) != normalize(goal)


def count_keyword_hits(text: str, keywords: Iterable[str]) -> int:
    """Number of distinct keywords present in text as whole words."""
    words = set(tokenize(text))
    return sum(1 for keyword in set(keywords) if keyword in words)


def has_keyword_coverage(text: str, keywords: FrozenSet[str], min_hits: int = 2) -> bool:
    if not keywords:
        return False
    return count_keyword_hits(text, keywords) >= min(min_hits, len(keywords))


def matches_generic_action_pattern(action: str) -> bool:
    return any(pattern.search(action or "") for pattern in GENERIC_ACTION_PATTERNS)


def has_concrete_object_token(action: str, anchor_keywords: Iterable[str] = ()) -> bool:
    """True when the action names something beyond filler words and the anchor itself."""
    excluded = set(anchor_keywords)
    return any(
        len(token) >= 3 and token not in GENERIC_ACTION_WORDS and token not in excluded
        for token in tokenize(action)
    )


def is_generic_action(action: str, anchor_keywords: Iterable[str] = ()) -> bool:
    return matches_generic_action_pattern(action) and not has_concrete_object_token(action, anchor_keywords)


def exceeds_time_budget(action: str, max_minutes: int) -> bool:
    if max_minutes <= 0:
        return False
    return any(int(amount) > max_minutes for amount in _MINUTES.findall(action or ""))


def validate_plan(
    candidate: Optional[Dict[str, Any]],
    goal: str,
    policy: Optional[PlanPolicy] = None,
) -> ValidationReport:
    """Check a parsed candidate against anchoring, count, uniqueness, coverage and action rules.

    Never raises. When the candidate's anchor is unusable the report carries a
    goal-derived anchor instead, so a later fallback stays on topic.
    """
    policy = policy or PlanPolicy()
    payload = candidate if isinstance(candidate, dict) else {}

    raw_anchor = payload.get("goal_anchor")
    anchor_valid = is_valid_anchor(raw_anchor, goal, policy)
    if anchor_valid:
        anchor = raw_anchor.strip()
    else:
        anchor = derive_fallback_anchor(goal, max_tokens=policy.fallback_anchor_max_tokens)
    keywords = extract_keywords(anchor, min_length=policy.min_keyword_length)

    raw_affirmations = coerce_string_list(payload.get("affirmations"), policy.affirmation_count)
    raw_actions = coerce_string_list(payload.get("actions"), policy.action_count)
    counts_ok = len(raw_affirmations) == policy.affirmation_count and len(raw_actions) == policy.action_count

    affirmations = dedupe(raw_affirmations)
    actions = dedupe(raw_actions)
    unique_ok = len(affirmations) == policy.affirmation_count and len(actions) == policy.action_count

    uncovered = [
        item
        for item in affirmations + actions
        if not has_keyword_coverage(item, keywords, policy.min_keyword_hits)
    ]
    coverage_ok = bool(keywords) and not uncovered

    generic_actions = [action for action in actions if is_generic_action(action, keywords)]
    over_budget = [action for action in actions if exceeds_time_budget(action, policy.action_max_minutes)]
    length_violations = _length_violations(affirmations, actions, policy)
    actions_ok = not generic_actions and not over_budget and not length_violations

    return ValidationReport(
        goal_anchor=anchor,
        keywords=keywords,
        affirmations=affirmations,
        actions=actions,
        anchor_valid=anchor_valid,
        counts_ok=counts_ok,
        unique_ok=unique_ok,
        coverage_ok=coverage_ok,
        actions_ok=actions_ok,
        uncovered_items=uncovered,
        generic_actions=generic_actions,
        over_budget_actions=over_budget,
        length_violations=length_violations,
    )


def _length_violations(affirmations: List[str], actions: List[str], policy: PlanPolicy) -> List[str]:
    violations: List[str] = []
    for items, min_chars in ((affirmations, policy.min_affirmation_chars), (actions, policy.min_action_chars)):
        for item in items:
            too_short = min_chars > 0 and len(item) < min_chars
            too_long = policy.max_item_words > 0 and len(tokenize(item)) > policy.max_item_words
            if too_short or too_long:
                violations.append(item)
    return violations
