"""Deterministic, anchor-referencing plans used when the model cannot be trusted."""
from __future__ import annotations

import random
from typing import List, Optional, Sequence

from app.services.anchor_keywords import DEFAULT_ANCHOR, extract_keywords
from app.services.plan_result import FALLBACK_OFFLINE, GeneratedPlan

# One pool per affirmation slot: identity, emotion, reframe, behavior, environment.
AFFIRMATION_POOLS: Sequence[Sequence[str]] = (
    (
        "I am the kind of person who shows up for {anchor}, even imperfectly.",
        "I am becoming someone who keeps promises to myself about {anchor}.",
        "I can be both learning and committed to {anchor} at the same time.",
    ),
    (
        "Even when I feel stuck, I stay gentle with myself while pursuing {anchor}.",
        "I can feel pressure and still take a calm step toward {anchor}.",
        "I do not need perfect confidence to move forward with {anchor}.",
    ),
    (
        "A slow day does not cancel my progress in {anchor}.",
        "I treat setbacks in {anchor} as feedback, not failure.",
        "I am allowed to iterate my way into {anchor}.",
    ),
    (
        "I choose one small action today that supports {anchor}.",
        "I build momentum in {anchor} by starting before I feel ready.",
        "My results in {anchor} come from small repeats, not big moods.",
    ),
    (
        "I set up my surroundings to make {anchor} easier, not harder.",
        "I ask for support and tools that make {anchor} more likely.",
        "I remove friction from my day so {anchor} can succeed.",
    ),
)

# One pool per action slot: list resources, then draft the next step.
ACTION_POOLS: Sequence[Sequence[str]] = (
    (
        "In 5 minutes, open a blank note titled '{anchor}' and list three resources you already have.",
        "Spend 3 minutes writing the names of two people or tools that can help with {anchor} on a sticky note.",
        "Set a 5-minute timer and jot every app, book, or contact you could use for {anchor} on paper.",
    ),
    (
        "Draft a one-sentence next step for {anchor} on an index card and place it on your desk.",
        "Type a 2-line message in your notes app describing tomorrow's first move on {anchor}.",
        "Sketch a tiny checklist for {anchor} with three boxes on a sheet of paper and tick the first box.",
    ),
)


def synthesize(
    anchor: Optional[str],
    *,
    rng: Optional[random.Random] = None,
    debug: str = FALLBACK_OFFLINE,
    attempts: int = 0,
    issues: Optional[List[str]] = None,
) -> GeneratedPlan:
    """Build five affirmations and two actions that all contain the anchor phrase.

    Each sentence comes from a different template pool, so the lists are unique
    by construction and every anchor keyword appears in every item. Anchors
    without usable keywords are replaced by the default anchor.
    """
    chooser = rng or random.Random()
    phrase = " ".join(str(anchor or "").split())
    if not extract_keywords(phrase):
        phrase = DEFAULT_ANCHOR

    affirmations = [chooser.choice(pool).format(anchor=phrase) for pool in AFFIRMATION_POOLS]
    actions = [chooser.choice(pool).format(anchor=phrase) for pool in ACTION_POOLS]
    return GeneratedPlan(
        goal_anchor=phrase,
        affirmations=affirmations,
        actions=actions,
        debug=debug,
        attempts=attempts,
        issues=list(issues or []),
    )
