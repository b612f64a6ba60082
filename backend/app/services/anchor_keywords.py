"""Goal-anchor keyword extraction and goal-derived anchors."""
from __future__ import annotations

from typing import FrozenSet, List

from app.services.plan_text import normalize, tokenize

DEFAULT_ANCHOR = "personal growth"
ALTERNATE_ANCHOR = "steady personal momentum"
SINGLE_TOKEN_FILLER = "progress"

GOAL_STOPWORDS = frozenset(
    {
        # pronouns
        "i", "im", "ive", "me", "my", "mine", "myself", "we", "us", "our", "you", "your",
        "he", "she", "they", "them", "their", "it", "its", "this", "that", "these", "those",
        # articles, auxiliaries and connectors
        "a", "an", "the", "to", "of", "for", "in", "on", "at", "by", "with", "and", "or", "but",
        "so", "as", "be", "am", "is", "are", "was", "were", "been", "being", "do", "does", "did",
        "will", "would", "should", "could", "can", "shall", "must", "might", "have", "has", "had",
        "not", "dont", "just", "really", "very", "much", "more", "most", "some", "any", "all",
        "too", "also", "year", "finally", "again", "lot", "lots",
        # generic wish verbs
        "want", "wanna", "wish", "hope", "need", "like", "love", "try", "trying", "get", "getting",
        "become", "becoming", "improve", "improving", "make", "making", "start", "keep", "stay",
        "feel", "go", "going", "better", "best", "good", "new",
    }
)


def extract_keywords(anchor: object, *, min_length: int = 3) -> FrozenSet[str]:
    """Distinct lower-cased tokens of the anchor that are long enough to match on."""
    return frozenset(token for token in tokenize(anchor) if len(token) >= min_length)


def derive_fallback_anchor(goal: object, *, max_tokens: int = 4) -> str:
    """Rewrite a free-text goal into a short anchor that never equals the goal.

    "I want to be rich" becomes "rich progress"; a goal made only of stopwords
    becomes the default anchor.
    """
    tokens: List[str] = []
    for token in tokenize(goal):
        if token in GOAL_STOPWORDS or token in tokens:
            continue
        tokens.append(token)
        if len(tokens) >= max_tokens:
            break

    if not tokens or tokens == [SINGLE_TOKEN_FILLER]:
        anchor = DEFAULT_ANCHOR
    elif len(tokens) == 1:
        anchor = f"{tokens[0]} {SINGLE_TOKEN_FILLER}"
    else:
        anchor = " ".join(tokens)

    goal_key = normalize(goal)
    if normalize(anchor) == goal_key:
        anchor = DEFAULT_ANCHOR
    if normalize(anchor) == goal_key:
        anchor = ALTERNATE_ANCHOR
    return anchor
