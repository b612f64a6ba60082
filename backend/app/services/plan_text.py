"""String helpers shared by plan validation and fallback synthesis."""
from __future__ import annotations

import re
from typing import Iterable, List

WORD_PATTERN = re.compile(r"[a-z0-9]+", re.IGNORECASE)
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: object) -> str:
    """Lower-case, drop punctuation and collapse whitespace.

    Two sentences count as duplicates when their normalized forms match, so
    "I show up." and "i show up" are the same item.
    """
    value = str(text or "").lower()
    value = _NON_ALNUM.sub("", value)
    return _WHITESPACE.sub(" ", value).strip()


def tokenize(text: object) -> List[str]:
    return [word.lower() for word in WORD_PATTERN.findall(str(text or ""))]


def dedupe(items: Iterable[object]) -> List[str]:
    """Keep the first occurrence of each normalized sentence, dropping blanks."""
    seen: set[str] = set()
    unique: List[str] = []
    for item in items:
        key = normalize(item)
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(str(item))
    return unique
