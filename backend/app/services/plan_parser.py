"""Lenient JSON extraction from raw chat-completion text."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


FIELD_ALIASES: Dict[str, tuple[str, ...]] = {
    "goal_anchor": ("goalAnchor", "anchor", "goal-anchor"),
    "affirmations": ("affirmation_list",),
    "actions": ("micro_actions", "microActions", "micro-actions", "micro_action_list"),
}


def parse(raw_text: Optional[str]) -> Any:
    """Parse model output as JSON, returning None instead of raising.

    Direct parsing is tried first; otherwise the span from the first "{" to
    the last "}" is parsed, which recovers objects wrapped in prose or code
    fences. Payloads nested too deeply to decode count as unparseable.
    """
    text = str(raw_text or "")
    try:
        return json.loads(text)
    except (TypeError, ValueError, RecursionError):
        pass

    block = _object_block(text)
    if block is None:
        return None
    try:
        return json.loads(block)
    except (ValueError, RecursionError):
        logger.debug("Embedded JSON block could not be parsed (%d chars)", len(block))
        return None


def _object_block(text: str) -> Optional[str]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start : end + 1]


def normalize_plan_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Map known field aliases onto canonical keys and flatten {"text": ...} items."""
    normalized = dict(payload)
    for canonical, aliases in FIELD_ALIASES.items():
        if canonical in normalized:
            continue
        for alias in aliases:
            if alias in normalized:
                normalized[canonical] = normalized[alias]
                break
    for alias_list in FIELD_ALIASES.values():
        for alias in alias_list:
            normalized.pop(alias, None)

    for key in ("affirmations", "actions"):
        items = normalized.get(key)
        if isinstance(items, list):
            normalized[key] = [_flatten_item(item) for item in items]
    return normalized


def parse_plan_response(raw_text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse a plan candidate; anything other than a JSON object counts as unparseable."""
    parsed = parse(raw_text)
    if not isinstance(parsed, dict):
        return None
    return normalize_plan_fields(parsed)


def _flatten_item(item: Any) -> Any:
    if isinstance(item, dict) and isinstance(item.get("text"), str):
        return item["text"]
    return item
