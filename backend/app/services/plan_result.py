"""Plan object returned by the generation pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

MODEL_DEBUG_TAG = "ANCHOR_MULTI_V2"
FALLBACK_INVALID_OUTPUT = "fallback:invalid_output"
FALLBACK_MODEL_STATUS = "fallback:model_status"
FALLBACK_MODEL_TRANSPORT = "fallback:model_transport"
FALLBACK_MODEL_EMPTY = "fallback:model_empty"
FALLBACK_OFFLINE = "fallback:offline"

GATEWAY_FAILURE_TAGS = {
    "status": FALLBACK_MODEL_STATUS,
    "transport": FALLBACK_MODEL_TRANSPORT,
    "empty_content": FALLBACK_MODEL_EMPTY,
}


@dataclass
class GeneratedPlan:
    goal_anchor: str
    affirmations: List[str]
    actions: List[str]
    debug: str
    attempts: int = 0
    issues: List[str] = field(default_factory=list)

    @property
    def from_model(self) -> bool:
        return self.debug == MODEL_DEBUG_TAG

    def to_response(self) -> Dict[str, Any]:
        return {
            "goal_anchor": self.goal_anchor,
            "affirmations": list(self.affirmations),
            "actions": list(self.actions),
            "debug": self.debug,
        }
