"""Pydantic schemas for the plan generation API."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class HistoryEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    date: Optional[str] = None
    wish: Optional[str] = None
    completed_actions: int = Field(default=0, ge=0, alias="completedActions")
    total_actions: int = Field(default=0, ge=0, alias="totalActions")

    def to_prompt_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PlanRequest(BaseModel):
    # wish and nickname are checked by the orchestrator so blanks map to a 400.
    wish: Optional[str] = Field(default=None, max_length=2000)
    nickname: Optional[str] = Field(default=None, max_length=100)
    history: List[HistoryEntry] = Field(default_factory=list)


class PlanResponse(BaseModel):
    goal_anchor: str
    affirmations: List[str] = Field(..., min_length=5, max_length=5)
    actions: List[str] = Field(..., min_length=2, max_length=2)
    debug: str
