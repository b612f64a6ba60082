"""Plan generation endpoint."""
from __future__ import annotations

from functools import lru_cache
from time import perf_counter
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.api.schemas.plan import PlanRequest, PlanResponse
from app.core.config import PlannerConfig, settings
from app.core.errors import ClientInputError, ConfigurationError
from app.observability.metrics import log_metric
from app.observability.tracing import annotate, trace
from app.services.plan_orchestrator import PlanOrchestrator

router = APIRouter()


@lru_cache
def _build_orchestrator() -> PlanOrchestrator:
    return PlanOrchestrator(PlannerConfig.from_settings(settings))


def get_plan_orchestrator() -> PlanOrchestrator:
    """Shared orchestrator; a missing credential surfaces as a 500 before any model call."""
    try:
        return _build_orchestrator()
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"configuration error: {exc}",
        ) from exc


@router.post("/plan", response_model=PlanResponse, tags=["plan"])
def generate_plan_endpoint(
    payload: PlanRequest,
    http_request: Request,
    orchestrator: PlanOrchestrator = Depends(get_plan_orchestrator),
) -> PlanResponse:
    """Turn a wish into five affirmations and two micro-actions."""
    request_id = getattr(http_request.state, "request_id", None)
    base_metadata: Dict[str, Any] = {"route": "/plan", "history_entries": len(payload.history)}
    history = [entry.to_prompt_dict() for entry in payload.history]

    start_time = perf_counter()
    with trace("http.plan", metadata=base_metadata, request_id=request_id) as span:
        try:
            plan = orchestrator.generate_plan(
                payload.wish,
                payload.nickname,
                history,
                request_id=request_id,
            )
        except ClientInputError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        annotate(span, {**base_metadata, "debug": plan.debug})

    latency_ms = (perf_counter() - start_time) * 1000
    log_metric("plan.latency_ms", latency_ms, {"debug": plan.debug})
    return PlanResponse(**plan.to_response())
