"""Goal-to-plan pipeline: prompt, call, parse, validate, retry, fall back."""
from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Sequence

from app.core.config import PlannerConfig
from app.core.errors import ClientInputError, ModelGatewayError
from app.observability.metrics import log_metric
from app.observability.tracing import annotate, trace
from app.services.anchor_keywords import derive_fallback_anchor, extract_keywords
from app.services.fallback_plan import synthesize
from app.services.model_gateway import ModelGateway, OpenAICompatibleGateway
from app.services.plan_parser import parse_plan_response
from app.services.plan_prompts import build_plan_prompts
from app.services.plan_result import (
    FALLBACK_INVALID_OUTPUT,
    GATEWAY_FAILURE_TAGS,
    MODEL_DEBUG_TAG,
    GeneratedPlan,
)
from app.services.plan_validator import ValidationReport, validate_plan

logger = logging.getLogger(__name__)


class PlanOrchestrator:
    """Turns a wish into a validated plan; always returns a plan for valid input.

    Attempts run sequentially with escalating strictness. A gateway failure
    ends the run immediately with a fallback plan, while unparseable or
    ungrounded output moves on to the next attempt. Instances hold no
    per-request state and can be shared across requests.
    """

    def __init__(
        self,
        config: PlannerConfig,
        gateway: Optional[ModelGateway] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.policy = config.policy
        self.gateway = gateway or OpenAICompatibleGateway(config)
        self._rng = rng

    def generate_plan(
        self,
        wish: Optional[str],
        nickname: Optional[str],
        history: Optional[Sequence[Dict[str, Any]]] = None,
        *,
        request_id: Optional[str] = None,
    ) -> GeneratedPlan:
        goal = (wish or "").strip()
        name = (nickname or "").strip()
        if not goal:
            raise ClientInputError("wish is required")
        if not name:
            raise ClientInputError("nickname is required")

        trace_metadata = {"model": self.config.model, "goal_length": len(goal)}
        with trace("plan.generate", metadata=trace_metadata, request_id=request_id) as span:
            plan = self._run_attempts(goal, name, history, trace_metadata, request_id)
            annotate(span, {**trace_metadata, "debug": plan.debug, "attempts": plan.attempts})

        log_metric("plan.attempts", plan.attempts, {"debug": plan.debug})
        if not plan.from_model:
            log_metric("plan.fallback.used", 1, {"debug": plan.debug})
        return plan

    def fallback_for(self, goal: str, debug: str) -> GeneratedPlan:
        """Synthesize a plan offline from a goal-derived anchor."""
        anchor = derive_fallback_anchor(goal, max_tokens=self.policy.fallback_anchor_max_tokens)
        return synthesize(anchor, rng=self._random(), debug=debug)

    def _run_attempts(
        self,
        goal: str,
        nickname: str,
        history: Optional[Sequence[Dict[str, Any]]],
        trace_metadata: Dict[str, Any],
        request_id: Optional[str],
    ) -> GeneratedPlan:
        latest_anchor = derive_fallback_anchor(goal, max_tokens=self.policy.fallback_anchor_max_tokens)
        issues: List[str] = []
        attempts = 0

        for attempt in range(1, self.policy.max_attempts + 1):
            strict = attempt > 1
            attempts = attempt
            system_prompt, user_prompt = build_plan_prompts(
                goal,
                strict=strict,
                nickname=nickname,
                history=history,
                policy=self.policy,
            )
            temperature = self.config.strict_temperature if strict else self.config.temperature
            attempt_metadata = {**trace_metadata, "attempt": attempt, "strict": strict}

            with trace("plan.attempt", metadata=attempt_metadata, request_id=request_id) as span:
                try:
                    raw = self.gateway.complete(system_prompt, user_prompt, temperature)
                except ModelGatewayError as exc:
                    logger.warning(
                        "Model call failed on attempt %s (kind=%s, status=%s): %s",
                        attempt,
                        exc.kind,
                        exc.status_code,
                        exc,
                    )
                    log_metric("plan.model.error", 1, {"kind": exc.kind, "status_code": exc.status_code})
                    debug = GATEWAY_FAILURE_TAGS.get(exc.kind, GATEWAY_FAILURE_TAGS["transport"])
                    return self._fallback(goal, latest_anchor, debug, attempts, issues + [str(exc)])

                candidate = parse_plan_response(raw)
                if candidate is None:
                    logger.info("Attempt %s returned unparseable output", attempt)
                    logger.debug("Unparseable model output: %.500s", raw)
                    issues.append(f"attempt {attempt}: unparseable output")
                    annotate(span, {**attempt_metadata, "parsed": False})
                    continue

                report = validate_plan(candidate, goal, self.policy)
                latest_anchor = report.goal_anchor
                annotate(span, {**attempt_metadata, "parsed": True, **_report_metadata(report)})
                log_metric("plan.validation.passed", 1 if report.is_valid else 0, {"attempt": attempt})

            if report.is_valid:
                logger.info("Attempt %s accepted (anchor=%r)", attempt, report.goal_anchor)
                return GeneratedPlan(
                    goal_anchor=report.goal_anchor,
                    affirmations=report.affirmations,
                    actions=report.actions,
                    debug=MODEL_DEBUG_TAG,
                    attempts=attempt,
                )

            logger.info("Attempt %s rejected: %s", attempt, "; ".join(report.issues))
            issues.extend(f"attempt {attempt}: {issue}" for issue in report.issues)

        return self._fallback(goal, latest_anchor, FALLBACK_INVALID_OUTPUT, attempts, issues)

    def _fallback(self, goal: str, anchor: str, debug: str, attempts: int, issues: List[str]) -> GeneratedPlan:
        # keyword-less model anchors give way to a goal-derived one
        if not extract_keywords(anchor, min_length=self.policy.min_keyword_length):
            anchor = derive_fallback_anchor(goal, max_tokens=self.policy.fallback_anchor_max_tokens)
        logger.info("Using fallback plan (%s) for anchor %r", debug, anchor)
        return synthesize(anchor, rng=self._random(), debug=debug, attempts=attempts, issues=issues)

    def _random(self) -> random.Random:
        if self._rng is not None:
            return self._rng
        return random.Random(self.config.fallback_seed)


def _report_metadata(report: ValidationReport) -> Dict[str, Any]:
    return {
        "valid": report.is_valid,
        "anchor_valid": report.anchor_valid,
        "affirmation_count": len(report.affirmations),
        "action_count": len(report.actions),
        "uncovered": len(report.uncovered_items),
        "generic_actions": len(report.generic_actions),
    }
