"""Print plans for sample goals, offline by default."""
from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from typing import List, Optional, TextIO

from app.core.config import PlannerConfig, settings
from app.core.errors import ConfigurationError
from app.core.logging import configure_logging
from app.services.anchor_keywords import derive_fallback_anchor
from app.services.fallback_plan import synthesize
from app.services.plan_orchestrator import PlanOrchestrator
from app.services.plan_result import FALLBACK_OFFLINE

logger = logging.getLogger(__name__)

DEFAULT_GOALS = (
    "I want to be rich",
    "I want to get healthier",
    "I want to improve my relationship",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("goals", nargs="*", help="Goals to plan for (defaults to three samples).")
    parser.add_argument("--seed", type=int, default=None, help="Seed for fallback template selection.")
    parser.add_argument("--nickname", default="friend", help="Nickname passed to the model in --live mode.")
    parser.add_argument("--live", action="store_true", help="Call the configured model instead of the offline fallback.")
    return parser


def main(argv: Optional[List[str]] = None, out: TextIO = sys.stdout) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(log_level=settings.log_level)
    goals = args.goals or list(DEFAULT_GOALS)
    rng = random.Random(args.seed)

    orchestrator = None
    if args.live:
        try:
            orchestrator = PlanOrchestrator(PlannerConfig.from_settings(settings), rng=rng)
        except ConfigurationError as exc:
            logger.error("Cannot run live demo: %s", exc)
            return 2

    for goal in goals:
        if orchestrator is not None:
            plan = orchestrator.generate_plan(goal, args.nickname)
        else:
            plan = synthesize(derive_fallback_anchor(goal), rng=rng, debug=FALLBACK_OFFLINE)
        out.write(f"Goal: {goal}\n")
        out.write(json.dumps(plan.to_response(), indent=2))
        out.write("\n---\n")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
