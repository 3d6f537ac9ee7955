"""Generate one swimming plan from the command line and print it as JSON."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from swim_planner.config import get_settings
from swim_planner.errors import GenerationError
from swim_planner.logging_config import configure_logging
from swim_planner.models.schemas import Level, TrainingRequest
from swim_planner.services.generation_client import GenerationClient
from swim_planner.services.plan_generator import PlanGenerator
from swim_planner.services.providers import build_provider


logger = logging.getLogger("generate_plan")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a swimming training plan")
    parser.add_argument("--level", choices=[level.value for level in Level], required=True)
    parser.add_argument("--goal", dest="goals", action="append", required=True, help="Repeat for several goals")
    parser.add_argument("--days-per-week", type=int, required=True)
    parser.add_argument("--duration", type=int, required=True, help="Session duration in minutes")
    parser.add_argument("--accessory", dest="accessories", action="append", default=[])
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> str:
    settings = get_settings()
    client = GenerationClient(
        build_provider(settings),
        model=settings.generation_model,
        timeout_seconds=settings.generation_timeout_seconds,
    )
    request = TrainingRequest(
        level=args.level,
        goals=args.goals,
        days_per_week=args.days_per_week,
        duration=args.duration,
        accessories=args.accessories,
    )
    plan = await PlanGenerator(client).generate(request)
    return plan.model_dump_json(by_alias=True, indent=2)


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = parse_args(argv)
    try:
        print(asyncio.run(run(args)))
    except GenerationError as exc:
        logger.error("Plan generation failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
