"""AI-powered swimming plan generation."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from swim_planner.models.schemas import TrainingPlan, TrainingRequest
from swim_planner.services.generation_client import GenerationClient, select_template_type
from swim_planner.services.prompt_builder import build_prompt
from swim_planner.services.response_parser import parse_exercises


logger = logging.getLogger(__name__)


def new_plan_id(now: datetime | None = None) -> str:
    """Return a ``plan-<epoch ms>`` identifier; unique only in practice."""

    now = now or datetime.now(timezone.utc)
    return f"plan-{int(now.timestamp() * 1000)}"


class PlanGenerator:
    """Builds a complete training plan from the swimmer's parameters."""

    def __init__(self, client: GenerationClient) -> None:
        self.client = client

    async def generate(self, request: TrainingRequest) -> TrainingPlan:
        """
        Generate a training plan.

        Args:
            request: Level, goals, weekly frequency and session duration

        Returns:
            TrainingPlan: Transient plan; it is not stored until saved explicitly

        Raises:
            GenerationError: If the provider call fails
        """

        prompt = build_prompt(
            level=request.level,
            goals=request.goals,
            days_per_week=request.days_per_week,
            duration=request.duration,
            accessories=request.accessories,
        )
        template_type = select_template_type(request.duration)
        result = await self.client.generate(prompt, template_type)
        exercises = parse_exercises(result.content)

        created_at = datetime.now(timezone.utc)
        plan = TrainingPlan(
            id=new_plan_id(created_at),
            name=f"{request.level.value} Swimming Plan",
            description=(
                f"Goals: {', '.join(request.goals)}. "
                f"{request.days_per_week} days per week, {request.duration} minutes per session."
            ),
            exercises=exercises,
            level=request.level,
            goals=request.goals,
            days_per_week=request.days_per_week,
            duration=request.duration,
            created_at=created_at,
            provider=result.provider,
            model=result.model,
            template_type=template_type,
        )

        logger.info(
            "Generated training plan: id=%s, level=%s, template=%s, exercises=%d",
            plan.id,
            request.level.value,
            template_type.value,
            len(exercises),
        )
        return plan
