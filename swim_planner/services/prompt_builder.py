"""Build the natural-language prompt sent to the text-generation provider."""
from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from swim_planner.errors import PlanValidationError


PROMPT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "prompts" / "plan_prompt.yaml"


@lru_cache()
def load_prompt_config(path: Path = PROMPT_CONFIG_PATH) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def system_instruction() -> str:
    """Return the coaching persona sent ahead of every prompt."""

    return load_prompt_config()["system_instruction"]


def _label(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def build_prompt(
    level: Any,
    goals: Iterable[str],
    days_per_week: int,
    duration: int,
    accessories: Iterable[Any] | None = None,
) -> str:
    """
    Assemble the plan request for a swimmer.

    Args:
        level: Swimmer level (``Level`` or its string value)
        goals: Goal labels, in the order the swimmer gave them
        days_per_week: Training days per week
        duration: Session duration in minutes
        accessories: Optional pool equipment available to the swimmer

    Returns:
        str: Prompt text embedding every parameter verbatim

    Raises:
        PlanValidationError: If any parameter is missing or empty
    """

    goal_labels = [str(goal).strip() for goal in goals or [] if str(goal).strip()]
    level_label = _label(level).strip() if level is not None else ""

    missing = []
    if not level_label:
        missing.append("level")
    if not goal_labels:
        missing.append("goals")
    if not days_per_week:
        missing.append("daysPerWeek")
    if not duration:
        missing.append("duration")
    if missing:
        raise PlanValidationError(f"Missing required fields: {', '.join(missing)}")

    config = load_prompt_config()
    equipment = config["equipment_lines"]
    accessory_labels = [_label(item) for item in accessories or []]
    if accessory_labels:
        equipment_line = equipment["with_accessories"].format(accessories=", ".join(accessory_labels))
    else:
        equipment_line = equipment["without_accessories"]

    return config["plan_prompt"].format(
        level=level_label,
        goals=", ".join(goal_labels),
        days_per_week=days_per_week,
        duration=duration,
        equipment_line=equipment_line,
    )
