"""Pydantic models describing API payloads."""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Level(str, Enum):
    """Swimmer experience level."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class TemplateType(str, Enum):
    """Named sampling presets for plan generation."""

    DETAILED = "detailed"
    QUICK = "quick"
    CREATIVE = "creative"


class Accessory(str, Enum):
    """Pool equipment a swimmer may have available."""

    FINS = "Fins"
    SNORKEL = "Snorkel"
    HAND_FINS = "Hand Fins"
    PULLBUOY = "Pullbuoy"
    KICKBOARD = "Kickboard"


class ApiModel(BaseModel):
    """Base schema using camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Exercise(ApiModel):
    """One structured workout step."""

    name: str = Field(min_length=1)
    sets: int = Field(default=1, ge=1)
    reps: int = Field(default=1, ge=1)
    notes: str = ""


class TrainingRequest(ApiModel):
    """Parameters for generating a new training plan."""

    level: Level
    goals: list[str] = Field(min_length=1)
    days_per_week: int = Field(ge=1, le=7)
    duration: int = Field(ge=1, description="Session duration in minutes")
    accessories: list[Accessory] = []

    @field_validator("goals")
    @classmethod
    def dedupe_goals(cls, value: list[str]) -> list[str]:
        """Drop blank and repeated goal labels while keeping their order."""

        cleaned = list(dict.fromkeys(goal.strip() for goal in value if goal.strip()))
        if not cleaned:
            raise ValueError("At least one goal is required")
        return cleaned


class TrainingPlan(ApiModel):
    """A generated or saved swimming training plan."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    exercises: list[Exercise] = Field(min_length=1)
    level: Level | None = None
    goals: list[str] = []
    days_per_week: int | None = Field(default=None, ge=1)
    duration: int | None = Field(default=None, ge=1)
    created_at: datetime | None = None
    provider: str | None = None
    model: str | None = None
    template_type: TemplateType | None = None


class GenerationResult(BaseModel):
    """Raw text returned by a provider with its provenance."""

    content: str
    model: str
    provider: str
