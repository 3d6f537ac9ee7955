"""FastAPI dependencies resolving the shared services built at startup."""
from typing import Annotated

from fastapi import Depends, Request

from swim_planner.config import Settings, get_settings
from swim_planner.services.generation_client import GenerationClient
from swim_planner.services.plan_generator import PlanGenerator
from swim_planner.services.plan_store import PlanStore


def get_plan_store(request: Request) -> PlanStore:
    """Return the process-wide plan store."""
    return request.app.state.plan_store


def get_generation_client(request: Request) -> GenerationClient:
    return request.app.state.generation_client


def get_plan_generator(
    client: Annotated[GenerationClient, Depends(get_generation_client)],
) -> PlanGenerator:
    return PlanGenerator(client)


def get_app_settings() -> Settings:
    return get_settings()
