"""Router exposing basic system endpoints."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from swim_planner.dependencies import get_generation_client, get_plan_store
from swim_planner.services.generation_client import GenerationClient
from swim_planner.services.plan_store import PlanStore


logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/status")
def get_status(
    client: Annotated[GenerationClient, Depends(get_generation_client)],
    store: Annotated[PlanStore, Depends(get_plan_store)],
) -> dict:
    """
    Report the configured provider and the number of saved plans.

    Returns:
        dict: {
            "status": "online",
            "provider": provider name,
            "model": default model id,
            "saved_plans": int
        }
    """
    return {
        "status": "online",
        "provider": client.provider.name,
        "model": client.model,
        "saved_plans": len(store),
    }
