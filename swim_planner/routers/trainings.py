"""API endpoints for swimming training plans."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response

from swim_planner.config import Settings
from swim_planner.dependencies import get_app_settings, get_plan_generator, get_plan_store
from swim_planner.errors import GenerationError, PlanNotFound, PlanValidationError
from swim_planner.models.schemas import TrainingPlan, TrainingRequest
from swim_planner.services.plan_generator import PlanGenerator
from swim_planner.services.plan_store import PlanStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trainings", tags=["trainings"])


@router.post("", response_model=TrainingPlan, status_code=201)
async def generate_training_plan(
    plan_request: TrainingRequest,
    generator: Annotated[PlanGenerator, Depends(get_plan_generator)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """
    Generate a new AI-powered swimming plan.

    The plan is returned but not stored; submit it to ``/save`` to keep it.

    Args:
        plan_request: Level, goals, days per week and session duration

    Returns:
        TrainingPlan: Generated plan with its exercises
    """
    try:
        logger.info(
            "Handling plan generation | level=%s days=%d duration=%d",
            plan_request.level.value,
            plan_request.days_per_week,
            plan_request.duration,
        )
        return await generator.generate(plan_request)

    except PlanValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationError as e:
        logger.warning("Plan generation failed: %s: %s", type(e).__name__, e)
        detail = (
            f"Failed to generate training plan: {e}"
            if settings.expose_error_details
            else "Training plan generation is temporarily unavailable. Please try again."
        )
        raise HTTPException(status_code=503, detail=detail)
    except Exception:
        logger.exception("Failed to generate training plan")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("", response_model=list[TrainingPlan])
def list_training_plans(store: Annotated[PlanStore, Depends(get_plan_store)]):
    """Return every saved plan in the order it was first saved."""
    plans = store.list_plans()
    logger.info("Listed training plans: count=%d", len(plans))
    return plans


@router.post("/save", response_model=TrainingPlan)
def save_training_plan(
    plan: TrainingPlan,
    store: Annotated[PlanStore, Depends(get_plan_store)],
):
    """
    Save a plan, replacing any stored plan with the same id.

    Args:
        plan: Full plan object; id, name and at least one exercise are required

    Returns:
        TrainingPlan: The stored plan
    """
    try:
        store.upsert(plan)
        return plan
    except Exception:
        logger.exception("Failed to save training plan %s", plan.id)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{plan_id}", response_model=TrainingPlan)
def get_training_plan(
    plan_id: str,
    store: Annotated[PlanStore, Depends(get_plan_store)],
):
    """Get a saved plan by id."""
    try:
        return store.get(plan_id)
    except PlanNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{plan_id}", status_code=204)
def delete_training_plan(
    plan_id: str,
    store: Annotated[PlanStore, Depends(get_plan_store)],
):
    """Delete a saved plan."""
    try:
        store.delete(plan_id)
    except PlanNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)
