"""Process-lifetime in-memory storage for saved training plans."""
from __future__ import annotations

import logging
import threading

from swim_planner.errors import PlanNotFound
from swim_planner.models.schemas import TrainingPlan


logger = logging.getLogger(__name__)


class PlanStore:
    """Insertion-ordered plan mapping keyed by plan id.

    Thread-safe: FastAPI runs synchronous handlers in a worker pool, so every
    read-modify-write happens under ``_lock``. Plans are copied on the way in and
    out so callers never share mutable state with the store.
    """

    def __init__(self) -> None:
        self._plans: dict[str, TrainingPlan] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._plans)

    def list_plans(self) -> list[TrainingPlan]:
        """Return all plans in insertion order."""
        with self._lock:
            return [plan.model_copy(deep=True) for plan in self._plans.values()]

    def get(self, plan_id: str) -> TrainingPlan:
        with self._lock:
            plan = self._plans.get(plan_id)
            if plan is None:
                raise PlanNotFound(plan_id)
            return plan.model_copy(deep=True)

    def upsert(self, plan: TrainingPlan) -> bool:
        """Store ``plan``, replacing any plan with the same id in place.

        Returns:
            bool: True when the plan was added, False when it replaced an existing one
        """
        with self._lock:
            created = plan.id not in self._plans
            self._plans[plan.id] = plan.model_copy(deep=True)
        logger.info("%s training plan: id=%s", "Saved" if created else "Updated", plan.id)
        return created

    def delete(self, plan_id: str) -> None:
        with self._lock:
            if plan_id not in self._plans:
                raise PlanNotFound(plan_id)
            del self._plans[plan_id]
        logger.info("Deleted training plan: id=%s", plan_id)

    def clear(self) -> None:
        with self._lock:
            self._plans.clear()
