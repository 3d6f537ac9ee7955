"""Exception types raised by the plan generation pipeline and the plan store."""
from __future__ import annotations


class SwimPlannerError(Exception):
    """Base class for all application errors."""


class PlanValidationError(SwimPlannerError):
    """Missing or malformed plan parameters."""


class PlanNotFound(SwimPlannerError):
    """No stored plan exists for the requested identifier."""

    def __init__(self, plan_id: str) -> None:
        super().__init__(f"Training plan {plan_id} not found")
        self.plan_id = plan_id


class GenerationError(SwimPlannerError):
    """The text-generation provider could not produce a plan."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class GenerationTimeout(GenerationError):
    """The provider call did not settle within the timeout window."""


class GenerationEmptyResponse(GenerationError):
    """The provider answered without any text content."""


class GenerationProviderError(GenerationError):
    """The provider reported an error."""


class ProviderUnavailable(GenerationProviderError):
    """The provider could not be reached."""
