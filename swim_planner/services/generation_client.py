"""Timeout-bounded text generation with named sampling templates."""
from __future__ import annotations

import asyncio
import logging
import math
import time
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Mapping

from swim_planner.errors import (
    GenerationEmptyResponse,
    GenerationError,
    GenerationProviderError,
    GenerationTimeout,
    PlanValidationError,
)
from swim_planner.models.schemas import GenerationResult, TemplateType
from swim_planner.services.prompt_builder import system_instruction
from swim_planner.services.providers import ProviderAdapter


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_TEMPLATE = TemplateType.DETAILED

# Rough heuristic: one token per four characters, priced per 1K tokens.
CHARS_PER_TOKEN = 4
COST_PER_1K_TOKENS_USD = 0.00025


@dataclass(frozen=True)
class GenerationTemplate:
    """Sampling preset for one generation request."""

    name: str
    temperature: float
    top_k: int
    top_p: float
    max_output_tokens: int
    model: str = ""


TEMPLATE_PRESETS: tuple[GenerationTemplate, ...] = (
    GenerationTemplate("detailed", temperature=0.7, top_k=40, top_p=0.95, max_output_tokens=800),
    GenerationTemplate("quick", temperature=0.3, top_k=20, top_p=0.8, max_output_tokens=400),
    GenerationTemplate("creative", temperature=0.9, top_k=60, top_p=0.98, max_output_tokens=600),
)


def build_templates(model: str) -> Mapping[str, GenerationTemplate]:
    """Return the read-only template table bound to ``model``."""

    return MappingProxyType({preset.name: replace(preset, model=model) for preset in TEMPLATE_PRESETS})


def select_template_type(duration: int) -> TemplateType:
    """Pick a template from the session duration in minutes."""

    if duration > 60:
        return TemplateType.DETAILED
    if duration <= 30:
        return TemplateType.QUICK
    return TemplateType.CREATIVE


def estimate_usage(text: str) -> dict[str, float]:
    """Approximate token count and cost for a generated text."""

    tokens = math.ceil(len(text) / CHARS_PER_TOKEN)
    return {
        "tokens": tokens,
        "estimated_cost": (tokens / 1000) * COST_PER_1K_TOKENS_USD,
    }


class GenerationClient:
    """Sends prompts to one provider, one attempt per call, under a timeout."""

    def __init__(
        self,
        provider: ProviderAdapter,
        model: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.provider = provider
        self.model = model or provider.default_model
        self.timeout_seconds = timeout_seconds
        self.templates = build_templates(self.model)

    def resolve_template(self, template_type: TemplateType | str | None) -> GenerationTemplate:
        key = template_type.value if isinstance(template_type, TemplateType) else template_type
        template = self.templates.get(key) if key else None
        if template is None:
            logger.warning("Unknown template type %r, falling back to %s", template_type, DEFAULT_TEMPLATE.value)
            template = self.templates[DEFAULT_TEMPLATE.value]
        return template

    def _discard_abandoned_call(self, call: asyncio.Future) -> None:
        """Log how a call abandoned by the timeout eventually settled."""

        if call.cancelled():
            return
        exc = call.exception()
        if exc is not None:
            logger.warning(
                "Abandoned generation call failed after timeout | provider=%s error=%s: %s",
                self.provider.name,
                type(exc).__name__,
                exc,
            )
        else:
            logger.info("Discarded late generation result | provider=%s", self.provider.name)

    async def generate(
        self,
        prompt: str,
        template_type: TemplateType | str = DEFAULT_TEMPLATE,
    ) -> GenerationResult:
        """
        Generate plan text for ``prompt``.

        The blocking provider call runs in a worker thread raced against the
        timeout. A call that loses the race keeps running in its thread; its
        outcome is logged when it settles and then discarded.

        Raises:
            PlanValidationError: If the prompt is empty
            GenerationTimeout: If the provider does not answer in time
            GenerationEmptyResponse: If the provider returns no text
            GenerationProviderError: If the provider reports a failure
        """

        if not prompt or not prompt.strip():
            raise PlanValidationError("Prompt cannot be empty")

        template = self.resolve_template(template_type)
        logger.info(
            "Generating training plan | provider=%s model=%s template=%s prompt_chars=%d",
            self.provider.name,
            template.model,
            template.name,
            len(prompt),
        )

        started = time.monotonic()
        call = asyncio.ensure_future(
            asyncio.to_thread(self.provider.complete, system_instruction(), prompt, template)
        )
        try:
            text = await asyncio.wait_for(asyncio.shield(call), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as exc:
            call.add_done_callback(self._discard_abandoned_call)
            logger.error(
                "Generation timed out after %.1fs | provider=%s template=%s",
                self.timeout_seconds,
                self.provider.name,
                template.name,
            )
            raise GenerationTimeout(
                f"Request timed out after {self.timeout_seconds:g} seconds",
                provider=self.provider.name,
            ) from exc
        except GenerationError:
            logger.exception("Generation failed | provider=%s template=%s", self.provider.name, template.name)
            raise
        except Exception as exc:
            logger.exception("Unexpected provider failure | provider=%s", self.provider.name)
            raise GenerationProviderError(
                f"Failed to create training plan: {exc}",
                provider=self.provider.name,
            ) from exc

        if not text or not text.strip():
            logger.error("Empty response from provider %s", self.provider.name)
            raise GenerationEmptyResponse(
                f"Empty response received from {self.provider.name}",
                provider=self.provider.name,
            )

        usage = estimate_usage(text)
        logger.info(
            "Generated %d chars in %.2fs | est_tokens=%d est_cost=$%.6f",
            len(text),
            time.monotonic() - started,
            usage["tokens"],
            usage["estimated_cost"],
        )
        return GenerationResult(content=text, model=template.model, provider=self.provider.name)
