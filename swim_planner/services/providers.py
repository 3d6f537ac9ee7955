"""Adapters for the external text-generation providers.

Each adapter turns one prompt into one block of text and raises the typed errors
from :mod:`swim_planner.errors` instead of leaking SDK exceptions:
connectivity failures become ``ProviderUnavailable`` and anything else the
provider reports becomes ``GenerationProviderError``.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import anthropic
import httpx
import openai
from anthropic import Anthropic
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
from openai import OpenAI

from swim_planner.errors import GenerationProviderError, ProviderUnavailable

if TYPE_CHECKING:
    from swim_planner.config import Settings
    from swim_planner.services.generation_client import GenerationTemplate


logger = logging.getLogger(__name__)


def _timeout_kwargs(timeout_seconds: float | None) -> dict:
    """Request timeout for the OpenAI and Anthropic clients; omitted keeps the SDK default."""
    return {} if timeout_seconds is None else {"timeout": timeout_seconds}


class ProviderAdapter(Protocol):
    """Capability shared by every text-generation provider."""

    name: str
    default_model: str

    def complete(self, system_prompt: str, prompt: str, template: GenerationTemplate) -> str:
        """Return the generated text (possibly empty) for a single prompt."""


class GeminiProvider:
    """Google Gemini through the ``google-genai`` SDK."""

    name = "gemini"
    default_model = "gemini-2.5-flash"

    safety_settings = [
        genai_types.SafetySetting(
            category=genai_types.HarmCategory.HARM_CATEGORY_HARASSMENT,
            threshold=genai_types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
        ),
        genai_types.SafetySetting(
            category=genai_types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
            threshold=genai_types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
        ),
    ]

    def __init__(self, api_key: str, timeout_seconds: float | None = None) -> None:
        http_options = None
        if timeout_seconds is not None:
            http_options = genai_types.HttpOptions(timeout=int(timeout_seconds * 1000))
        self.client = genai.Client(api_key=api_key, http_options=http_options)

    def complete(self, system_prompt: str, prompt: str, template: GenerationTemplate) -> str:
        config = genai_types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=template.temperature,
            top_k=template.top_k,
            top_p=template.top_p,
            max_output_tokens=template.max_output_tokens,
            safety_settings=self.safety_settings,
        )
        try:
            response = self.client.models.generate_content(
                model=template.model,
                contents=prompt,
                config=config,
            )
        except httpx.TransportError as exc:
            raise ProviderUnavailable(
                "Failed to connect to the AI service. Please check your connection and try again.",
                provider=self.name,
            ) from exc
        except genai_errors.APIError as exc:
            raise GenerationProviderError(
                f"Gemini request failed: {getattr(exc, 'message', None) or exc}",
                provider=self.name,
            ) from exc

        text = ""
        if response.candidates:
            candidate = response.candidates[0]
            if candidate.content and candidate.content.parts:
                text = "".join(part.text or "" for part in candidate.content.parts)
        return text


class OpenAIProvider:
    """OpenAI chat completions. Top-K sampling is not supported and is ignored."""

    name = "openai"
    default_model = "gpt-4o-mini"

    def __init__(self, api_key: str, timeout_seconds: float | None = None) -> None:
        self.client = OpenAI(api_key=api_key, **_timeout_kwargs(timeout_seconds))

    def complete(self, system_prompt: str, prompt: str, template: GenerationTemplate) -> str:
        try:
            response = self.client.chat.completions.create(
                model=template.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                temperature=template.temperature,
                top_p=template.top_p,
                max_tokens=template.max_output_tokens,
            )
        except openai.APIConnectionError as exc:
            raise ProviderUnavailable(
                "Failed to connect to the AI service. Please check your connection and try again.",
                provider=self.name,
            ) from exc
        except openai.OpenAIError as exc:
            raise GenerationProviderError(f"OpenAI request failed: {exc}", provider=self.name) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


class AnthropicProvider:
    """Anthropic Claude messages API.

    Current Claude models reject ``temperature`` combined with ``top_p``, so only
    temperature and top-K are forwarded.
    """

    name = "anthropic"
    default_model = "claude-sonnet-4-5-20250929"

    def __init__(self, api_key: str, timeout_seconds: float | None = None) -> None:
        self.client = Anthropic(api_key=api_key, **_timeout_kwargs(timeout_seconds))

    def complete(self, system_prompt: str, prompt: str, template: GenerationTemplate) -> str:
        try:
            response = self.client.messages.create(
                model=template.model,
                max_tokens=template.max_output_tokens,
                temperature=template.temperature,
                top_k=template.top_k,
                system=system_prompt,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIConnectionError as exc:
            raise ProviderUnavailable(
                "Failed to connect to the AI service. Please check your connection and try again.",
                provider=self.name,
            ) from exc
        except anthropic.AnthropicError as exc:
            raise GenerationProviderError(f"Claude request failed: {exc}", provider=self.name) from exc

        return "".join(
            getattr(block, "text", "") or "" for block in response.content or []
        )


PROVIDERS: dict[str, type] = {
    GeminiProvider.name: GeminiProvider,
    OpenAIProvider.name: OpenAIProvider,
    AnthropicProvider.name: AnthropicProvider,
}


def build_provider(settings: Settings) -> ProviderAdapter:
    """Instantiate the adapter selected by ``AI_PROVIDER``."""

    provider_cls = PROVIDERS[settings.ai_provider]
    logger.info("Using text-generation provider: %s", settings.ai_provider)
    return provider_cls(
        api_key=settings.provider_api_key,
        timeout_seconds=settings.generation_timeout_seconds,
    )
