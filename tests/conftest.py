"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

os.environ["AI_PROVIDER"] = os.environ.get("AI_PROVIDER") or "gemini"
os.environ["GEMINI_API_KEY"] = os.environ.get("GEMINI_API_KEY") or "test-gemini-key"
os.environ["ENVIRONMENT"] = "development"

from swim_planner.logging_config import configure_logging

configure_logging()

from swim_planner.dependencies import get_generation_client
from swim_planner.main import app
from swim_planner.services.generation_client import GenerationClient

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class StubProvider:
    """In-process provider returning canned text, raising, or stalling."""

    name = "stub"
    default_model = "stub-model"

    def __init__(self, text: str = "", error: Exception | None = None, delay: float = 0.0) -> None:
        self.text = text
        self.error = error
        self.delay = delay
        self.calls: list[dict] = []

    def complete(self, system_prompt, prompt, template):
        self.calls.append({"system_prompt": system_prompt, "prompt": prompt, "template": template})
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture(scope="session")
def test_client() -> TestClient:
    """Provide a FastAPI test client."""

    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_app_state() -> Iterator[None]:
    """Start every test with an empty plan store and no dependency overrides."""

    app.state.plan_store.clear()
    yield
    app.dependency_overrides.clear()
    app.state.plan_store.clear()


@pytest.fixture(scope="session")
def plan_response_text() -> str:
    """Return a well-formatted provider reply."""

    return (FIXTURES_DIR / "provider_plan_response.txt").read_text(encoding="utf-8")


@pytest.fixture()
def provider_factory() -> type[StubProvider]:
    """Expose the stub provider class for tests that need custom behaviour."""

    return StubProvider


@pytest.fixture()
def stub_provider(plan_response_text: str) -> StubProvider:
    return StubProvider(text=plan_response_text)


@pytest.fixture()
def stub_client(stub_provider: StubProvider) -> GenerationClient:
    """Generation client backed by the stub provider and wired into the app."""

    client = GenerationClient(stub_provider, timeout_seconds=2.0)
    app.dependency_overrides[get_generation_client] = lambda: client
    return client
