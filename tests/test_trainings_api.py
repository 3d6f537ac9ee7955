"""Integration tests for the training plan API endpoints."""
from __future__ import annotations

from fastapi.testclient import TestClient

from swim_planner.config import Settings
from swim_planner.dependencies import get_app_settings, get_generation_client
from swim_planner.errors import GenerationTimeout, ProviderUnavailable
from swim_planner.main import app
from swim_planner.services.generation_client import GenerationClient


REQUEST = {
    "level": "Intermediate",
    "goals": ["Endurance", "Technique"],
    "daysPerWeek": 3,
    "duration": 45,
}


def _saved_plan(plan_id: str = "plan-1700000000000", name: str = "Tuesday Swim") -> dict:
    return {
        "id": plan_id,
        "name": name,
        "description": "Aerobic base",
        "exercises": [{"name": "Warm-up", "sets": 1, "reps": 4, "notes": "easy"}],
        "level": "Beginner",
        "goals": ["Fitness"],
        "daysPerWeek": 2,
        "duration": 30,
    }


def test_generate_training_plan(test_client: TestClient, stub_client, stub_provider):
    response = test_client.post("/api/trainings", json=REQUEST)

    assert response.status_code == 201
    data = response.json()
    assert data["id"].startswith("plan-")
    assert data["name"] == "Intermediate Swimming Plan"
    assert data["level"] == "Intermediate"
    assert data["goals"] == ["Endurance", "Technique"]
    assert data["daysPerWeek"] == 3
    assert data["duration"] == 45
    assert data["templateType"] == "creative"
    assert data["provider"] == "stub"
    assert data["model"] == "stub-model"
    assert data["createdAt"]
    assert [e["name"] for e in data["exercises"]] == ["Warm-up", "Kick Drill", "Main Set", "Cool-down"]

    prompt = stub_provider.calls[0]["prompt"]
    assert "Intermediate" in prompt
    assert "Endurance, Technique" in prompt


def test_generated_plan_is_not_stored(test_client: TestClient, stub_client):
    test_client.post("/api/trainings", json=REQUEST)

    response = test_client.get("/api/trainings")
    assert response.status_code == 200
    assert response.json() == []


def test_generate_uses_fallback_for_unstructured_reply(test_client: TestClient, provider_factory):
    text = "Swim easy for a while, then do some faster laps and finish relaxed."
    client = GenerationClient(provider_factory(text=text))
    app.dependency_overrides[get_generation_client] = lambda: client

    response = test_client.post("/api/trainings", json=REQUEST)

    assert response.status_code == 201
    exercises = response.json()["exercises"]
    assert [e["name"] for e in exercises] == ["Warm-up", "Main Set", "Cool-down"]
    assert exercises[1]["notes"] == text


def test_generate_missing_fields(test_client: TestClient, stub_client, stub_provider):
    for field in REQUEST:
        payload = {k: v for k, v in REQUEST.items() if k != field}
        response = test_client.post("/api/trainings", json=payload)
        assert response.status_code == 400, field
        assert "detail" in response.json()

    empty_goals = test_client.post("/api/trainings", json={**REQUEST, "goals": []})
    assert empty_goals.status_code == 400

    bad_level = test_client.post("/api/trainings", json={**REQUEST, "level": "Expert"})
    assert bad_level.status_code == 400

    assert stub_provider.calls == []


def test_generate_provider_failure_returns_503(test_client: TestClient, provider_factory):
    client = GenerationClient(provider_factory(error=ProviderUnavailable("AI service offline", provider="stub")))
    app.dependency_overrides[get_generation_client] = lambda: client

    response = test_client.post("/api/trainings", json=REQUEST)

    assert response.status_code == 503
    assert "AI service offline" in response.json()["detail"]


def test_generate_timeout_returns_503(test_client: TestClient, provider_factory):
    client = GenerationClient(provider_factory(error=GenerationTimeout("Request timed out", provider="stub")))
    app.dependency_overrides[get_generation_client] = lambda: client

    response = test_client.post("/api/trainings", json=REQUEST)

    assert response.status_code == 503


def test_generation_detail_hidden_in_production(test_client: TestClient, provider_factory):
    client = GenerationClient(provider_factory(error=ProviderUnavailable("secret upstream detail")))
    app.dependency_overrides[get_generation_client] = lambda: client
    app.dependency_overrides[get_app_settings] = lambda: Settings(
        environment="production",
        ai_provider="gemini",
        gemini_api_key="test-gemini-key",
    )

    response = test_client.post("/api/trainings", json=REQUEST)

    assert response.status_code == 503
    assert "secret upstream detail" not in response.json()["detail"]


def test_save_get_and_list(test_client: TestClient):
    response = test_client.post("/api/trainings/save", json=_saved_plan())
    assert response.status_code == 200
    assert response.json()["id"] == "plan-1700000000000"

    fetched = test_client.get("/api/trainings/plan-1700000000000")
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Tuesday Swim"
    assert fetched.json()["exercises"][0]["reps"] == 4

    listed = test_client.get("/api/trainings")
    assert [p["id"] for p in listed.json()] == ["plan-1700000000000"]


def test_save_twice_updates_in_place(test_client: TestClient):
    test_client.post("/api/trainings/save", json=_saved_plan("plan-1", "First"))
    test_client.post("/api/trainings/save", json=_saved_plan("plan-2"))
    test_client.post("/api/trainings/save", json=_saved_plan("plan-1", "Renamed"))

    plans = test_client.get("/api/trainings").json()
    assert [p["id"] for p in plans] == ["plan-1", "plan-2"]
    assert plans[0]["name"] == "Renamed"


def test_save_generated_plan_round_trip(test_client: TestClient, stub_client):
    generated = test_client.post("/api/trainings", json=REQUEST).json()

    saved = test_client.post("/api/trainings/save", json=generated)
    assert saved.status_code == 200

    fetched = test_client.get(f"/api/trainings/{generated['id']}").json()
    assert fetched["exercises"] == generated["exercises"]
    assert fetched["templateType"] == "creative"


def test_save_requires_id_name_and_exercises(test_client: TestClient):
    for field in ("id", "name", "exercises"):
        payload = {k: v for k, v in _saved_plan().items() if k != field}
        assert test_client.post("/api/trainings/save", json=payload).status_code == 400, field

    no_exercises = test_client.post("/api/trainings/save", json={**_saved_plan(), "exercises": []})
    assert no_exercises.status_code == 400

    minimal = {"id": "plan-2", "name": "Minimal", "exercises": [{"name": "Swim"}]}
    response = test_client.post("/api/trainings/save", json=minimal)
    assert response.status_code == 200
    assert response.json()["exercises"][0] == {"name": "Swim", "sets": 1, "reps": 1, "notes": ""}


def test_get_unknown_plan(test_client: TestClient):
    response = test_client.get("/api/trainings/plan-404")

    assert response.status_code == 404
    assert "detail" in response.json()


def test_delete_plan(test_client: TestClient):
    test_client.post("/api/trainings/save", json=_saved_plan("plan-1"))

    response = test_client.delete("/api/trainings/plan-1")
    assert response.status_code == 204
    assert test_client.get("/api/trainings/plan-1").status_code == 404


def test_delete_unknown_plan(test_client: TestClient):
    test_client.post("/api/trainings/save", json=_saved_plan("plan-1"))

    response = test_client.delete("/api/trainings/plan-2")

    assert response.status_code == 404
    assert len(test_client.get("/api/trainings").json()) == 1


def test_system_endpoints(test_client: TestClient, stub_client):
    assert test_client.get("/health").json() == {"status": "ok"}
    assert "message" in test_client.get("/").json()

    test_client.post("/api/trainings/save", json=_saved_plan())
    status = test_client.get("/api/health/status").json()
    assert status == {"status": "online", "provider": "stub", "model": "stub-model", "saved_plans": 1}
