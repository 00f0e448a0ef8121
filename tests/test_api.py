"""Integration-style tests for the /analysis endpoints."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from bookinsight.application.interfaces import BackendResponse
from bookinsight.controllers.dependencies import get_analysis_session
from bookinsight.main import app

from conftest import build_analysis_payload


@pytest.fixture
def client(session):
    """Serve the app with the in-memory session instead of the Gemini-backed one."""

    app.dependency_overrides[get_analysis_session] = lambda: session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_fresh_session_is_idle(client):
    response = client.get("/analysis")

    assert response.status_code == 200
    payload = response.json()
    assert payload["state"] == "idle"
    assert payload["outcome"] is None
    assert payload["narration"]["state"] == "not_playing"


def test_blank_author_is_rejected_without_running(client, fake_backend):
    response = client.post("/analysis", json={"title": "Thinking, Fast and Slow", "author": ""})

    assert response.status_code == 422
    assert response.json()["detail"] == "Please enter both title and author."
    assert client.get("/analysis").json()["state"] == "idle"
    assert fake_backend.calls == []


def test_submit_returns_ready_snapshot(client):
    response = client.post(
        "/analysis",
        json={"title": "Thinking, Fast and Slow", "author": "Daniel Kahneman"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["state"] == "ready"
    assert payload["request"] == {"title": "Thinking, Fast and Slow", "author": "Daniel Kahneman"}
    assert payload["outcome"]["analysis"]["executiveSummary"] == "Two systems drive the way we think."
    assert payload["outcome"]["imageUri"].startswith("data:image/png;base64,")
    assert payload["outcome"]["sources"] == [
        {"title": "Britannica", "uri": "https://www.britannica.com/"}
    ]


def test_schema_failure_is_reported_as_failed_state(client, fake_backend):
    analysis = build_analysis_payload()
    del analysis["visualMetaphorPrompt"]
    fake_backend.analysis_response = BackendResponse(text=json.dumps(analysis))

    payload = client.post("/analysis", json={"title": "Nudge", "author": "Richard Thaler"}).json()

    assert payload["state"] == "failed"
    assert "visualMetaphorPrompt" in payload["error"]
    assert payload["outcome"] is None
    assert fake_backend.calls == ["analysis"]


def test_reset_clears_outcome(client):
    client.post("/analysis", json={"title": "Nudge", "author": "Richard Thaler"})

    response = client.post("/analysis/reset")

    assert response.status_code == 200
    assert response.json()["state"] == "idle"
    assert response.json()["request"] is None


def test_narration_requires_ready_session(client):
    response = client.post("/analysis/narration")

    assert response.status_code == 409


def test_narration_trigger_is_accepted_once_ready(client):
    client.post("/analysis", json={"title": "Nudge", "author": "Richard Thaler"})

    response = client.post("/analysis/narration")

    assert response.status_code == 202
    assert response.json()["accepted"] is True


def test_narration_audio_is_404_before_any_render(client):
    response = client.get("/analysis/narration/audio")

    assert response.status_code == 404


def test_health_and_metrics_endpoints(client):
    client.post("/analysis", json={"title": "Nudge", "author": "Richard Thaler"})

    assert client.get("/health").json()["status"] == "healthy"
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "pipeline_stage_total" in metrics.text


def test_openapi_documents_error_schema(client):
    schema = client.get("/openapi.json").json()

    assert "ErrorResponse" in schema["components"]["schemas"]
    assert "/analysis/narration/audio" in schema["paths"]
