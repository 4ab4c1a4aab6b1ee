"""Tests for API routes."""
import json

import pytest
from fastapi.testclient import TestClient

from conftest import LONG_BODY, FakeCompletionClient, FakeFetcher, FakeSearchClient, build_orchestrator
from research_agent.api.deps import get_orchestrator
from research_agent.exceptions import FetchError
from research_agent.main import app
from research_agent.models.research import SearchResult
from research_agent.tools.page_fetcher import PageFetcher


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use(orchestrator):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "research-agent"
    assert set(data) >= {"search_enabled", "synthesis_enabled", "version"}


def test_summarize_text(client):
    _use(build_orchestrator())

    response = client.post("/api/summarize", json={"text": LONG_BODY, "maxLength": 300})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert len(data["summary"]) <= 300
    assert data["originalWordCount"] == len(LONG_BODY.split())


def test_summarize_fetch_failure_is_an_envelope(client):
    _use(build_orchestrator(fetcher=FakeFetcher(error=FetchError("HTTP 404", status_code=404))))

    response = client.post("/api/summarize", json={"url": "https://example.com/x"})

    assert response.status_code == 200
    assert response.json() == {"error": "Failed to fetch: HTTP 404", "url": "https://example.com/x", "success": False}


def test_validation_errors_use_the_envelope(client):
    _use(build_orchestrator())

    response = client.post("/api/summarize", json={})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Provide either 'url' or 'text'"}


def test_research_topic_too_short(client):
    _use(build_orchestrator())

    response = client.post("/api/research", json={"topic": "ab"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("topic:")


def test_research_fallback(client):
    _use(build_orchestrator())

    response = client.post("/api/research", json={"topic": "tidal energy", "skepticalMode": False})

    data = response.json()
    assert data["aiPowered"] is False
    assert "skepticalAnalysis" not in data


def test_deep_research_with_synthesis(client):
    results = [SearchResult(title="Solar A", url="https://a.com/solar", description="A")]
    reply = json.dumps(
        {
            "executiveSummary": "Cheap panels.",
            "keyFindings": [{"finding": "Costs fell", "confidence": "medium", "sources": ["https://a.com/solar"]}],
        }
    )
    _use(
        build_orchestrator(
            search_client=FakeSearchClient(default=results),
            fetcher=FakeFetcher(bodies={"https://a.com/solar": LONG_BODY}),
            completion=FakeCompletionClient(text=reply),
        )
    )

    response = client.post("/api/deep-research", json={"topic": "solar", "depth": "quick"})

    assert response.status_code == 200
    data = response.json()
    assert data["synthesis"]["executiveSummary"] == "Cheap panels."
    assert data["methodology"]["sourcesAnalyzed"] == 1
    assert data["state"] == "synthesized"


def test_summarize_url_rejected_by_http_client(client):
    _use(build_orchestrator(fetcher=PageFetcher()))

    response = client.post("/api/summarize", json={"url": "http://exa\u0007mple.com/x"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("Fetch failed: ")
