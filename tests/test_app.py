from __future__ import annotations

import json

import httpx
from fastapi.testclient import TestClient

from conftest import LIVE_RESEARCH, StubGenerationClient
from decision_flow.app import create_app
from decision_flow.config import Settings
from decision_flow.errors import TransportError
from decision_flow.fallbacks import fallback_for
from decision_flow.llm import AnthropicGenerationClient
from decision_flow.schemas import StageKind


def _anthropic(handler, api_key: str | None = "sk-test") -> AnthropicGenerationClient:
    return AnthropicGenerationClient(api_key, transport=httpx.MockTransport(handler))


def _unused(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not be called
    raise AssertionError("unexpected provider call")


def _client(generation_client=None, anthropic_client=None) -> TestClient:
    app = create_app(
        settings=Settings(stage_delay_seconds=0.0),
        generation_client=generation_client or StubGenerationClient(),
        anthropic_client=anthropic_client or _anthropic(_unused),
    )
    return TestClient(app)


def _sample_payload() -> dict[str, str]:
    return {
        "businessGoal": "Launch support bot",
        "industry": "SaaS",
        "budget": "€100K",
        "timeline": "6 months",
        "constraints": "small team",
    }


def test_healthcheck() -> None:
    response = _client().get("/workflow/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_stages_exposes_agents_in_order() -> None:
    response = _client().get("/workflow/stages")
    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [stage.value for stage in StageKind.ordered()]


def test_run_workflow_falls_back_when_generation_fails() -> None:
    stub = StubGenerationClient(default=TransportError(500, {"error": "Claude API error"}))

    response = _client(stub).post("/workflow/run", json=_sample_payload())

    assert response.status_code == 200
    data = response.json()
    assert data["request"] == _sample_payload()
    assert data["results"] == {stage.value: fallback_for(stage) for stage in StageKind}
    assert set(data["statuses"].values()) == {"completed"}
    assert {entry["source"] for entry in data["provenance"].values()} == {"fallback"}
    assert data["combined_markdown"].startswith("# Research Agent")


def test_run_workflow_reports_live_stage() -> None:
    stub = StubGenerationClient({StageKind.RESEARCH: json.dumps(LIVE_RESEARCH)})

    data = _client(stub).post("/workflow/run", json=_sample_payload()).json()

    assert data["results"]["research"] == LIVE_RESEARCH
    assert data["provenance"]["research"] == {"source": "live", "reason": None}
    assert data["provenance"]["analysis"]["source"] == "fallback"


def test_proxy_forwards_raw_provider_response() -> None:
    provider_body = {"id": "msg_1", "content": [{"type": "text", "text": "{}"}], "role": "assistant"}

    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content)["messages"] == [{"role": "user", "content": "Hello"}]
        return httpx.Response(200, json=provider_body)

    response = _client(anthropic_client=_anthropic(handler)).post("/api/claude", json={"prompt": "Hello"})

    assert response.status_code == 200
    assert response.json() == provider_body


def test_proxy_relays_provider_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"type": "error", "error": {"type": "authentication_error"}})

    response = _client(anthropic_client=_anthropic(handler)).post("/api/claude", json={"prompt": "Hello"})

    assert response.status_code == 401
    assert response.json() == {
        "error": "Claude API error",
        "details": {"type": "error", "error": {"type": "authentication_error"}},
    }


def test_proxy_reports_internal_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("dns failure", request=request)

    response = _client(anthropic_client=_anthropic(handler)).post("/api/claude", json={"prompt": "Hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "message": "dns failure"}


def test_proxy_rejects_other_methods() -> None:
    assert _client().get("/api/claude").status_code == 405


def test_api_test_endpoint_reports_key_presence() -> None:
    client = _client(anthropic_client=_anthropic(_unused, api_key=None))

    response = client.get("/api/test")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "API is working!"
    assert data["hasApiKey"] is False
    assert data["method"] == "GET"
    assert data["timestamp"]


def test_cors_preflight_allows_any_origin() -> None:
    response = _client().options(
        "/api/claude",
        headers={"Origin": "http://example.test", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


class _BrokenAnthropicClient(AnthropicGenerationClient):
    async def create_message(self, prompt: str):
        raise ValueError("unexpected provider payload")


def test_proxy_reports_unexpected_errors() -> None:
    response = _client(anthropic_client=_BrokenAnthropicClient("sk-test")).post("/api/claude", json={"prompt": "Hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "message": "unexpected provider payload"}
