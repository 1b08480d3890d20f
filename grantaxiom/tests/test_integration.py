# grantaxiom/tests/test_integration.py

import json

import pytest
from fastapi.testclient import TestClient

import grantaxiom.api.app as api_app_module
from grantaxiom.api.app import app
from grantaxiom.core.version import __version__

client = TestClient(app)

AUDIT_RESPONSE = json.dumps(
    {
        "overallScore": 61,
        "claims": [
            {
                "id": "c1",
                "text": "fringe visibility remains constant regardless of slit width",
                "status": "contradiction",
                "confidence": 0.88,
                "sourceId": "ref-2",
                "explanation": "Young (1801) shows visibility depends on slit width.",
                "suggestion": "Remove the claim.",
            }
        ],
        "complianceIssues": ["Unsupported manufacturing claim"],
        "toneAnalysis": "Overconfident.",
    }
)


class StubOracle:
    def __init__(self, responses=None, error=None):
        self.responses = dict(responses or {})
        self.error = error
        self.calls = []

    def generate(self, prompt, oracle_config):
        self.calls.append((prompt, oracle_config))
        if self.error is not None:
            raise self.error
        if oracle_config.response_format == "json":
            return self.responses.get("audit", "")
        if oracle_config.enable_search_tool:
            return self.responses.get("chat", "")
        return self.responses.get("simulation", "")


@pytest.fixture
def oracle(monkeypatch):
    stub = StubOracle(
        {
            "audit": AUDIT_RESPONSE,
            "chat": "Try adding a vacuum-chamber control experiment.",
            "simulation": "```html\n<!DOCTYPE html>\n<html><body><canvas></canvas></body></html>\n```",
        }
    )
    monkeypatch.setattr(api_app_module, "ORACLE", stub)
    monkeypatch.delenv("GRANTAXIOM_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    return stub


def _new_session(seed_samples: bool = True) -> dict:
    response = client.post("/sessions", json={"seedSamples": seed_samples})
    assert response.status_code == 201
    return response.json()


def test_health_endpoint(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["version"] == __version__
    diagnostics = body["diagnostics"]
    assert diagnostics["oracle"]["available"] is False
    assert "OPENAI_API_KEY" in diagnostics["oracle"]["reason"]
    assert diagnostics["session_store"]["mode"] == "inmem"
    assert isinstance(diagnostics["auth"]["api_key_configured"], bool)


def test_demo_console_is_served():
    response = client.get("/demo")
    assert response.status_code == 200
    assert "GrantAxiom Workbench" in response.text
    assert 'id="claimStats"' in response.text
    assert '["verified", "warning", "contradiction"]' in response.text

    redirect = client.get("/", follow_redirects=False)
    assert redirect.status_code in {302, 307}
    assert redirect.headers["location"] == "/demo"


def test_create_session_seeds_sample_context(oracle):
    session = _new_session()
    assert session["sessionId"]
    assert session["proposalText"].startswith("Title: Investigating Wave-Particle Duality")
    assert [r["id"] for r in session["references"]] == ["ref-1", "ref-2"]
    assert session["references"][0]["contentSnippet"]
    assert session["report"] is None
    assert session["transcript"][0]["role"] == "model"
    assert session["hasSimulation"] is False
    assert session["pendingActions"] == []


def test_create_session_without_body_and_without_samples(oracle):
    assert client.post("/sessions").status_code == 201
    empty = _new_session(seed_samples=False)
    assert empty["proposalText"] == ""
    assert empty["references"] == []


def test_unknown_session_returns_404(oracle):
    assert client.get("/sessions/missing").status_code == 404
    assert client.post("/sessions/missing/audit").status_code == 404


def test_audit_flow_stores_report(oracle):
    session_id = _new_session()["sessionId"]

    response = client.post(f"/sessions/{session_id}/audit")
    assert response.status_code == 200
    body = response.json()
    assert body["applied"] is True
    assert body["requestId"] == 1
    claim = body["report"]["claims"][0]
    assert claim["sourceId"] == "ref-2"
    assert claim["confidence"] == 0.88
    assert claim["status"] == "contradiction"

    stored = client.get(f"/sessions/{session_id}").json()
    assert stored["report"]["overallScore"] == 61
    assert stored["pendingActions"] == []


def test_audit_with_out_of_range_confidence_returns_fallback_report(oracle):
    payload = json.loads(AUDIT_RESPONSE)
    payload["claims"][0]["confidence"] = 1.7
    oracle.responses["audit"] = json.dumps(payload)
    session_id = _new_session()["sessionId"]

    report = client.post(f"/sessions/{session_id}/audit").json()["report"]
    assert report["overallScore"] == 0
    assert report["claims"] == []
    assert "invalid_schema" in report["complianceIssues"][0]


def test_audit_on_oracle_failure_still_returns_200(oracle):
    oracle.error = ConnectionError("offline")
    session_id = _new_session()["sessionId"]

    response = client.post(f"/sessions/{session_id}/audit")
    assert response.status_code == 200
    report = response.json()["report"]
    assert report["overallScore"] == 0
    assert report["complianceIssues"] == ["Error analyzing proposal. Please try again."]


def test_audit_requires_proposal_text(oracle):
    session_id = _new_session(seed_samples=False)["sessionId"]
    response = client.post(f"/sessions/{session_id}/audit")
    assert response.status_code == 400
    assert oracle.calls == []


def test_proposal_update_feeds_next_audit(oracle):
    session_id = _new_session()["sessionId"]
    response = client.put(f"/sessions/{session_id}/proposal", json={"proposalText": "A brand new proposal."})
    assert response.status_code == 200
    assert response.json()["proposalText"] == "A brand new proposal."

    client.post(f"/sessions/{session_id}/audit")
    prompt, _ = oracle.calls[-1]
    assert "A brand new proposal." in prompt


def test_reference_crud(oracle):
    session_id = _new_session()["sessionId"]

    response = client.post(
        f"/sessions/{session_id}/references",
        json={"id": "ref-3", "title": "Matter-wave interference", "authors": "Arndt, M.", "year": 1999},
    )
    assert response.status_code == 201
    assert [r["id"] for r in response.json()["references"]] == ["ref-1", "ref-2", "ref-3"]

    duplicate = client.post(
        f"/sessions/{session_id}/references",
        json={"id": "ref-3", "title": "Again", "year": 2000},
    )
    assert duplicate.status_code == 409

    removed = client.delete(f"/sessions/{session_id}/references/ref-1")
    assert removed.status_code == 200
    assert [r["id"] for r in removed.json()["references"]] == ["ref-2", "ref-3"]
    assert client.delete(f"/sessions/{session_id}/references/ref-1").status_code == 404


def test_reference_upload_creates_references(oracle):
    session_id = _new_session(seed_samples=False)["sessionId"]
    response = client.post(
        f"/sessions/{session_id}/references/upload",
        files=[
            ("files", ("notes.txt", b"Coherence requires vacuum conditions.", "text/plain")),
            ("files", ("figure.bin", b"\x00\x01\x02", "application/octet-stream")),
        ],
    )
    assert response.status_code == 201
    references = response.json()["references"]
    assert [r["title"] for r in references] == ["notes.txt", "figure.bin"]
    assert references[0]["contentSnippet"] == "Coherence requires vacuum conditions."
    assert references[1]["contentSnippet"].startswith("Document uploaded: figure.bin.")
    assert all(r["authors"] == "Uploaded Document" for r in references)


def test_reference_upload_rejects_empty_file(oracle):
    session_id = _new_session()["sessionId"]
    response = client.post(
        f"/sessions/{session_id}/references/upload",
        files=[("files", ("empty.txt", b"", "text/plain"))],
    )
    assert response.status_code == 400
    assert len(client.get(f"/sessions/{session_id}").json()["references"]) == 2


def test_chat_appends_user_and_model_messages(oracle):
    session_id = _new_session()["sessionId"]
    response = client.post(f"/sessions/{session_id}/chat", json={"message": "How do I strengthen aim 1?"})
    assert response.status_code == 200
    body = response.json()
    assert body["reply"] == "Try adding a vacuum-chamber control experiment."
    roles = [m["role"] for m in body["transcript"]]
    assert roles == ["model", "user", "model"]
    assert body["transcript"][1]["text"] == "How do I strengthen aim 1?"
    assert body["transcript"][2]["isThinking"] is False

    prompt, oracle_config = oracle.calls[-1]
    assert oracle_config.enable_search_tool is True
    assert "model: Hello! I am GrantAxiom." in prompt
    assert prompt.rstrip().endswith("User: How do I strengthen aim 1?")


def test_chat_failure_returns_apology(oracle):
    oracle.error = RuntimeError("boom")
    session_id = _new_session()["sessionId"]
    body = client.post(f"/sessions/{session_id}/chat", json={"message": "Hi"}).json()
    assert body["reply"] == "I'm having trouble connecting to the network right now."


def test_chat_rejects_blank_message(oracle):
    session_id = _new_session()["sessionId"]
    assert client.post(f"/sessions/{session_id}/chat", json={"message": "   "}).status_code == 400


def test_simulation_flow_serves_extracted_html(oracle):
    session_id = _new_session()["sessionId"]
    assert client.get(f"/sessions/{session_id}/simulation").status_code == 404

    response = client.post(f"/sessions/{session_id}/simulation", json={"userGoal": "Interactive double slit"})
    assert response.status_code == 200
    body = response.json()
    assert body["applied"] is True
    assert body["code"].startswith("<!DOCTYPE html>")
    assert "```" not in body["code"]

    prompt, _ = oracle.calls[-1]
    assert "User Requirement: Interactive double slit" in prompt
    assert "Audit not yet performed." in prompt

    page = client.get(f"/sessions/{session_id}/simulation")
    assert page.status_code == 200
    assert page.headers["content-type"].startswith("text/html")
    assert page.text == body["code"]
    assert client.get(f"/sessions/{session_id}").json()["hasSimulation"] is True


def test_simulation_failure_serves_fallback_markup(oracle):
    oracle.error = RuntimeError("boom")
    session_id = _new_session()["sessionId"]
    body = client.post(f"/sessions/{session_id}/simulation").json()
    assert "Failed to generate simulation" in body["code"]


def test_end_session(oracle):
    session_id = _new_session()["sessionId"]
    assert client.delete(f"/sessions/{session_id}").status_code == 200
    assert client.get(f"/sessions/{session_id}").status_code == 404
    assert client.delete(f"/sessions/{session_id}").status_code == 404


def test_api_key_guards_mutations_but_not_reads_by_default(oracle, monkeypatch):
    monkeypatch.setenv("GRANTAXIOM_API_KEY", "secret")
    monkeypatch.delenv("GRANTAXIOM_REQUIRE_AUTH_FOR_READS", raising=False)

    assert client.post("/sessions", json={}).status_code == 401
    assert client.post("/sessions", json={}, headers={"X-API-Key": "wrong"}).status_code == 401
    created = client.post("/sessions", json={}, headers={"X-API-Key": "secret"})
    assert created.status_code == 201

    session_id = created.json()["sessionId"]
    assert client.get(f"/sessions/{session_id}").status_code == 200

    monkeypatch.setenv("GRANTAXIOM_REQUIRE_AUTH_FOR_READS", "true")
    assert client.get(f"/sessions/{session_id}").status_code == 401
    assert client.get(f"/sessions/{session_id}", headers={"X-API-Key": "secret"}).status_code == 200


def test_openapi_marks_session_operations_as_protected(monkeypatch):
    monkeypatch.delenv("GRANTAXIOM_REQUIRE_AUTH_FOR_READS", raising=False)
    app.openapi_schema = None
    schema = client.get("/openapi.json").json()
    app.openapi_schema = None

    assert schema["components"]["securitySchemes"]["ApiKeyAuth"]["name"] == "X-API-Key"
    assert schema["paths"]["/sessions/{session_id}/audit"]["post"]["security"] == [{"ApiKeyAuth": []}]
    assert "security" not in schema["paths"]["/sessions/{session_id}"]["get"]
    assert "security" not in schema["paths"]["/health"]["get"]
