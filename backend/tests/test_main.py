import json

import pytest
from fastapi.testclient import TestClient

from ether_proxy import main, pipeline
from ether_proxy.sse_utils import answer_event, done_event, reasoning_event


@pytest.fixture
def client():
    # No context manager: lifespan (and the warm-up browser) stays off
    return TestClient(main.app)


@pytest.fixture
def fake_pipeline(monkeypatch):
    calls = []

    async def fake_ask_streaming(question, pool=None, settings=None):
        calls.append(question)
        yield reasoning_event("thinking ")
        yield reasoning_event("**CCO**")
        yield answer_event("CCO")
        yield done_event()

    monkeypatch.setattr(pipeline, "ask_streaming", fake_ask_streaming)
    return calls


class TestAsk:

    @pytest.mark.parametrize("body", [{}, {"question": ""}, {"question": "   \n\t"}, {"question": None}])
    def test_rejects_blank_question(self, client, fake_pipeline, body):
        resp = client.post("/ask", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": "question required"}
        assert fake_pipeline == []

    def test_rejects_missing_body(self, client, fake_pipeline):
        resp = client.post("/ask")
        assert resp.status_code == 400
        assert fake_pipeline == []

    def test_streams_events_in_order(self, client, fake_pipeline):
        resp = client.post("/ask", json={"question": " ethanol? "})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")
        assert resp.headers["cache-control"] == "no-cache"

        frames = [f for f in resp.text.split("\n\n") if f]
        events = [json.loads(f[len("data: "):]) for f in frames]
        assert [e["type"] for e in events] == ["reasoning", "reasoning", "answer", "done"]
        assert fake_pipeline == [" ethanol? "]

    def test_cors_preflight(self, client):
        resp = client.options(
            "/ask",
            headers={
                "Origin": "https://example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"


class TestHealth:

    def test_reports_pool_state(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["browser"]["state"] in {"cold", "warming", "ready", "failed"}

    def test_root(self, client):
        assert client.get("/").json() == {"message": "Ether0 Proxy is running"}
