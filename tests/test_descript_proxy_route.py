import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from descript_proxy.routes import webhook_proxy
from tests.fakes import SHARE_URL, TRANSCRIPT_URL, WEBHOOK_URL, FakeUpstream, share_page

SEGMENTS = {"segments": [{"speaker": "Alice", "text": "Hello", "start": 5}]}


def _body() -> dict:
    return {"descript_url": SHARE_URL, "make_webhook_url": WEBHOOK_URL}


def _happy_upstream(upstream: FakeUpstream, webhook_status: int = 200) -> None:
    upstream.add("GET", SHARE_URL, text=share_page())
    upstream.add("GET", TRANSCRIPT_URL, json=SEGMENTS)
    upstream.add("POST", WEBHOOK_URL, webhook_status, json={"accepted": True})


def test_get_returns_stub(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "metadata": {"processing_time": 0}}


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"ok": True}


def test_success_forwards_to_webhook(client: TestClient, upstream: FakeUpstream) -> None:
    _happy_upstream(upstream)

    resp = client.post("/", json=_body())
    assert resp.status_code == 200
    js = resp.json()
    assert js["success"] is True
    assert js["transcript"] == "[00:00:05] Alice: Hello"
    assert "error" not in js
    assert js["metadata"]["source_url"] == SHARE_URL
    assert js["metadata"]["transcript_json_url"] == TRANSCRIPT_URL
    assert js["metadata"]["processing_time"] >= 0

    posted = upstream.sent("POST", WEBHOOK_URL)
    assert len(posted) == 1
    assert json.loads(posted[0].content) == js


def test_outbound_calls_are_sequential_in_order(client: TestClient, upstream: FakeUpstream) -> None:
    _happy_upstream(upstream)
    client.post("/", json=_body())
    assert [(r.method, str(r.url)) for r in upstream.requests] == [
        ("GET", SHARE_URL),
        ("GET", TRANSCRIPT_URL),
        ("POST", WEBHOOK_URL),
    ]


def test_alias_path(client: TestClient, upstream: FakeUpstream) -> None:
    _happy_upstream(upstream)
    for path in ("/api/descript-proxy", "/api/descript-proxy/"):
        resp = client.post(path, json=_body(), follow_redirects=False)
        assert resp.status_code == 200
        assert resp.json()["success"] is True

    resp = client.get("/api/descript-proxy", follow_redirects=False)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "metadata": {"processing_time": 0}}


def test_webhook_error_status_still_returns_transcript(client: TestClient, upstream: FakeUpstream) -> None:
    _happy_upstream(upstream, webhook_status=500)

    resp = client.post("/", json=_body())
    assert resp.status_code == 200
    js = resp.json()
    assert js["success"] is False
    assert "500" in js["error"]
    assert js["transcript"] == "[00:00:05] Alice: Hello"
    assert js["metadata"]["transcript_json_url"] == TRANSCRIPT_URL


def test_webhook_transport_failure(client: TestClient, upstream: FakeUpstream) -> None:
    _happy_upstream(upstream)

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    upstream.add_handler("POST", WEBHOOK_URL, refuse)

    resp = client.post("/", json=_body())
    assert resp.status_code == 200
    js = resp.json()
    assert js["success"] is False
    assert js["error"] == "Failed to deliver results to Make webhook"
    assert js["transcript"]


def test_invalid_json_body(client: TestClient, upstream: FakeUpstream) -> None:
    resp = client.post("/", content=b"{not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "metadata": {}, "error": "Invalid JSON body"}
    assert upstream.requests == []


def test_missing_descript_url(client: TestClient, upstream: FakeUpstream) -> None:
    resp = client.post("/", json={"make_webhook_url": WEBHOOK_URL})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing or invalid 'descript_url'"

    resp = client.post("/", json={"descript_url": 42, "make_webhook_url": WEBHOOK_URL})
    assert resp.status_code == 400
    assert upstream.requests == []


def test_missing_webhook_url(client: TestClient, upstream: FakeUpstream) -> None:
    resp = client.post("/", json={"descript_url": SHARE_URL})
    assert resp.status_code == 400
    js = resp.json()
    assert js["error"] == "Missing or invalid 'make_webhook_url'"
    assert js["metadata"] == {"source_url": SHARE_URL}
    assert upstream.requests == []


def test_share_page_non_2xx(client: TestClient, upstream: FakeUpstream) -> None:
    upstream.add("GET", SHARE_URL, 403, text="forbidden")

    resp = client.post("/", json=_body())
    assert resp.status_code == 502
    assert resp.json()["error"] == "Failed to fetch Descript page: HTTP 403"


def test_pointer_not_found(client: TestClient, upstream: FakeUpstream) -> None:
    upstream.add("GET", SHARE_URL, text="<html><head></head></html>")

    resp = client.post("/", json=_body())
    assert resp.status_code == 422
    js = resp.json()
    assert js["error"] == "Unable to locate transcript JSON URL in page HTML"
    assert js["metadata"] == {"source_url": SHARE_URL}


def test_transcript_non_2xx(client: TestClient, upstream: FakeUpstream) -> None:
    upstream.add("GET", SHARE_URL, text=share_page())
    upstream.add("GET", TRANSCRIPT_URL, 404)

    resp = client.post("/", json=_body())
    assert resp.status_code == 502
    js = resp.json()
    assert js["error"] == "Failed to fetch transcript JSON: HTTP 404"
    assert js["metadata"]["transcript_json_url"] == TRANSCRIPT_URL


def test_transcript_not_json(client: TestClient, upstream: FakeUpstream) -> None:
    upstream.add("GET", SHARE_URL, text=share_page())
    upstream.add("GET", TRANSCRIPT_URL, text="<html>oops</html>")

    resp = client.post("/", json=_body())
    assert resp.status_code == 422
    assert resp.json()["error"] == "Transcript JSON parsing failed"


def test_unrecognized_transcript(client: TestClient, upstream: FakeUpstream) -> None:
    upstream.add("GET", SHARE_URL, text=share_page())
    upstream.add("GET", TRANSCRIPT_URL, json={"foo": 1})

    resp = client.post("/", json=_body())
    assert resp.status_code == 422
    assert resp.json()["error"] == "Transcript JSON did not contain recognizable text"
    assert upstream.sent("POST", WEBHOOK_URL) == []


def test_unexpected_failure_is_500(client: TestClient, upstream: FakeUpstream) -> None:
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("name resolution failed", request=request)

    upstream.add_handler("GET", SHARE_URL, boom)

    resp = client.post("/", json=_body())
    assert resp.status_code == 500
    js = resp.json()
    assert js["success"] is False
    assert js["metadata"] == {}
    assert js["error"] == "Unexpected error: name resolution failed"


async def _stall(request: httpx.Request) -> httpx.Response:
    await asyncio.sleep(5)
    return httpx.Response(200, text=share_page())


def test_slow_share_page_times_out(
    client: TestClient, upstream: FakeUpstream, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(webhook_proxy, "REQUEST_TIMEOUT_SECONDS", 0.05)
    upstream.add_handler("GET", SHARE_URL, _stall)

    resp = client.post("/", json=_body())
    assert resp.status_code == 500
    js = resp.json()
    assert js["success"] is False
    assert js["error"].startswith("Unexpected error: ")
    assert "aborted" in js["error"]
    assert upstream.sent("POST", WEBHOOK_URL) == []


def test_slow_webhook_counts_as_failed_delivery(
    client: TestClient, upstream: FakeUpstream, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(webhook_proxy, "REQUEST_TIMEOUT_SECONDS", 0.05)
    _happy_upstream(upstream)
    upstream.add_handler("POST", WEBHOOK_URL, _stall)

    resp = client.post("/", json=_body())
    assert resp.status_code == 200
    js = resp.json()
    assert js["success"] is False
    assert js["error"] == "Failed to deliver results to Make webhook"
    assert js["transcript"] == "[00:00:05] Alice: Hello"
    assert js["metadata"]["transcript_json_url"] == TRANSCRIPT_URL
