# tests/test_fastapi_api.py
import pytest
from fastapi.testclient import TestClient

from httpsource.adapters.api.fastapi_app import app, get_executor
from httpsource.domain.errors import TransportError
from httpsource.domain.fetch_service import FetchExecutor
from httpsource.ports.http_client import RawResponse
from tests.fakes import FakeHTTPClient

client = TestClient(app)


@pytest.fixture
def fake():
    holder = {"client": FakeHTTPClient()}
    app.dependency_overrides[get_executor] = lambda: FetchExecutor(holder["client"], strict_status=False)
    yield holder
    app.dependency_overrides.clear()


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_fetch_returns_state_with_legacy_body(fake):
    fake["client"] = FakeHTTPClient(
        RawResponse(status=200, headers=[("Content-Type", "text/plain"), ("X-Double", "1"), ("X-Double", "2")], body=b"1.0.0")
    )
    r = client.post("/fetch", json={"url": "http://svc/200"})
    assert r.status_code == 200
    data = r.json()
    assert data["warnings"] == []
    assert data["state"] == {
        "id": "http://svc/200",
        "status_code": 200,
        "response_body": "1.0.0",
        "response_headers": {"Content-Type": "text/plain", "X-Double": "1, 2"},
        "body": "1.0.0",
    }


def test_fetch_passes_method_headers_and_body(fake):
    r = client.post(
        "/fetch",
        json={"url": "http://svc/create", "method": "POST", "request_headers": {"X-A": "b"}, "request_body": "hi"},
    )
    assert r.status_code == 200
    assert fake["client"].calls == [{"method": "POST", "url": "http://svc/create", "headers": {"X-A": "b"}, "body": "hi"}]


def test_fetch_reports_advisories(fake):
    fake["client"] = FakeHTTPClient(
        RawResponse(status=200, headers=[("Content-Type", "application/x-x509-ca-cert")], body=b"pem")
    )
    r = client.post("/fetch", json={"url": "http://svc/cert"})
    assert r.status_code == 200
    warnings = r.json()["warnings"]
    assert len(warnings) == 1
    assert "application/x-x509-ca-cert" in warnings[0]["summary"]


def test_invalid_method_is_400(fake):
    r = client.post("/fetch", json={"url": "http://svc/", "method": "HEAD"})
    assert r.status_code == 400
    assert "HEAD" in r.json()["detail"]
    assert fake["client"].calls == []


def test_transport_failure_is_502(fake):
    fake["client"] = FakeHTTPClient(error=TransportError("Error making request", "connection refused"))
    r = client.post("/fetch", json={"url": "http://svc/"})
    assert r.status_code == 502
    assert "connection refused" in r.json()["detail"]
