"""HTTP-level tests for the dashboard dispatcher."""

import httpx
import pytest
from prometheus_client import REGISTRY

ERROR_BODY = {"error": "Invalid address or network issue."}


def test_proxy_relays_upstream_payload(client, upstream, sample_payload):
    """Successful lookup is relayed verbatim as JSON."""

    resp = client.post("/api", json={"wallet": "ban_1abc"})

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/json"
    assert resp.json() == sample_payload
    assert len(upstream.requests) == 1


def test_proxy_calls_user_address_with_fixed_user_agent(client, upstream):
    client.post("/api", json={"wallet": "ban_1abc"})

    sent = upstream.requests[0]
    assert sent.method == "GET"
    assert str(sent.url) == "https://bananominer.com/user_address/ban_1abc"
    assert sent.headers["user-agent"] == "BananoMinerDashboard/1.0"


def test_proxy_passes_through_arbitrary_upstream_json(client, upstream):
    """No schema is enforced on the upstream payload."""

    odd = {"unexpected": [1, 2, {"nested": None}], "user": "not-an-object"}
    upstream.responder = lambda request: httpx.Response(200, json=odd)

    resp = client.post("/api", json={"wallet": "ban_1abc"})

    assert resp.status_code == 200
    assert resp.json() == odd


@pytest.mark.parametrize("status", [400, 404, 429, 500, 503])
def test_non_success_upstream_status_maps_to_500(client, upstream, status):
    upstream.responder = lambda request: httpx.Response(status, json={"detail": "nope"})

    resp = client.post("/api", json={"wallet": "ban_1abc"})

    assert resp.status_code == 500
    assert resp.headers["content-type"] == "application/json"
    assert resp.json() == ERROR_BODY


def test_upstream_network_failure_maps_to_500(client, upstream):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    upstream.responder = refuse

    resp = client.post("/api", json={"wallet": "ban_1abc"})

    assert resp.status_code == 500
    assert resp.json() == ERROR_BODY


def test_upstream_non_json_body_maps_to_500(client, upstream):
    upstream.responder = lambda request: httpx.Response(200, text="<html>maintenance</html>")

    resp = client.post("/api", json={"wallet": "ban_1abc"})

    assert resp.status_code == 500
    assert resp.json() == ERROR_BODY


@pytest.mark.parametrize("body", [b"{not json", b"", b"[1, 2, 3]", b'"ban_1abc"'])
def test_malformed_body_maps_to_500_without_upstream_call(client, upstream, body):
    resp = client.post("/api", content=body, headers={"content-type": "application/json"})

    assert resp.status_code == 500
    assert resp.json() == ERROR_BODY
    assert upstream.requests == []


def test_missing_wallet_is_forwarded_as_undefined(client, upstream):
    upstream.responder = lambda request: httpx.Response(404)

    resp = client.post("/api", json={})

    assert resp.status_code == 500
    assert upstream.requests[0].url.path == "/user_address/undefined"


@pytest.mark.parametrize(
    "wallet,segment",
    [(None, "null"), (True, "true"), (False, "false"), (2.0, "2"), (1.5, "1.5")],
)
def test_non_string_wallet_uses_json_spelling(client, upstream, wallet, segment):
    client.post("/api", json={"wallet": wallet})

    assert upstream.requests[0].url.path == f"/user_address/{segment}"


def test_non_string_wallet_is_forwarded_as_text(client, upstream):
    client.post("/api", json={"wallet": 12345})

    assert upstream.requests[0].url.path == "/user_address/12345"


def test_repeated_lookup_is_identical(client, upstream):
    """No caching or state drift between identical requests."""

    first = client.post("/api", json={"wallet": "ban_1abc"})
    second = client.post("/api", json={"wallet": "ban_1abc"})

    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()
    assert len(upstream.requests) == 2


@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/"),
        ("GET", "/api"),
        ("POST", "/"),
        ("POST", "/api/"),
        ("PUT", "/api"),
        ("DELETE", "/api"),
        ("GET", "/docs"),
        ("GET", "/openapi.json"),
        ("GET", "/some/deep/path"),
        ("TRACE", "/api"),
        ("PROPFIND", "/api"),
        ("PURGE", "/"),
    ],
)
def test_other_requests_get_the_dashboard(client, upstream, method, path):
    resp = client.request(method, path)

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "<title>BananoMiner Dashboard</title>" in resp.text
    assert upstream.requests == []


def test_dashboard_page_posts_to_api(client):
    resp = client.get("/")

    assert "fetch('/api'" in resp.text
    assert 'id="wallet"' in resp.text
    assert "creeper.banano.cc/explorer/block/" in resp.text


def test_correlation_id_is_echoed(client):
    resp = client.get("/", headers={"x-correlation-id": "trace-123"})

    assert resp.headers["x-correlation-id"] == "trace-123"


def test_correlation_id_is_generated_when_absent(client):
    resp = client.post("/api", json={"wallet": "ban_1abc"})

    assert resp.headers["x-correlation-id"]


def test_request_metrics_are_labelled_by_route(client):
    labels = {
        "service": "bananominer-dashboard",
        "route": "api_proxy",
        "method": "POST",
        "status_code": "200",
    }
    before = REGISTRY.get_sample_value("http_requests_total", labels) or 0.0

    client.post("/api", json={"wallet": "ban_1abc"})

    assert REGISTRY.get_sample_value("http_requests_total", labels) == before + 1


@pytest.mark.parametrize(
    "body",
    [b'{"payments": [{"amount": NaN}]}', b'{"score": Infinity}', b"-Infinity"],
)
def test_upstream_non_standard_constants_map_to_500(client, upstream, body):
    """NaN/Infinity cannot be relayed as JSON, so they count as a bad upstream body."""

    upstream.responder = lambda request: httpx.Response(200, content=body)

    resp = client.post("/api", json={"wallet": "ban_1abc"})

    assert resp.status_code == 500
    assert resp.json() == ERROR_BODY


def test_unlisted_method_metrics_count_as_dashboard(client):
    labels = {
        "service": "bananominer-dashboard",
        "route": "static_page",
        "method": "PROPFIND",
        "status_code": "200",
    }
    before = REGISTRY.get_sample_value("http_requests_total", labels) or 0.0

    resp = client.request("PROPFIND", "/api")

    assert resp.status_code == 200
    assert REGISTRY.get_sample_value("http_requests_total", labels) == before + 1
