import httpx
import pytest

ALLOWED = "https://app.example.com"


def _allowlist(relay_client, **overrides):
    return relay_client(cors_mode="allowlist", allowed_origins=[ALLOWED], **overrides)


@pytest.mark.parametrize("path", ["/fetch", "/openai/chat", "/anything/at/all"])
def test_preflight_short_circuits_any_path(relay_client, path):
    client, upstream = relay_client()
    resp = client.options(path, headers={"Origin": ALLOWED, "Access-Control-Request-Method": "POST"})

    assert resp.status_code == 204
    assert resp.content == b""
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["access-control-allow-methods"] == "GET,POST,OPTIONS"
    assert resp.headers["access-control-allow-headers"] == "Content-Type, Authorization"
    assert not upstream.called


def test_wildcard_applies_without_origin(relay_client):
    client, _ = relay_client()
    resp = client.get("/health")
    assert resp.headers["access-control-allow-origin"] == "*"
    assert "vary" not in resp.headers


def test_allowlist_echoes_allowed_origin(relay_client):
    client, _ = _allowlist(relay_client)
    resp = client.get("/health", headers={"Origin": ALLOWED})
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == ALLOWED
    assert resp.headers["vary"] == "Origin"


def test_allowlist_preflight_for_allowed_origin(relay_client):
    client, _ = _allowlist(relay_client)
    resp = client.options("/openai/chat", headers={"Origin": ALLOWED})
    assert resp.status_code == 204
    assert resp.headers["access-control-allow-origin"] == ALLOWED


def test_allowlist_unknown_origin_served_without_cors(relay_client):
    client, upstream = _allowlist(
        relay_client,
        handler=lambda request: httpx.Response(200, content=b"data", headers={"content-type": "text/plain"}),
    )
    resp = client.get("/fetch", params={"url": "https://example.com/"}, headers={"Origin": "https://evil.example"})

    assert resp.status_code == 200
    assert resp.content == b"data"
    assert "access-control-allow-origin" not in resp.headers
    assert upstream.called


def test_allowlist_unknown_origin_preflight_has_no_cors(relay_client):
    client, _ = _allowlist(relay_client)
    resp = client.options("/fetch", headers={"Origin": "https://evil.example"})
    assert resp.status_code == 204
    assert "access-control-allow-origin" not in resp.headers


def test_allowlist_no_origin_passes_without_cors(relay_client):
    client, _ = _allowlist(relay_client)
    resp = client.get("/health")
    assert resp.status_code == 200
    assert "access-control-allow-origin" not in resp.headers


def test_authorization_header_can_be_withheld(relay_client):
    client, _ = relay_client(cors_allow_authorization=False)
    resp = client.options("/openai/chat")
    assert resp.headers["access-control-allow-headers"] == "Content-Type"


def test_cors_headers_on_relay_errors(relay_client):
    client, _ = relay_client()
    resp = client.get("/fetch", params={"url": "ftp://example.com"}, headers={"Origin": ALLOWED})
    assert resp.status_code == 400
    assert resp.headers["access-control-allow-origin"] == "*"
