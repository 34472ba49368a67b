"""Tests for middleware — security headers, request IDs."""

import pytest
from httpx import ASGITransport, AsyncClient


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    """Responses carry no-store and anti-framing/sniffing headers."""
    r = await client.get("/api/health")
    assert r.status_code == 200
    assert r.headers["Cache-Control"] == "no-store"
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "no-referrer"


@pytest.mark.asyncio
async def test_security_headers_on_error_responses(client):
    r = await client.get("/api/records")
    assert r.status_code == 401
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/api/health")
    r2 = await client.get("/api/health")
    assert "X-Request-ID" in r1.headers
    assert "X-Request-ID" in r2.headers
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    """Incoming X-Request-ID is propagated through the response."""
    custom_id = "test-trace-12345"
    r = await client.get("/api/health", headers={"X-Request-ID": custom_id})
    assert r.headers["X-Request-ID"] == custom_id


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    """HSTS header is NOT set on HTTP connections (only HTTPS)."""
    r = await client.get("/api/health")
    assert "Strict-Transport-Security" not in r.headers


# ═══════════════════════════════════════════════════════════
# Error shape
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_unknown_path_uses_message_shape(client):
    r = await client.delete("/api/records/a/b")
    assert r.status_code == 404
    assert r.json() == {"message": "Not Found"}


@pytest.mark.asyncio
async def test_wrong_method_uses_message_shape(client):
    r = await client.put("/api/records")
    assert r.status_code == 405
    assert r.json() == {"message": "Method Not Allowed"}
    assert "GET" in r.headers["Allow"]


@pytest.mark.asyncio
async def test_unexpected_error_is_generic_500(app):
    async def explode():
        raise RuntimeError("secret internal detail")

    app.add_api_route("/api/explode", explode)

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        r = await ac.get("/api/explode")

    assert r.status_code == 500
    assert r.json() == {"message": "Internal server error."}
    assert "secret internal detail" not in r.text
