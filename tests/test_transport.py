"""Tests for the transport: error classification, credentials and bodies."""

import httpx
import pytest

from conftest import request_json
from storefront.services.client import form_fields
from storefront.services.errors import NetworkError, RemoteError, RequestTimeoutError
from storefront.services.transport import Service


@pytest.mark.asyncio
async def test_connect_failure_is_network_error(client, backend):
    backend.add("GET", "/service", httpx.ConnectError("refused"))

    with pytest.raises(NetworkError) as exc_info:
        await client.get("/service")

    assert exc_info.value.kind == "connect"
    assert exc_info.value.service_id == "data"


@pytest.mark.asyncio
async def test_timeout_is_classified(client, backend):
    backend.add("GET", "/auth/me", httpx.ReadTimeout("slow"), service="auth")

    with pytest.raises(RequestTimeoutError) as exc_info:
        await client.get("/auth/me", service=Service.AUTH)

    assert exc_info.value.kind == "timeout"
    assert exc_info.value.service_id == "auth"


@pytest.mark.asyncio
async def test_remote_error_keeps_status_and_body(client, backend):
    backend.json("POST", "/user", {"message": "Duplicate record"}, status=400)

    with pytest.raises(RemoteError) as exc_info:
        await client.post("/user", json={"email": "a@b.cl"})

    assert exc_info.value.status == 400
    assert exc_info.value.server_message == "Duplicate record"


@pytest.mark.asyncio
async def test_non_json_and_empty_bodies(client, backend):
    backend.add("GET", "/health", httpx.Response(200, text="ok"))
    backend.add("DELETE", "/blog/3", httpx.Response(204))

    assert await client.get("/health") == "ok"
    assert await client.delete("/blog/3") is None


@pytest.mark.asyncio
async def test_bearer_header_applies_to_both_services(client, backend):
    backend.json("GET", "/service", [])
    backend.json("GET", "/auth/me", {}, service="auth")

    await client.get("/service")
    client.set_credential("tok-123")
    await client.get("/service")
    await client.get("/auth/me", service=Service.AUTH)
    client.clear_credential()
    await client.get("/service")

    headers = [request.headers.get("authorization") for request in backend.requests]
    assert headers == [None, "Bearer tok-123", "Bearer tok-123", None]


@pytest.mark.asyncio
async def test_unauthorized_data_response_clears_credential(client, backend):
    backend.json("GET", "/user", {"message": "expired"}, status=401)
    client.set_credential("old")

    with pytest.raises(RemoteError):
        await client.get("/user")

    assert client.has_credential() is False


@pytest.mark.asyncio
async def test_unauthorized_auth_response_keeps_credential(client, backend):
    backend.json("GET", "/auth/me", {"message": "nope"}, status=401, service="auth")
    client.set_credential("tok")

    with pytest.raises(RemoteError):
        await client.get("/auth/me", service=Service.AUTH)

    assert client.current_token() == "tok"


@pytest.mark.asyncio
async def test_json_requests_send_json(client, backend):
    backend.json("POST", "/blog", {"id": 1})

    await client.post("/blog", json={"title": "Hola"})

    request = backend.calls("POST", "/blog")[0]
    assert request.headers["content-type"] == "application/json"
    assert request_json(request) == {"title": "Hola"}


@pytest.mark.asyncio
async def test_multipart_boundary_is_left_to_httpx(client, backend):
    backend.json("POST", "/file", {"url": "https://cdn.test/a.png"})

    await client.post_multipart(
        "/file",
        data={"title": "x", "available": True, "skip": None},
        files={"file": ("a.png", b"\x89PNG", "image/png")},
    )

    request = backend.calls("POST", "/file")[0]
    content_type = request.headers["content-type"]
    assert content_type.startswith("multipart/form-data; boundary=")
    body = request.content
    assert b'name="title"' in body
    assert b"true" in body
    assert b'name="skip"' not in body
    assert b'filename="a.png"' in body


@pytest.mark.asyncio
async def test_health_check(client, backend):
    backend.add("GET", "/health", httpx.Response(200, json={"status": "ok"}))
    assert await client.check_health() is True

    backend.add("GET", "/health", httpx.Response(503))
    assert await client.check_health() is False


def test_form_fields_encode_nested_values_as_json():
    fields = form_fields({"image": {"url": "https://x"}, "tags": ["a", "b"], "price": 5, "skip": None})

    assert fields == {"image": '{"url": "https://x"}', "tags": '["a", "b"]', "price": "5"}
