"""Tests for the auth facade and the local sign-in flows."""

import httpx
import pytest

from conftest import request_json
from storefront.resources import AuthResource
from storefront.services.errors import ConflictError, RemoteError, SignupVerificationError


@pytest.fixture
def auth(client):
    return AuthResource(client)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"authToken": "tok"},
        {"data": {"token": "tok"}},
        [{"access_token": "tok"}],
    ],
)
async def test_login_installs_token(auth, client, backend, body):
    backend.json("POST", "/auth/login", body, service="auth")

    result = await auth.login("ana@x.cl", "pw")

    assert result.confirmed is True
    assert result.token == "tok"
    assert client.current_token() == "tok"
    assert request_json(backend.requests[0]) == {"email": "ana@x.cl", "password": "pw"}


@pytest.mark.asyncio
async def test_login_without_token_is_unconfirmed(auth, client, backend):
    client.set_credential("previous")
    backend.json("POST", "/auth/login", {"user": {"id": 1}}, service="auth")

    result = await auth.login("ana@x.cl", "pw")

    assert result.confirmed is False
    assert result.token is None
    assert client.has_credential() is False
    assert "authorization" not in backend.requests[0].headers


@pytest.mark.asyncio
async def test_login_failure_propagates(auth, backend):
    backend.json("POST", "/auth/login", {"message": "Invalid credentials"}, status=401, service="auth")

    with pytest.raises(RemoteError):
        await auth.login("ana@x.cl", "bad")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,body",
    [
        (409, {"message": "exists"}),
        (422, {"message": "bad"}),
        (403, {"message": "This account is already in use."}),
    ],
)
async def test_signup_conflicts(auth, backend, status, body):
    backend.json("POST", "/auth/signup", body, status=status, service="auth")

    with pytest.raises(ConflictError):
        await auth.signup({"nombre": "Ana", "email": "ana@x.cl", "password": "pw"})


@pytest.mark.asyncio
async def test_me_and_logout(auth, client, backend):
    backend.json("POST", "/auth/login", {"authToken": "tok"}, service="auth")
    backend.json("GET", "/auth/me", {"id": 2, "name": "Ana", "email": "ana@x.cl", "role_id": 2}, service="auth")

    await auth.login("ana@x.cl", "pw")
    me = await auth.me()
    auth.logout()

    assert me.is_admin
    assert backend.calls("GET", "/auth/me")[0].headers["authorization"] == "Bearer tok"
    assert client.has_credential() is False


@pytest.mark.asyncio
async def test_sign_in_tolerates_auth_outage(auth, client, backend):
    backend.json("GET", "/user", [{"id": 1, "email": "ana@x.cl", "password": "pw"}])
    backend.add("POST", "/auth/login", httpx.ConnectError("down"), service="auth")

    result = await auth.sign_in("ana@x.cl", "pw")

    assert result.user.id == 1
    assert result.user.password is None
    assert result.auth.confirmed is False
    assert client.has_credential() is False


@pytest.mark.asyncio
async def test_sign_in_rejects_wrong_password(auth, backend):
    backend.json("GET", "/user", [{"id": 1, "email": "ana@x.cl", "password": "pw"}])

    assert await auth.sign_in("ana@x.cl", "nope") is None
    assert backend.calls("POST") == []


@pytest.mark.asyncio
async def test_register_creates_client_and_logs_in(auth, client, backend):
    backend.json("POST", "/user", {"id": 3, "name": "Ana", "email": "ana@x.cl", "password": "pw", "role_id": 1})
    backend.json("POST", "/auth/login", {"authToken": "tok"}, service="auth")

    result = await auth.register(
        {"nombre": "Ana", "apellidos": "Pérez", "email": "ana@x.cl", "password": "pw"}
    )

    assert result.user.rol == "cliente"
    assert result.user.password is None
    assert result.auth.confirmed is True
    assert client.current_token() == "tok"


@pytest.mark.asyncio
async def test_register_with_empty_reply_keeps_requested_role(auth, backend):
    backend.add("POST", "/user", httpx.Response(201))
    backend.json("POST", "/auth/login", {"authToken": "tok"}, service="auth")

    result = await auth.register(
        {"nombre": "Root", "apellidos": "Admin", "email": "root@x.cl", "password": "pw", "role_id": 2}
    )

    assert result.user.rol == "admin"
    assert result.user.is_admin
    assert result.user.password is None


@pytest.mark.asyncio
async def test_signup_verification_polls_users(auth, backend, sleeps):
    backend.json("POST", "/auth/signup", {"authToken": "tok"}, service="auth")
    backend.add(
        "GET",
        "/user",
        httpx.Response(200, json=[]),
        httpx.Response(200, json=[{"id": 3, "email": "ana@x.cl", "password_hash": "$2b$h"}]),
    )

    result = await auth.signup({"nombre": "Ana", "email": "ana@x.cl", "password": "pw"}, verify=True)

    assert result.confirmed is True
    assert len(backend.calls("GET", "/user")) == 2
    assert sleeps == [0.3]


@pytest.mark.asyncio
async def test_signup_verification_gives_up_after_three_reads(auth, backend, sleeps):
    backend.json("POST", "/auth/signup", {"authToken": "tok"}, service="auth")
    backend.json("GET", "/user", [])

    with pytest.raises(SignupVerificationError, match="not found"):
        await auth.signup({"nombre": "Ana", "email": "ana@x.cl", "password": "pw"}, verify=True)

    assert len(backend.calls("GET", "/user")) == 3
    assert sleeps == [0.3, 0.3]


@pytest.mark.asyncio
async def test_signup_verification_requires_password_hash(auth, backend):
    backend.json("POST", "/auth/signup", {"authToken": "tok"}, service="auth")
    backend.json("GET", "/user", [{"id": 3, "email": "ana@x.cl"}])

    with pytest.raises(SignupVerificationError, match="password hash"):
        await auth.signup({"nombre": "Ana", "email": "ana@x.cl", "password": "pw"}, verify=True)


@pytest.mark.asyncio
async def test_signup_skips_verification_by_default(auth, backend):
    backend.json("POST", "/auth/signup", {"authToken": "tok"}, service="auth")

    await auth.signup({"nombre": "Ana", "email": "ana@x.cl", "password": "pw"})

    assert backend.calls("GET") == []
