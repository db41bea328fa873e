"""Session endpoints end to end: login, authenticated calls, refresh, revoke.

Covers scenarios A (login → access token resolves to the user),
B (refresh → new access token for the same user) and
C (revoke → refresh is refused).
"""

import uuid

import jwt
import pytest

from chirpy.auth.jwt import ALGORITHM


def _email(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


async def _register_and_login(client, email: str, password: str = "04234") -> dict:
    r = await client.post("/api/users", json={"email": email, "password": password})
    assert r.status_code == 201
    r = await client.post("/api/login", json={"email": email, "password": password})
    assert r.status_code == 200
    return r.json()


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_returns_user_and_tokens(client):
    email = _email("login")
    body = await _register_and_login(client, email)
    assert body["email"] == email
    assert body["is_chirpy_red"] is False
    assert body["token"]
    assert len(body["refresh_token"]) == 64
    assert "hashed_password" not in body


@pytest.mark.asyncio
async def test_login_response_is_not_cacheable(client):
    email = _email("cache")
    await client.post("/api/users", json={"email": email, "password": "pw"})
    r = await client.post("/api/login", json={"email": email, "password": "pw"})
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_login_wrong_password(client):
    email = _email("wrong")
    await client.post("/api/users", json={"email": email, "password": "correct"})
    r = await client.post("/api/login", json={"email": email, "password": "incorrect"})
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_login_unknown_email_looks_like_wrong_password(client):
    r = await client.post("/api/login", json={"email": _email("nobody"), "password": "whatever"})
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_login_requires_fields(client):
    r = await client.post("/api/login", json={"email": "", "password": "x"})
    assert r.status_code == 400
    r = await client.post("/api/login", json={"email": "a@example.com"})
    assert r.status_code == 400


# ═══════════════════════════════════════════════════════════
# Scenario A — access token resolves to the logged-in user
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_access_token_resolves_to_user(client, app):
    body = await _register_and_login(client, _email("scenario-a"))
    guard = app.state.auth_guard

    principal = guard.authenticate_session(_bearer(body["token"]))
    assert principal == uuid.UUID(body["id"])

    # And through HTTP: the user can post a chirp under their own id.
    r = await client.post("/api/chirps", json={"body": "hello"}, headers=_bearer(body["token"]))
    assert r.status_code == 201
    assert r.json()["user_id"] == body["id"]


@pytest.mark.asyncio
async def test_protected_route_without_token(client):
    r = await client.post("/api/chirps", json={"body": "hello"})
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"
    assert r.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_failure_reasons_are_not_leaked(client):
    """Garbage token, wrong scheme and refresh-token-as-access all read the same."""
    body = await _register_and_login(client, _email("leak"))
    attempts = [
        {"Authorization": "Bearer not-a-jwt"},
        {"Authorization": f"Token {body['token']}"},
        _bearer(body["refresh_token"]),
    ]
    for headers in attempts:
        r = await client.post("/api/chirps", json={"body": "x"}, headers=headers)
        assert r.status_code == 401
        assert r.json() == {"error": "Unauthorized"}


# ═══════════════════════════════════════════════════════════
# Scenario B — refresh
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_refresh_issues_new_access_token(client, app):
    body = await _register_and_login(client, _email("scenario-b"))

    guard = app.state.auth_guard
    r = await client.post("/api/refresh", headers=_bearer(body["refresh_token"]))
    assert r.status_code == 200
    t2 = r.json()["token"]
    assert t2 != body["token"]

    assert guard.authenticate_session(_bearer(t2)) == uuid.UUID(body["id"])
    claims = jwt.decode(t2, options={"verify_signature": False}, algorithms=[ALGORITHM])
    assert claims["sub"] == body["id"]


@pytest.mark.asyncio
async def test_refresh_token_is_reusable(client):
    body = await _register_and_login(client, _email("reuse"))
    for _ in range(3):
        r = await client.post("/api/refresh", headers=_bearer(body["refresh_token"]))
        assert r.status_code == 200


@pytest.mark.asyncio
async def test_refresh_without_header(client):
    r = await client.post("/api/refresh")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_refresh_with_unknown_token(client):
    r = await client.post("/api/refresh", headers=_bearer("ab" * 32))
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_refresh_with_access_token_fails(client):
    body = await _register_and_login(client, _email("badref"))
    r = await client.post("/api/refresh", headers=_bearer(body["token"]))
    assert r.status_code == 401


# ═══════════════════════════════════════════════════════════
# Scenario C — revoke
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_revoke_then_refresh_fails(client):
    body = await _register_and_login(client, _email("scenario-c"))
    refresh = body["refresh_token"]

    r = await client.post("/api/revoke", headers=_bearer(refresh))
    assert r.status_code == 204

    for _ in range(2):
        r = await client.post("/api/refresh", headers=_bearer(refresh))
        assert r.status_code == 401
        assert r.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_revoke_twice_reports_already_revoked(client):
    body = await _register_and_login(client, _email("twice"))
    refresh = body["refresh_token"]

    assert (await client.post("/api/revoke", headers=_bearer(refresh))).status_code == 204
    r = await client.post("/api/revoke", headers=_bearer(refresh))
    assert r.status_code == 200
    assert r.json() == {"status": "already_revoked"}


@pytest.mark.asyncio
async def test_revoke_unknown_token(client):
    r = await client.post("/api/revoke", headers=_bearer("cd" * 32))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_revoke_leaves_other_sessions_alone(client):
    email = _email("sessions")
    first = await _register_and_login(client, email)
    r = await client.post("/api/login", json={"email": email, "password": "04234"})
    second = r.json()

    await client.post("/api/revoke", headers=_bearer(first["refresh_token"]))
    r = await client.post("/api/refresh", headers=_bearer(second["refresh_token"]))
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_access_token_survives_revoke(client):
    """Access tokens are stateless: revoking the refresh token does not end them."""
    body = await _register_and_login(client, _email("stateless"))
    await client.post("/api/revoke", headers=_bearer(body["refresh_token"]))

    r = await client.post("/api/chirps", json={"body": "still here"}, headers=_bearer(body["token"]))
    assert r.status_code == 201


@pytest.mark.asyncio
async def test_undecodable_login_body_is_a_terse_400(client):
    r = await client.post("/api/login", json={"email": "x@example.com", "password": 12345})
    assert r.status_code == 400
    assert r.json() == {"error": "Bad Request"}
    assert "12345" not in r.text
