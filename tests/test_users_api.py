"""Users API: registration, duplicates, profile update, admin reset."""

import uuid

import pytest

from chirpy.config import Settings


def _email(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


@pytest.mark.asyncio
async def test_register_user(client):
    email = _email("register")
    r = await client.post("/api/users", json={"email": email, "password": "secure_password_123"})
    assert r.status_code == 201
    user = r.json()
    assert user["email"] == email
    assert user["is_chirpy_red"] is False
    assert uuid.UUID(user["id"])
    assert "hashed_password" not in user
    assert "password" not in user


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    body = {"email": _email("dup"), "password": "password_123"}
    r1 = await client.post("/api/users", json=body)
    assert r1.status_code == 201

    r2 = await client.post("/api/users", json=body)
    assert r2.status_code == 409
    assert r2.json() == {"error": "Email already registered"}


@pytest.mark.asyncio
async def test_register_requires_fields(client):
    r = await client.post("/api/users", json={"email": "", "password": "x"})
    assert r.status_code == 400
    assert r.json() == {"error": "email field cannot be empty"}

    r = await client.post("/api/users", json={"email": _email("nopw")})
    assert r.status_code == 400
    assert r.json() == {"error": "password field cannot be empty"}


@pytest.mark.asyncio
async def test_update_user(client):
    email = _email("update")
    await client.post("/api/users", json={"email": email, "password": "old"})
    r = await client.post("/api/login", json={"email": email, "password": "old"})
    login = r.json()

    new_email = _email("updated")
    r = await client.put(
        "/api/users",
        json={"email": new_email, "password": "new"},
        headers={"Authorization": f"Bearer {login['token']}"},
    )
    assert r.status_code == 200
    assert r.json()["email"] == new_email
    assert r.json()["id"] == login["id"]

    r = await client.post("/api/login", json={"email": email, "password": "old"})
    assert r.status_code == 401
    r = await client.post("/api/login", json={"email": new_email, "password": "new"})
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_update_user_requires_auth(client):
    r = await client.put("/api/users", json={"email": _email("anon"), "password": "x"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_update_to_taken_email(client):
    taken = _email("taken")
    await client.post("/api/users", json={"email": taken, "password": "pw"})
    email = _email("mover")
    await client.post("/api/users", json={"email": email, "password": "pw"})
    login = (await client.post("/api/login", json={"email": email, "password": "pw"})).json()

    r = await client.put(
        "/api/users",
        json={"email": taken, "password": "pw"},
        headers={"Authorization": f"Bearer {login['token']}"},
    )
    assert r.status_code == 409


# ─── Admin reset ─────────────────────────────────────────


@pytest.mark.asyncio
async def test_reset_in_development(client):
    email = _email("reset")
    await client.post("/api/users", json={"email": email, "password": "pw"})

    r = await client.post("/admin/reset")
    assert r.status_code == 200

    r = await client.post("/api/login", json={"email": email, "password": "pw"})
    assert r.status_code == 401
    r = await client.get("/api/chirps")
    assert r.json() == []


@pytest.mark.asyncio
async def test_reset_refused_outside_development(client, app):
    app.state.settings = Settings(
        database_url="sqlite+aiosqlite://",
        jwt_secret="prod-secret-0123456789abcdef0123456789abcdef",
        polka_key="prod-key",
        environment="production",
    )
    email = _email("keep")
    await client.post("/api/users", json={"email": email, "password": "pw"})

    r = await client.post("/admin/reset")
    assert r.status_code == 403

    r = await client.post("/api/login", json={"email": email, "password": "pw"})
    assert r.status_code == 200
