import httpx
from httpx import AsyncClient
from fastapi import status
from streakzz.main import app
import uuid

import pytest

@pytest.mark.asyncio
async def test_register_login_me(db_schema):
    unique_email = f"Test-{uuid.uuid4()}@Example.com"

    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        # register
        r = await ac.post("/auth/register", json={"full_name": "Pat Doe", "email": unique_email, "password": "supersecret"})
        assert r.status_code == status.HTTP_201_CREATED
        assert r.json()["user"]["role"] == "participant"
        # login is case-insensitive on email
        r = await ac.post("/auth/login", json={"email": unique_email.lower(), "password": "supersecret"})
        assert r.status_code == 200
        tokens = r.json()
        assert "access" in tokens and "refresh" in tokens
        # me with access token
        me = await ac.get("/auth/me", headers={"Authorization": f"Bearer {tokens['access']}"})
        assert me.status_code == 200
        body = me.json()
        assert body["email"] == unique_email.lower()
        assert body["full_name"] == "Pat Doe"
        # refresh to new pair
        r = await ac.post("/auth/refresh", headers={"Authorization": f"Bearer {tokens['refresh']}"})
        assert r.status_code == 200
        # a refresh token is not an access token
        r = await ac.get("/auth/me", headers={"Authorization": f"Bearer {tokens['refresh']}"})
        assert r.status_code == 401


@pytest.mark.asyncio
async def test_wrong_password(db_schema):
    email = f"pw-{uuid.uuid4().hex[:8]}@example.com"
    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        await ac.post("/auth/register", json={"full_name": "Pat Doe", "email": email, "password": "supersecret"})
        r = await ac.post("/auth/login", json={"email": email, "password": "not-it"})
        assert r.status_code == 401


@pytest.mark.asyncio
async def test_duplicate_email(db_schema):
    """Registering with a duplicate email returns 409"""
    email = f"duplicate-{uuid.uuid4().hex[:8]}@example.com"

    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        r1 = await ac.post("/auth/register", json={"full_name": "First", "email": email, "password": "password1"})
        assert r1.status_code == status.HTTP_201_CREATED

        r2 = await ac.post("/auth/register", json={"full_name": "Second", "email": email.upper(), "password": "password2"})
        assert r2.status_code == 409
        assert "email" in r2.json()["detail"].lower()


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"full_name": "A", "email": "a@example.com", "password": "supersecret"},
    {"full_name": "Pat Doe", "email": "not-an-email", "password": "supersecret"},
    {"full_name": "Pat Doe", "email": "b@example.com", "password": "short"},
])
async def test_register_validation(db_schema, body):
    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        r = await ac.post("/auth/register", json=body)
        assert r.status_code == 422


@pytest.mark.asyncio
async def test_deleted_account_cannot_sign_in(db_schema):
    email = f"gone-{uuid.uuid4().hex[:8]}@example.com"
    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        r = await ac.post("/auth/register", json={"full_name": "Pat Doe", "email": email, "password": "supersecret"})
        tokens = r.json()
        hdrs = {"Authorization": f"Bearer {tokens['access']}"}

        r = await ac.delete("/auth/account", headers=hdrs)
        assert r.status_code == 200

        assert (await ac.get("/auth/me", headers=hdrs)).status_code == 401
        r = await ac.post("/auth/refresh", headers={"Authorization": f"Bearer {tokens['refresh']}"})
        assert r.status_code == 401
        r = await ac.post("/auth/login", json={"email": email, "password": "supersecret"})
        assert r.status_code == 401
