"""Signup, login and bearer-token handling through the HTTP API."""
import uuid

import pytest

from conftest import signup, bearer
from thoughtboard.utils.security import create_user_token


class TestSignup:
    @pytest.mark.asyncio
    async def test_signup_returns_token_and_user(self, client):
        data = await signup(client, "alice")

        assert data["token"]
        assert data["user"]["username"] == "alice"
        assert "password_hash" not in data["user"]

    @pytest.mark.asyncio
    async def test_duplicate_username_is_400_with_distinct_code(self, client):
        await signup(client, "alice")

        response = await client.post(
            "/api/auth/signup", json={"username": "alice", "password": "other-pass"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "AUTH_007"

    @pytest.mark.asyncio
    async def test_missing_password_is_validation_error(self, client):
        response = await client.post("/api/auth/signup", json={"username": "alice"})

        assert response.status_code == 400
        assert response.json()["error"] == "VAL_001"

    @pytest.mark.asyncio
    async def test_unknown_fields_are_rejected(self, client):
        response = await client.post(
            "/api/auth/signup",
            json={"username": "alice", "password": "secret123", "role": "admin"},
        )

        assert response.status_code == 400


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_with_correct_password(self, client):
        await signup(client, "alice", "secret123")

        response = await client.post(
            "/api/auth/login", json={"username": "alice", "password": "secret123"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alice"

    @pytest.mark.asyncio
    async def test_wrong_password_is_401(self, client):
        await signup(client, "alice", "secret123")

        response = await client.post(
            "/api/auth/login", json={"username": "alice", "password": "wrong-one"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "AUTH_003"

    @pytest.mark.asyncio
    async def test_unknown_user_is_401(self, client):
        response = await client.post(
            "/api/auth/login", json={"username": "nobody", "password": "secret123"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_overlong_password_is_401_not_validation_error(self, client):
        await signup(client, "alice", "x" * 72)

        response = await client.post(
            "/api/auth/login", json={"username": "alice", "password": "x" * 80}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "AUTH_003"


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_me_returns_profile(self, client):
        data = await signup(client, "alice")

        response = await client.get("/api/auth/me", headers=bearer(data["token"]))

        assert response.status_code == 200
        assert response.json()["id"] == data["user"]["id"]
        assert "created_at" in response.json()

    @pytest.mark.asyncio
    async def test_missing_token_is_401(self, client):
        response = await client.get("/api/boards")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_garbage_token_is_401(self, client):
        response = await client.get("/api/boards", headers=bearer("not-a-jwt"))

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_for_vanished_user_is_401_user_not_found(self, client):
        token = create_user_token(str(uuid.uuid4()))

        response = await client.get("/api/auth/me", headers=bearer(token))

        assert response.status_code == 401
        assert response.json()["error"] == "AUTH_004"


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
