"""
Shared fixtures.

The API runs in-process against a fresh in-memory SQLite database per test.
Settings are read once at import, so the environment is set before any
thoughtboard import.
"""
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-1234"
os.environ["DEBUG"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RATE_LIMIT_USE_REDIS"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LOG_TO_FILE"] = "false"

import pytest_asyncio
from httpx import AsyncClient, ASGITransport


@pytest_asyncio.fixture
async def client():
    """
    HTTPX AsyncClient wired straight to the FastAPI app.

    ASGITransport does not run the lifespan, so the schema is created here.
    Disposing the engine drops the in-memory database between tests.
    """
    from thoughtboard.main import app
    from thoughtboard.database import init_db, dispose_engine

    await init_db()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    await dispose_engine()


async def signup(client: AsyncClient, username: str, password: str = "secret123") -> dict:
    response = await client.post(
        "/api/auth/signup", json={"username": username, "password": password}
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def alice(client):
    data = await signup(client, "alice")
    return {"user": data["user"], "headers": bearer(data["token"])}


@pytest_asyncio.fixture
async def bob(client):
    data = await signup(client, "bob")
    return {"user": data["user"], "headers": bearer(data["token"])}
