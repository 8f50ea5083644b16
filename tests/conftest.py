"""Test fixtures for the store locator API.

Each test gets a fresh in-memory SQLite database; the app's ``get_session``
dependency is overridden to use it. Session tokens are minted as HS256
Supabase JWTs signed with the configured test secret.
"""

import os
import time
from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Ensure tests use SQLite and a known JWT secret
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("SUPABASE_PROJECT_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-for-store-locator")
os.environ.setdefault("CORS_ORIGINS", "*")

from app.core.config import settings  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import get_session  # noqa: E402
from app.main import create_app  # noqa: E402


def make_token(sub: str, **overrides: Any) -> str:
    payload = {
        "sub": sub,
        "email": f"{sub}@example.com",
        "aud": settings.supabase_jwt_audience,
        "iss": settings.jwt_issuer,
        "exp": int(time.time()) + 3600,
    }
    payload.update(overrides)
    return jwt.encode(payload, settings.supabase_jwt_secret, algorithm="HS256")


def auth_for(sub: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub)}"}


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def app(session_factory: async_sessionmaker[AsyncSession]) -> Any:
    app = create_app()

    async def _get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    return app


@pytest.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def auth() -> Callable[[str], dict[str, str]]:
    return auth_for


@pytest.fixture
async def brand(client: AsyncClient) -> dict[str, Any]:
    """Brand "Acme" owned by user_u."""
    resp = await client.post("/brands", json={"name": "Acme"}, headers=auth_for("user_u"))
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture
def token_factory() -> Callable[..., str]:
    return make_token
