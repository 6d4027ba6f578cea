"""Pytest configuration and fixtures."""

import os

# Settings are read at import time; required values must exist first
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-google-client-id")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ.setdefault("ENVIRONMENT", "development")

import json
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.deps import create_access_token
from app.db.base import Base
from app.db.models import User
from app.db.session import get_db
from app.main import app
from app.services.llm_client import llm_client


@pytest.fixture
async def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and inspecting data directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints against the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


async def _make_user(db_session: AsyncSession, email: str, name: str, **fields) -> User:
    user = User(email=email, name=name, preferences={}, **fields)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def user(db_session) -> User:
    return await _make_user(db_session, "alex@example.com", "Alex", timezone="America/New_York")


@pytest.fixture
async def other_user(db_session) -> User:
    return await _make_user(db_session, "sam@example.com", "Sam")


@pytest.fixture
def auth_headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def other_auth_headers(other_user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}


@pytest.fixture
def mock_llm():
    """
    Patch the LLM client. Set `mock_llm.return_value` (or side_effect) per test.

    By default every call answers "Other", which also serves shopping categorization.
    """
    with patch.object(llm_client, "complete", new_callable=AsyncMock) as mocked:
        mocked.return_value = "Other"
        yield mocked


def _llm_reply(content: str, actions: list | None = None, suggestions: list | None = None) -> str:
    payload = {"content": content, "actions": actions or []}
    if suggestions is not None:
        payload["suggestions"] = suggestions
    return json.dumps(payload)


@pytest.fixture
def llm_reply():
    """Builds JSON reply text as the assistant model would produce it."""
    return _llm_reply
