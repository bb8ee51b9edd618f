"""Shared fixtures: an in-memory SQLite database per test and an HTTP client bound to it."""

import os

# The application engine is built at import time; keep it off Postgres.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from db.database import build_engine, create_db_and_tables, get_async_session
from main import app

USER_HEADERS = {"X-User-Id": "alice", "X-User-Roles": "USER"}
OTHER_USER_HEADERS = {"X-User-Id": "bob", "X-User-Roles": "ROLE_USER"}
ADMIN_HEADERS = {"X-User-Id": "root", "X-User-Roles": "USER,ADMIN"}


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """One private in-memory database, shared by every session of the test."""
    engine = build_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await create_db_and_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as db_session:
        yield db_session
        if db_session.in_transaction():
            await db_session.rollback()


@pytest_asyncio.fixture
async def api_client(engine: AsyncEngine) -> AsyncIterator[AsyncClient]:
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async def _override_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as db_session:
            yield db_session

    app.dependency_overrides.clear()
    app.dependency_overrides[get_async_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def user_headers() -> dict:
    return dict(USER_HEADERS)


@pytest.fixture
def other_user_headers() -> dict:
    return dict(OTHER_USER_HEADERS)


@pytest.fixture
def admin_headers() -> dict:
    return dict(ADMIN_HEADERS)
