"""Shared fixtures: in-memory SQLite session, default account, API client."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import tracker.models  # noqa: F401
from tracker.models.account import Account
from tracker.models.base import Base


@pytest.fixture
async def session():
    """Independent in-memory database per test."""
    engine = create_async_engine("sqlite+aiosqlite://", echo=False)

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragmas(dbapi_conn, _):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as sess:
        yield sess

    await engine.dispose()


@pytest.fixture
async def account(session: AsyncSession) -> Account:
    acc = Account(name="test", portfolio_name="Test Portfolio", base_currency="EUR")
    session.add(acc)
    await session.commit()
    return acc


@pytest.fixture
async def client(session: AsyncSession, account: Account):
    """API client bound to the test session; the lifespan (scheduler, file DB) is not started."""
    from tracker.database import get_session
    from tracker.main import create_app

    app = create_app()

    async def _session_override():
        yield session

    app.dependency_overrides[get_session] = _session_override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as api_client:
        yield api_client
