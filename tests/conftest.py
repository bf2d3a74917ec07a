"""Pytest configuration and fixtures for the SecureBoot dashboard.

Uses secureboot.main:app for HTTP tests. Repository and API tests run on an
in-memory SQLite database (aiosqlite); the app's session dependencies are
overridden to use it.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import UTC, datetime
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from secureboot.domain.entities.facts import CertificateFacts, FactBundle
from secureboot.infrastructure.persistence import models  # noqa: F401
from secureboot.infrastructure.persistence.database import (
    Base,
    get_db,
    get_db_transactional,
)
from secureboot.main import app

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time used as evaluated_at in unit tests."""
    return NOW


@pytest.fixture
def make_facts():
    """Factory for FactBundle with sensible defaults; override any field."""

    def _make(**overrides: Any) -> FactBundle:
        values: dict[str, Any] = {
            "device_id": "device-1",
            "machine_name": "PC-001",
            "fleet_id": "test-fleet",
            "manufacturer": "Contoso",
            "model": "Surface 9",
            "last_seen_at": NOW,
            "report_id": "report-1",
            "deployment_state": "Error",
            "alerts": (),
            "evaluated_at": NOW,
            "days_since_last_seen": 0,
            "certificates": CertificateFacts(available=False),
        }
        values.update(overrides)
        return FactBundle(**values)

    return _make


@pytest.fixture
async def session_factory():
    """Session factory bound to a fresh in-memory database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    yield factory
    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(session_factory) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) on the test database."""

    async def _get_db():
        async with session_factory() as session:
            yield session

    async def _get_db_transactional():
        async with session_factory() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_db_transactional] = _get_db_transactional
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
