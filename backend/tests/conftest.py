"""
CBC Exams Backend: Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Service and route tests run against an in-memory SQLite database
       (aiosqlite + StaticPool, schema from Base.metadata). Route tests talk
       to the app through HTTPX's ASGITransport with the session and cache
       dependencies overridden; the lifespan does not run.

Fixture Hierarchy:
    ├── db_engine:        In-memory async engine with all tables created
    ├── db_session:       AsyncSession bound to db_engine
    ├── mock_db_session:  AsyncMock session for failure paths
    ├── clock / result_cache: ResultCache driven by a controllable clock
    ├── seeded_resources: A small crawled catalog
    └── test_client:      HTTPX AsyncClient wired to the overrides above
"""

import os

# Settings are read at import time; set these BEFORE any cbcexams import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta, timezone
from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cbcexams.config import settings
from cbcexams.database import Base, get_db_session
from cbcexams.models.feedback import Feedback  # noqa: F401
from cbcexams.models.resource import WebCrawlerResource
from cbcexams.services.result_cache import ResultCache, get_result_cache

PREFIX = settings.directory_prefix
BASE_TIME = datetime(2024, 5, 1, 8, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_resource(name: str, directory: str, minutes: int = 0, **extra) -> WebCrawlerResource:
    """Build a crawled resource stored under PREFIX + directory."""
    slug = name.lower().replace(" ", "-")
    return WebCrawlerResource(
        name=name,
        parent_directory=PREFIX + directory if directory is not None else None,
        relative_path=f"{directory}/{slug}.pdf",
        django_relative_path=f"media/{directory}/{slug}.pdf",
        google_drive_download_link=f"https://drive.example.com/{slug}",
        google_cloud_storage_link=f"https://storage.example.com/cbcexams/{slug}.pdf",
        created_at=BASE_TIME + timedelta(minutes=minutes),
        **extra,
    )


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """Fresh in-memory database per test; one shared connection via StaticPool."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = RuntimeError("connection reset")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def seeded_resources(db_session) -> List[WebCrawlerResource]:
    """
    Five resources across three directories plus one stored at the bare prefix.

    Newest first: english notes, maths paper 2, maths paper 1, biology, index.
    """
    resources = [
        make_resource("Grade 9 Mathematics Paper 1", "grade-9/mathematics", minutes=20),
        make_resource("Grade 9 Mathematics Paper 2", "grade-9/mathematics", minutes=30),
        make_resource(
            "Grade 9 English Notes",
            "grade-9/english",
            minutes=40,
            is_extracted=True,
            extracted_content="Comprehension passage about the savannah",
        ),
        make_resource("Form 2 Biology Schemes", "form-2/biology", minutes=10),
        make_resource("Catalog Index", "", minutes=0),
    ]
    db_session.add_all(resources)
    await db_session.commit()
    return resources


# ══════════════════════════════════════════════════════════════════════════
# Cache Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def result_cache(clock):
    return ResultCache(ttl_seconds=60, sweep_interval_seconds=60, clock=clock)


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory, result_cache):
    """FastAPI app with the database session and result cache overridden."""
    from cbcexams.main import create_app

    application = create_app()

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_db_session
    application.dependency_overrides[get_result_cache] = lambda: result_cache
    application.state.result_cache = result_cache
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
