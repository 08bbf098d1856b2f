"""
Pytest configuration and fixtures for dashboard API tests.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app import models  # noqa: F401
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models import ChartConfiguration, Partner, Project


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    """Create a test database engine backed by a per-test SQLite file."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        connect_args={"timeout": 30},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory for tests that need several independent sessions."""
    return async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def seed_projects(db_session) -> list[Project]:
    """Three projects and a partner with overlapping hashtags."""
    projects = [
        Project(
            id="p-1",
            event_name="Home Opener",
            event_date="2024-03-01",
            hashtags=["vip", "Summer"],
            categorized_hashtags={"sponsor": ["acme"], "country": ["hu"]},
            stats={"female": 10, "male": 20, "note": "n/a"},
        ),
        Project(
            id="p-2",
            event_name="Cup Final",
            event_date="2024-05-12",
            hashtags=["vip", "vip", "#Final"],
            categorized_hashtags={"sponsor": ["acme"]},
            stats={"female": 5, "male": 7},
        ),
        Project(
            id="p-3",
            event_name="Friendly",
            event_date="2024-01-20",
            hashtags="summer, friendly",
            categorized_hashtags={"country": ["hu", "at"]},
            stats={"female": 1},
        ),
    ]
    db_session.add_all(projects)
    db_session.add(Partner(id="partner-1", name="Acme Corp", hashtags=["acme"], categorized_hashtags={}))
    await db_session.flush()
    return projects


@pytest_asyncio.fixture
async def seed_charts(db_session) -> list[ChartConfiguration]:
    """Charts referencing the ``logo`` asset in several ways."""
    charts = [
        ChartConfiguration(
            chart_id="hero",
            title="Hero",
            type="image",
            order=1,
            elements=[
                {"label": "Logo", "formula": "[MEDIA:logo]"},
                {"label": "Both", "formula": "[MEDIA:logo][TEXT:logo]"},
                {"label": "Other", "formula": "[TEXT:intro]"},
            ],
        ),
        ChartConfiguration(
            chart_id="broken",
            title="Broken",
            type="kpi",
            order=2,
            elements="not a list",
        ),
        ChartConfiguration(
            chart_id="mixed",
            title="Mixed",
            type="text",
            order=3,
            elements=[None, {"label": "No formula"}, {"formula": 42}, {"formula": "Total [MEDIA:logo] fans"}],
        ),
    ]
    db_session.add_all(charts)
    await db_session.flush()
    return charts


@pytest.fixture
def sample_asset_data() -> dict[str, Any]:
    """Sample content asset payload."""
    return {
        "title": "Partner Logo",
        "type": "image",
        "content": {"url": "https://cdn.example.com/logo.png"},
        "category": "Partners",
        "tags": ["partner", "logo"],
    }
