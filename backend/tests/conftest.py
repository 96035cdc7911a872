"""
Pytest Configuration and Shared Fixtures

Tests run against an in-memory SQLite database with the real ORM models.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-brandtrack")

from typing import Any, Dict, List

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from brandtrack.models import Base, User


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
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
async def db_session(engine):
    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_maker() as session:
        yield session


@pytest.fixture
async def user(db_session) -> User:
    user = User(email="owner@example.com", full_name="Test Owner")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
async def other_user(db_session) -> User:
    user = User(email="someone-else@example.com", full_name="Other User")
    db_session.add(user)
    await db_session.commit()
    return user


# ============================================================================
# API
# ============================================================================

@pytest.fixture
async def app(db_session):
    """App with the database dependency bound to the test session."""
    from brandtrack.main import app
    from brandtrack.utils import get_db

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app, user):
    """Client authenticated as `user`."""
    from brandtrack.api.middleware.auth import get_current_user

    async def override_current_user():
        return user

    app.dependency_overrides[get_current_user] = override_current_user
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def anonymous_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================================================
# Analysis data
# ============================================================================

@pytest.fixture
def acme_competitors() -> List[Dict[str, Any]]:
    """Acme (own brand) and two rivals over 10 responses."""
    return [
        {
            "name": "Acme", "isOwn": True, "mentions": 6, "visibilityScore": 60,
            "shareOfVoice": 50, "sentiment": "positive", "averagePosition": 2,
        },
        {
            "name": "Rival1", "mentions": 3, "visibilityScore": 30,
            "shareOfVoice": 30, "sentiment": "neutral", "averagePosition": 5,
        },
        {
            "name": "Rival2", "mentions": 1, "visibilityScore": 10,
            "shareOfVoice": 20, "sentiment": "negative", "averagePosition": 8,
        },
    ]


@pytest.fixture
def acme_responses() -> List[Dict[str, Any]]:
    """10 responses, the first 6 mention Acme."""
    responses = []
    for i in range(10):
        mentioned = i < 6
        responses.append({
            "provider": "openai" if i % 2 == 0 else "anthropic",
            "prompt": "What are the best project management tools?",
            "response": "Acme leads the pack." if mentioned else "Rival1 is a popular choice.",
            "brandMentioned": mentioned,
            "sentiment": "positive" if mentioned else "neutral",
            "sources": [],
        })
    responses[0]["sources"] = [
        {"url": "https://www.reddit.com/r/pm/comments/1", "title": "PM tools thread"},
        {"url": "https://acme.com/features", "title": "Acme features"},
    ]
    responses[1]["sources"] = [
        {"url": "https://reddit.com/r/pm/comments/2", "title": "Another thread"},
    ]
    return responses


@pytest.fixture
def acme_analysis(acme_competitors, acme_responses) -> Dict[str, Any]:
    return {"competitors": acme_competitors, "responses": acme_responses}
