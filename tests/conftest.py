"""Pytest configuration and fixtures."""

import os

# Settings are read once at import time; configure the test environment first.
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ALLOWED_HOSTS"] = '["*"]'
os.environ["DISABLE_AUTH"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["EVENT_BUS_TYPE"] = "mock"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.main import app
from src.core.database import Base, get_db_session
from src.models import ArtistStatus

from factories import create_user

# Test database URL (using SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_session():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session):
    """Create a test client with database dependency override."""

    async def get_test_db():
        yield db_session

    app.dependency_overrides[get_db_session] = get_test_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def artist(db_session):
    return await create_user(db_session, "Asha Artist", artist_status=ArtistStatus.APPROVED.value)


@pytest_asyncio.fixture
async def other_artist(db_session):
    return await create_user(db_session, "Bela Artist", artist_status=ArtistStatus.APPROVED.value)


@pytest_asyncio.fixture
async def pending_artist(db_session):
    return await create_user(db_session, "Chandra Hopeful", artist_status=ArtistStatus.REQUESTED.value)


@pytest_asyncio.fixture
async def admin(db_session):
    return await create_user(db_session, "Dev Admin", is_admin=True)


@pytest_asyncio.fixture
async def listener(db_session):
    return await create_user(db_session, "Esha Listener")


@pytest.fixture
def sample_song_data():
    """Sample song write document."""
    return {
        "data": {
            "type": "song",
            "attributes": {
                "title": "Monsoon Nights",
                "lyrics": "Rain on the rooftops",
                "language": "hi",
                "genre": "Indie",
                "audio_key": "uploads/monsoon.mp3",
            }
        }
    }


@pytest.fixture
def sample_album_data():
    """Sample album write document."""
    return {
        "data": {
            "type": "album",
            "attributes": {
                "title": "Seasons",
                "release_type": "album",
                "language": "en",
            }
        }
    }
