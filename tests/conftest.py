"""Test fixtures for the URL shortener application."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from app.core.config import Settings
from app.db.base import Database
from app.main import create_app
# Import models to ensure they're registered with SQLModel metadata
from app.models.url import UrlRecord, UrlCounter  # noqa: F401
from app.repositories.url_repository import URLRepository
from app.services.shortener import ShortenerService
from app.services.validator import URLValidator
from tests.utils import FakeResolver, UNRESOLVABLE_HOST


# Test database URL - using SQLite in-memory
TEST_SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an isolated test application."""
    return Settings(
        ENVIRONMENT="testing",
        DEBUG=True,
        DATABASE_URL=TEST_SQLALCHEMY_DATABASE_URL,
        LOG_TO_FILE=False,
        DNS_VALIDATION_ENABLED=False,
    )


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine with in-memory SQLite."""
    engine = create_async_engine(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def test_database(test_engine) -> Database:
    return Database(test_engine)


@pytest_asyncio.fixture
async def test_db(test_database) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session bound to the test engine."""
    async with test_database.session() as session:
        yield session


@pytest.fixture
def fake_resolver() -> FakeResolver:
    return FakeResolver(unresolvable={UNRESOLVABLE_HOST})


@pytest.fixture
def url_validator(fake_resolver) -> URLValidator:
    return URLValidator(resolver=fake_resolver)


@pytest.fixture
def url_repository() -> URLRepository:
    """Return URL repository instance."""
    return URLRepository()


@pytest.fixture
def shortener_service(url_repository, url_validator) -> ShortenerService:
    return ShortenerService(url_repository=url_repository, validator=url_validator)


@pytest.fixture
def test_app(test_settings, test_database, url_validator) -> FastAPI:
    """Create FastAPI test app wired to the in-memory database."""
    return create_app(
        settings=test_settings,
        database=test_database,
        validator=url_validator,
    )


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Return an HTTP client talking to the test app in-process."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client
