"""Shared pytest fixtures for all test suites."""

import os
import uuid
from collections.abc import AsyncGenerator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from backend.app.config import Settings
from backend.app.db.context import RequestContext
from backend.app.db.engine import create_session_factory
from backend.app.db.models import Base
from backend.app.llm.client import DeterministicStubClient, ExtractionClient
from backend.app.main import create_app
from backend.app.services import AppServices
from backend.app.storage.inmemory import InMemoryObjectStore
from backend.app.storage.signing import UrlSigner
from tests.doubles import RecordingEmailSender

OWNER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
OTHER_OWNER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000ff")


@pytest.fixture
def ctx() -> RequestContext:
    """Request context for the default test owner."""
    return RequestContext(user_id=OWNER_ID)


@pytest.fixture
def other_ctx() -> RequestContext:
    """Request context for a second, unrelated owner."""
    return RequestContext(user_id=OTHER_OWNER_ID)


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine with the schema created.

    A file (not :memory:) so the worker's separate sessions see the same data.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """One session for direct data-layer tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage() -> InMemoryObjectStore:
    """Empty in-memory object store."""
    return InMemoryObjectStore()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    """Email sender that records deliveries."""
    return RecordingEmailSender()


@pytest.fixture
def extraction_client() -> ExtractionClient:
    """Default extraction client; tests override it for failure paths."""
    return DeterministicStubClient()


@pytest.fixture
def services(
    engine: AsyncEngine,
    session_factory: async_sessionmaker[AsyncSession],
    storage: InMemoryObjectStore,
    extraction_client: ExtractionClient,
    email_sender: RecordingEmailSender,
) -> AppServices:
    """Service container wired to test doubles."""
    settings = Settings(
        _env_file=None,  # type: ignore[call-arg]
        database_url=str(engine.url),
        storage_signing_secret=SecretStr("test-secret"),
    )
    return AppServices(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        storage=storage,
        signer=UrlSigner("test-secret", ttl_seconds=60),
        extraction_client=extraction_client,
        email_sender=email_sender,
    )


@pytest.fixture
def app(services: AppServices) -> FastAPI:
    """Application using the test service container."""
    return create_app(services)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async HTTP client speaking ASGI directly to the app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine for PostgreSQL integration tests.

    Requires TEST_POSTGRES_URL to be set to a real PostgreSQL connection string.
    Tests using this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("TEST_POSTGRES_URL")
    if not database_url:
        pytest.skip("TEST_POSTGRES_URL not set - skipping postgres test")

    # Convert to async driver if needed
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup: drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
