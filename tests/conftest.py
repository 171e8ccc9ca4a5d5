"""
Pytest configuration and fixtures for account service tests.

Provides fixtures for:
- Database session (in-memory SQLite)
- Rate limiter backed by limits in-memory storage
- Workflow client with a recording httpx transport
- Account actions and HTTP test client
"""

import json
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from limits.aio.storage import MemoryStorage
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from account_service.api.routes.auth import (
    get_rate_limiter,
    get_workflow_client,
)
from account_service.config.settings import Settings, get_settings
from account_service.core.auth.credentials import CredentialsAuthProvider
from account_service.core.security import hash_password
from account_service.domain.models import Base, User
from account_service.domain.services.account_actions import AccountActions
from account_service.infrastructure.database.session import get_db
from account_service.infrastructure.ratelimit.limiter import RateLimiter
from account_service.infrastructure.workflow.client import WorkflowClient
from account_service.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_SECRET_KEY = "test-secret-key"


class RecordingTransport(httpx.AsyncBaseTransport):
    """httpx transport that records requests and replies with a fixed status."""

    def __init__(self, status_code: int = 200, payload: dict = None):
        self.status_code = status_code
        self.payload = payload if payload is not None else {"workflowRunId": "wfr_test"}
        self.requests: list[httpx.Request] = []

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)


@pytest.fixture
def settings() -> Settings:
    """Settings pinned for tests."""
    return Settings(
        api_endpoint="http://library.test",
        session_secret_key=TEST_SECRET_KEY,
        rate_limit_requests=5,
        rate_limit_period=60,
        password_hash_rounds=10,
    )


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine with the schema in place."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def existing_user(test_db: AsyncSession) -> User:
    """Create a registered member."""
    user = User(
        full_name="Existing Member",
        email="existing@university.edu",
        university_id=1001,
        password=hash_password("existing-pass-123"),
        university_card="/ids/existing.png",
    )
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest.fixture
def limit_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def rate_limiter(limit_storage: MemoryStorage, settings: Settings) -> RateLimiter:
    """Rate limiter with the production budget over in-memory counters."""
    return RateLimiter(
        limit_storage,
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_period,
    )


@pytest.fixture
def workflow_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def workflow_client(workflow_transport: RecordingTransport) -> WorkflowClient:
    return WorkflowClient(token="wf-token", transport=workflow_transport)


@pytest.fixture
def auth_provider(test_db: AsyncSession) -> CredentialsAuthProvider:
    return CredentialsAuthProvider(session=test_db, secret_key=TEST_SECRET_KEY)


@pytest.fixture
def actions(
    rate_limiter: RateLimiter,
    test_db: AsyncSession,
    auth_provider: CredentialsAuthProvider,
    workflow_client: WorkflowClient,
    settings: Settings,
) -> AccountActions:
    """Account actions wired to test collaborators."""
    return AccountActions(
        rate_limiter=rate_limiter,
        db=test_db,
        auth_provider=auth_provider,
        workflow_client=workflow_client,
        settings=settings,
    )


@pytest_asyncio.fixture
async def client(
    test_db: AsyncSession,
    settings: Settings,
    rate_limiter: RateLimiter,
    workflow_client: WorkflowClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with database, limiter and workflow overrides."""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_workflow_client] = lambda: workflow_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_transport():
    """Factory for recording transports with a chosen status/payload."""
    return RecordingTransport
