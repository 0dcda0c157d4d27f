"""Pytest configuration and shared fixtures for tests."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.campaign.store import CampaignStore  # noqa: E402
from src.core.database import create_engine, create_schema, create_session_factory  # noqa: E402
from src.main import app  # noqa: E402
from src.store.entities import ClientCreate, ProjectCreate  # noqa: E402
from src.store.freelancer import FreelancerStore  # noqa: E402
from src.store.gateway import SqlAlchemyGateway  # noqa: E402
from src.store.registry import StoreRegistry  # noqa: E402
from src.store.session import SessionProvider  # noqa: E402

USER_ID = "user-1"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests.

    Returns:
        Backend name string.
    """
    return "asyncio"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory sqlite engine with the full schema created."""
    engine = create_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await create_schema(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
def gateway(session_factory: async_sessionmaker[AsyncSession]) -> SqlAlchemyGateway:
    return SqlAlchemyGateway(session_factory)


@pytest.fixture
def session() -> SessionProvider:
    return SessionProvider()


@pytest_asyncio.fixture
async def store(gateway: SqlAlchemyGateway, session: SessionProvider) -> FreelancerStore:
    """Freelancer store signed in as USER_ID."""
    store = FreelancerStore(gateway, session)
    await session.sign_in(USER_ID)
    return store


@pytest_asyncio.fixture
async def campaign_store(gateway: SqlAlchemyGateway, session: SessionProvider) -> CampaignStore:
    """Campaign store signed in as USER_ID."""
    store = CampaignStore(gateway, session, audit_log_limit=5)
    await session.sign_in(USER_ID)
    return store


@pytest_asyncio.fixture
async def seeded(store: FreelancerStore) -> dict[str, str]:
    """One client with a 1000.00 project due 2024-03-31 and no payments."""
    client = await store.add_client(ClientCreate(name="Acme Ltd", email="ap@acme.test"))
    project = await store.add_project(
        ProjectCreate(
            client_id=client.id,
            title="Website redesign",
            total_amount=Decimal("1000.00"),
            start_date=date(2024, 3, 1),
            due_date=date(2024, 3, 31),
        )
    )
    return {"client_id": client.id, "project_id": project.id}


@pytest_asyncio.fixture
async def api_client(
    gateway: SqlAlchemyGateway,
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """API client authenticated as USER_ID against the sqlite engine."""
    app.state.async_session = session_factory
    app.state.stores = StoreRegistry(gateway, audit_log_limit=50)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-User-Id": USER_ID},
    ) as client:
        yield client
    app.dependency_overrides.clear()
