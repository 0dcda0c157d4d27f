"""Async database engine factory and session management."""

from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.core.config import settings

# Import all models to register them with Base.metadata
from src.models import (  # noqa: F401
    AuditLog,
    Base,
    BusinessProfile,
    CampaignReport,
    Client,
    Panel,
    Panel3Credential,
    PanelUser,
    Payment,
    PaymentMethod,
    Project,
)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    """Turn on FK enforcement so ON DELETE CASCADE works under SQLite."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(
    database_url: str | None = None,
    **engine_options: Any,
) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Args:
        database_url: Database connection URL. Defaults to settings.database_url.
        **engine_options: Additional options passed to create_async_engine.

    Returns:
        Configured AsyncEngine instance.
    """
    url = database_url or settings.database_url
    is_sqlite = make_url(url).get_backend_name() == "sqlite"

    default_options: dict[str, Any] = {"echo": settings.debug}
    if not is_sqlite:
        default_options.update(
            {
                "pool_size": 20,
                "max_overflow": 0,
                "pool_pre_ping": True,
            }
        )
    default_options.update(engine_options)

    engine = create_async_engine(url, **default_options)
    if is_sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory.

    Args:
        engine: AsyncEngine instance to bind sessions to.

    Returns:
        Configured async_sessionmaker instance.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables. Used by tests and local sqlite setups."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
