"""Owner-scoped persistence gateway over SQLAlchemy.

Every call opens one session, runs in one transaction and returns plain
dict rows, so callers never hold ORM instances across awaits.
"""

from __future__ import annotations

from typing import Any, Protocol

from sqlalchemy import delete, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.errors import NotFoundOrForbidden, PersistenceFailure
from src.core.logging import get_logger
from src.models import (
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

logger = get_logger(__name__)

Row = dict[str, Any]

# table name -> (model, owner column)
TABLES: dict[str, tuple[type[Base], str]] = {
    "clients": (Client, "user_id"),
    "projects": (Project, "user_id"),
    "payments": (Payment, "user_id"),
    "payment_methods": (PaymentMethod, "user_id"),
    "business_profiles": (BusinessProfile, "user_id"),
    "panels": (Panel, "admin_user_id"),
    "panel_users": (PanelUser, "admin_user_id"),
    "panel3_credentials": (Panel3Credential, "admin_user_id"),
    "campaign_reports": (CampaignReport, "admin_user_id"),
    "audit_log": (AuditLog, "user_id"),
}


class PersistenceGateway(Protocol):
    """The remote store as seen by the in-memory stores."""

    async def list(
        self,
        table: str,
        owner_id: str,
        *,
        newest_first: bool = False,
        limit: int | None = None,
    ) -> list[Row]: ...

    async def insert(self, table: str, row: Row) -> Row: ...

    async def update(
        self, table: str, record_id: str, owner_id: str, patch: Row
    ) -> Row: ...

    async def delete(self, table: str, record_id: str, owner_id: str) -> None: ...


def _resolve(table: str) -> tuple[type[Base], Any]:
    try:
        model, owner_column = TABLES[table]
    except KeyError:
        raise ValueError(f"Unknown table: {table}") from None
    return model, getattr(model, owner_column)


def _to_row(instance: Base) -> Row:
    """Copy mapped column values off an ORM instance."""
    mapper = inspect(instance).mapper
    return {attr.key: getattr(instance, attr.key) for attr in mapper.column_attrs}


def _order_column(model: type[Base]) -> Any:
    if hasattr(model, "timestamp"):
        return model.timestamp
    return model.created_at


class SqlAlchemyGateway:
    """PersistenceGateway backed by an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize gateway.

        Args:
            session_factory: Factory producing one session per round trip.
        """
        self._session_factory = session_factory

    async def list(
        self,
        table: str,
        owner_id: str,
        *,
        newest_first: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        """Select every row owned by owner_id, oldest first by default."""
        model, owner = _resolve(table)
        order = _order_column(model)
        stmt = select(model).where(owner == owner_id)
        stmt = stmt.order_by(order.desc() if newest_first else order.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [_to_row(instance) for instance in result.scalars().all()]
        except SQLAlchemyError as exc:
            logger.exception("gateway_list_failed", table=table, error=str(exc))
            raise PersistenceFailure(str(exc), table=table) from exc

    async def insert(self, table: str, row: Row) -> Row:
        """Insert a row; the database assigns id and timestamps."""
        model, _ = _resolve(table)
        try:
            async with self._session_factory() as session, session.begin():
                instance = model(**row)
                session.add(instance)
                await session.flush()
                return _to_row(instance)
        except SQLAlchemyError as exc:
            logger.exception("gateway_insert_failed", table=table, error=str(exc))
            raise PersistenceFailure(str(exc), table=table) from exc

    async def update(
        self, table: str, record_id: str, owner_id: str, patch: Row
    ) -> Row:
        """Apply patch to the row matching id and owner and return it.

        Raises:
            NotFoundOrForbidden: If no row matches both id and owner.
        """
        model, owner = _resolve(table)
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    select(model).where(model.id == record_id, owner == owner_id)
                )
                instance = result.scalar_one_or_none()
                if instance is None:
                    raise NotFoundOrForbidden(table, record_id)
                for key, value in patch.items():
                    setattr(instance, key, value)
                await session.flush()
                return _to_row(instance)
        except SQLAlchemyError as exc:
            logger.exception(
                "gateway_update_failed", table=table, record_id=record_id, error=str(exc)
            )
            raise PersistenceFailure(str(exc), table=table) from exc

    async def delete(self, table: str, record_id: str, owner_id: str) -> None:
        """Delete the row matching id and owner. Dependents cascade in the DB.

        Raises:
            NotFoundOrForbidden: If no row matches both id and owner.
        """
        model, owner = _resolve(table)
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    delete(model).where(model.id == record_id, owner == owner_id)
                )
                if result.rowcount == 0:
                    raise NotFoundOrForbidden(table, record_id)
        except SQLAlchemyError as exc:
            logger.exception(
                "gateway_delete_failed", table=table, record_id=record_id, error=str(exc)
            )
            raise PersistenceFailure(str(exc), table=table) from exc
