"""Tests for the SQLAlchemy persistence gateway."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.errors import NotFoundOrForbidden, PersistenceFailure
from src.store.gateway import SqlAlchemyGateway


@pytest.mark.asyncio
async def test_insert_assigns_id_and_timestamps(gateway: SqlAlchemyGateway) -> None:
    row = await gateway.insert("clients", {"user_id": "user-1", "name": "Acme"})

    assert row["id"]
    assert row["created_at"] is not None
    assert row["updated_at"] is not None
    assert row["name"] == "Acme"


@pytest.mark.asyncio
async def test_list_is_owner_scoped(gateway: SqlAlchemyGateway) -> None:
    await gateway.insert("clients", {"user_id": "user-1", "name": "Mine"})
    await gateway.insert("clients", {"user_id": "user-2", "name": "Theirs"})

    rows = await gateway.list("clients", "user-1")

    assert [row["name"] for row in rows] == ["Mine"]


@pytest.mark.asyncio
async def test_list_newest_first_with_limit(gateway: SqlAlchemyGateway) -> None:
    for index in range(3):
        await gateway.insert(
            "audit_log",
            {
                "user_id": "user-1",
                "record_id": f"r{index}",
                "table_name": "panels",
                "action": "CREATE",
            },
        )

    rows = await gateway.list("audit_log", "user-1", newest_first=True, limit=2)

    assert [row["record_id"] for row in rows] == ["r2", "r1"]


@pytest.mark.asyncio
async def test_update_and_delete_require_owner(gateway: SqlAlchemyGateway) -> None:
    row = await gateway.insert("clients", {"user_id": "user-1", "name": "Acme"})

    with pytest.raises(NotFoundOrForbidden):
        await gateway.update("clients", row["id"], "user-2", {"name": "Stolen"})
    with pytest.raises(NotFoundOrForbidden):
        await gateway.delete("clients", row["id"], "user-2")

    updated = await gateway.update("clients", row["id"], "user-1", {"name": "Acme Ltd"})
    assert updated["name"] == "Acme Ltd"

    await gateway.delete("clients", row["id"], "user-1")
    assert await gateway.list("clients", "user-1") == []


@pytest.mark.asyncio
async def test_delete_cascades_in_database(gateway: SqlAlchemyGateway) -> None:
    client = await gateway.insert("clients", {"user_id": "user-1", "name": "Acme"})
    project = await gateway.insert(
        "projects",
        {
            "user_id": "user-1",
            "client_id": client["id"],
            "title": "Site",
            "total_amount": Decimal("100.00"),
            "start_date": date(2024, 1, 1),
            "due_date": date(2024, 2, 1),
        },
    )
    await gateway.insert(
        "payments",
        {
            "user_id": "user-1",
            "project_id": project["id"],
            "client_id": client["id"],
            "amount": Decimal("10.00"),
            "payment_date": date(2024, 1, 5),
        },
    )

    await gateway.delete("clients", client["id"], "user-1")

    assert await gateway.list("projects", "user-1") == []
    assert await gateway.list("payments", "user-1") == []


@pytest.mark.asyncio
async def test_constraint_violation_is_persistence_failure(
    gateway: SqlAlchemyGateway,
) -> None:
    with pytest.raises(PersistenceFailure) as exc_info:
        await gateway.insert(
            "projects",
            {
                "user_id": "user-1",
                "client_id": "missing-client",
                "title": "Orphan",
                "total_amount": Decimal("1.00"),
                "start_date": date(2024, 1, 1),
                "due_date": date(2024, 1, 2),
            },
        )
    assert exc_info.value.table == "projects"
    assert not isinstance(exc_info.value, NotFoundOrForbidden)


@pytest.mark.asyncio
async def test_unknown_table(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    gateway = SqlAlchemyGateway(session_factory)
    with pytest.raises(ValueError, match="Unknown table"):
        await gateway.list("invoices", "user-1")
