"""Write-through plumbing shared by the freelancer and campaign stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, TypeVar

from src.core.errors import AuthenticationRequired
from src.core.logging import get_logger
from src.models.base import utcnow
from src.store.entities import Record
from src.store.gateway import PersistenceGateway
from src.store.session import SessionProvider

logger = get_logger(__name__)

R = TypeVar("R", bound=Record)


def replace_record(records: Iterable[R], record_type: type[R], row: dict[str, Any]) -> list[R]:
    """Return records with the one matching row["id"] merged with row.

    Fields missing from row keep their prior value. A row for a record not
    yet mirrored is appended.
    """
    updated: list[R] = []
    found = False
    for record in records:
        if record.id == row["id"]:
            updated.append(record_type.model_validate({**record.model_dump(), **row}))
            found = True
        else:
            updated.append(record)
    if not found:
        updated.append(record_type.model_validate(row))
    return updated


class WriteThroughStore(ABC):
    """Base for stores whose mutators hit the gateway before memory.

    Subclasses own their collections; this class only provides identity
    checks and the gateway round trips. Nothing here touches memory, so a
    failed round trip leaves the mirror unchanged.
    """

    owner_field = "user_id"
    """Row column that carries the owner's identity."""

    def __init__(self, gateway: PersistenceGateway, session: SessionProvider) -> None:
        self._gateway = gateway
        self._session = session
        self.loading = False
        self._unsubscribe = session.subscribe(self._on_identity_change)

    @property
    def identity(self) -> str | None:
        return self._session.current_identity

    def close(self) -> None:
        """Stop following identity changes."""
        self._unsubscribe()

    async def _on_identity_change(self, _identity: str | None) -> None:
        await self.load_all()

    @abstractmethod
    async def load_all(self) -> None:
        """Replace every mirrored collection for the bound identity."""

    def _require_identity(self, operation: str) -> str:
        identity = self._session.current_identity
        if identity is None:
            logger.warning("mutation_without_identity", operation=operation)
            raise AuthenticationRequired()
        return identity

    async def _insert(
        self, table: str, record_type: type[R], values: dict[str, Any]
    ) -> R:
        owner = self._require_identity(f"insert:{table}")
        row = await self._gateway.insert(table, {**values, self.owner_field: owner})
        return record_type.model_validate(row)

    async def _update(
        self, table: str, record_id: str, values: dict[str, Any], *, stamp: bool = True
    ) -> dict[str, Any]:
        owner = self._require_identity(f"update:{table}")
        if stamp:
            values = {**values, "updated_at": utcnow()}
        return await self._gateway.update(table, record_id, owner, values)

    async def _delete(self, table: str, record_id: str) -> None:
        owner = self._require_identity(f"delete:{table}")
        await self._gateway.delete(table, record_id, owner)
