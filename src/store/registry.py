"""Per-identity workspaces for the HTTP layer.

Each identity gets its own session provider and stores, built on first use.
Workspaces are kept in a bounded least-recently-used cache; writes from
other processes are not seen until the workspace is reloaded.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from dataclasses import dataclass

from src.campaign.store import CampaignStore
from src.core.logging import get_logger
from src.store.freelancer import FreelancerStore
from src.store.gateway import PersistenceGateway
from src.store.session import SessionProvider

logger = get_logger(__name__)

DEFAULT_MAX_WORKSPACES = 500


@dataclass
class Workspace:
    """Everything bound to one signed-in identity."""

    session: SessionProvider
    freelancer: FreelancerStore
    campaign: CampaignStore

    async def reload(self) -> None:
        """Re-read both stores from the gateway."""
        await self.freelancer.load_all()
        await self.campaign.load_all()

    def close(self) -> None:
        self.freelancer.close()
        self.campaign.close()


class StoreRegistry:
    """Creates and caches one Workspace per identity.

    Concurrent first requests for the same identity share a single build.
    When the cache is full the least recently used workspace is dropped;
    its stores stay usable for requests already holding them.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        audit_log_limit: int = 50,
        max_workspaces: int = DEFAULT_MAX_WORKSPACES,
    ) -> None:
        self._gateway = gateway
        self._audit_log_limit = audit_log_limit
        self._max_workspaces = max_workspaces
        self._workspaces: OrderedDict[str, Workspace] = OrderedDict()
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._workspaces)

    def __contains__(self, identity: str) -> bool:
        return identity in self._workspaces

    async def get(self, identity: str) -> Workspace:
        """Return the identity's workspace, loading it on first access.

        A workspace whose initial load fails is not cached, so the next
        request tries again.
        """
        workspace = self._cached(identity)
        if workspace is not None:
            return workspace

        lock = self._locks.setdefault(identity, asyncio.Lock())
        async with lock:
            workspace = self._cached(identity)
            if workspace is None:
                workspace = await self._build(identity)
                self._store(identity, workspace)
        # waiters still holding this lock find the cached workspace
        self._locks.pop(identity, None)
        return workspace

    async def evict(self, identity: str) -> bool:
        """Sign the identity out and drop its workspace.

        Returns:
            False if no workspace was cached for the identity.
        """
        workspace = self._workspaces.pop(identity, None)
        if workspace is None:
            return False
        await workspace.session.sign_out()
        workspace.close()
        logger.info("workspace_evicted", user_id=identity)
        return True

    def _cached(self, identity: str) -> Workspace | None:
        workspace = self._workspaces.get(identity)
        if workspace is not None:
            self._workspaces.move_to_end(identity)
        return workspace

    async def _build(self, identity: str) -> Workspace:
        session = SessionProvider()
        workspace = Workspace(
            session=session,
            freelancer=FreelancerStore(self._gateway, session),
            campaign=CampaignStore(
                self._gateway, session, audit_log_limit=self._audit_log_limit
            ),
        )
        # binding the identity triggers load_all on both stores
        try:
            await session.sign_in(identity)
        except Exception:
            workspace.close()
            raise
        logger.info("workspace_created", user_id=identity)
        return workspace

    def _store(self, identity: str, workspace: Workspace) -> None:
        self._workspaces[identity] = workspace
        while len(self._workspaces) > self._max_workspaces:
            stale_identity, stale = self._workspaces.popitem(last=False)
            stale.close()
            logger.info("workspace_dropped", user_id=stale_identity)
