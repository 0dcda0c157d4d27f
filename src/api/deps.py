"""FastAPI dependency injection for database and store access."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.campaign.store import CampaignStore
from src.core.errors import AuthenticationRequired
from src.core.logging import user_id_ctx
from src.store.freelancer import FreelancerStore
from src.store.registry import StoreRegistry, Workspace


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session from the app's session factory.

    Args:
        request: FastAPI request containing app state.

    Yields:
        AsyncSession for database operations with automatic commit/rollback.
    """
    async with request.app.state.async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_registry(request: Request) -> StoreRegistry:
    """Get the per-identity store registry from app state."""
    return request.app.state.stores


async def get_current_user_id(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
) -> str:
    """Resolve the caller's identity.

    The identity is asserted by the upstream auth proxy in X-User-Id.

    Raises:
        AuthenticationRequired: If the header is missing or blank.
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise AuthenticationRequired()
    user_id_ctx.set(user_id)
    return user_id


async def get_workspace(
    user_id: Annotated[str, Depends(get_current_user_id)],
    registry: Annotated[StoreRegistry, Depends(get_registry)],
) -> Workspace:
    return await registry.get(user_id)


async def get_freelancer_store(
    workspace: Annotated[Workspace, Depends(get_workspace)],
) -> FreelancerStore:
    return workspace.freelancer


async def get_campaign_store(
    workspace: Annotated[Workspace, Depends(get_workspace)],
) -> CampaignStore:
    return workspace.campaign


StoreDep = Annotated[FreelancerStore, Depends(get_freelancer_store)]
CampaignDep = Annotated[CampaignStore, Depends(get_campaign_store)]
