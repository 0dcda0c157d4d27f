"""Workspace lifecycle endpoints for the signed-in user."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from src.api.deps import get_current_user_id, get_registry, get_workspace
from src.core.logging import get_logger
from src.store.registry import StoreRegistry, Workspace

logger = get_logger(__name__)

router = APIRouter(prefix="/api/session", tags=["session"])


@router.post("/reload", status_code=status.HTTP_204_NO_CONTENT)
async def reload_workspace(
    workspace: Annotated[Workspace, Depends(get_workspace)],
) -> Response:
    """Re-read the caller's data, picking up writes made elsewhere."""
    await workspace.reload()
    logger.info("workspace_reloaded")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    user_id: Annotated[str, Depends(get_current_user_id)],
    registry: Annotated[StoreRegistry, Depends(get_registry)],
) -> Response:
    """Drop the caller's in-memory data. The next request loads it again."""
    await registry.evict(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
