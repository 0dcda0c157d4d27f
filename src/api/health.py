"""Liveness endpoint for the load balancer."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db
from src.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    db: str
    workspaces: int
    """Signed-in users whose data is currently held in memory."""


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HealthResponse:
    """Report database reachability and how many workspaces are loaded.

    A failed query degrades the status instead of failing the request;
    cached workspaces keep serving reads while the database is down.
    """
    try:
        await db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.exception("database_health_check_failed", error=str(e))
        db_status = "disconnected"

    registry = getattr(request.app.state, "stores", None)
    return HealthResponse(
        status="ok" if db_status == "connected" else "degraded",
        db=db_status,
        workspaces=len(registry) if registry is not None else 0,
    )
