"""API module exports."""

from src.api.account import router as account_router
from src.api.campaign import router as campaign_router
from src.api.clients import router as clients_router
from src.api.deps import get_db, get_freelancer_store
from src.api.health import router as health_router
from src.api.payments import router as payments_router
from src.api.projects import router as projects_router
from src.api.reports import router as reports_router
from src.api.session import router as session_router

__all__ = [
    "account_router",
    "campaign_router",
    "clients_router",
    "get_db",
    "get_freelancer_store",
    "health_router",
    "payments_router",
    "projects_router",
    "reports_router",
    "session_router",
]
