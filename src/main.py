"""FastAPI application entry point with lifespan management."""

from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.account import router as account_router
from src.api.campaign import router as campaign_router
from src.api.clients import router as clients_router
from src.api.health import router as health_router
from src.api.middleware import RequestContextMiddleware
from src.api.payments import router as payments_router
from src.api.projects import router as projects_router
from src.api.reports import router as reports_router
from src.api.session import router as session_router
from src.core.config import settings
from src.core.database import create_engine, create_session_factory
from src.core.errors import (
    AuthenticationRequired,
    InvalidReference,
    NotFoundOrForbidden,
    PersistenceFailure,
)
from src.core.logging import configure_logging, get_logger
from src.core.sentry import init_sentry
from src.store.gateway import SqlAlchemyGateway
from src.store.registry import StoreRegistry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle resources.

    Startup:
        - Configure structured logging
        - Initialize Sentry error tracking
        - Create database engine and session factory
        - Build the per-identity store registry

    Shutdown:
        - Dispose database engine
    """
    configure_logging()
    logger.info("Starting application", environment=settings.environment)

    init_sentry()

    app.state.db_engine = create_engine()
    app.state.async_session = create_session_factory(app.state.db_engine)
    logger.info("Database engine created")

    app.state.stores = StoreRegistry(
        SqlAlchemyGateway(app.state.async_session),
        audit_log_limit=settings.audit_log_limit,
        max_workspaces=settings.max_workspaces,
    )

    yield

    logger.info("Shutting down application")
    await app.state.db_engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title="Freelance Desk",
    description="Clients, projects and payments for freelancers, plus campaign-panel admin",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestContextMiddleware)


@app.exception_handler(AuthenticationRequired)
async def authentication_required_handler(
    request: Request, exc: AuthenticationRequired
) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": str(exc)})


@app.exception_handler(NotFoundOrForbidden)
async def not_found_handler(request: Request, exc: NotFoundOrForbidden) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidReference)
async def invalid_reference_handler(request: Request, exc: InvalidReference) -> JSONResponse:
    return JSONResponse(
        status_code=422, content={"detail": str(exc)}
    )


@app.exception_handler(PersistenceFailure)
async def persistence_failure_handler(
    request: Request, exc: PersistenceFailure
) -> JSONResponse:
    logger.error("persistence_failure", path=request.url.path, table=exc.table, error=str(exc))
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})


app.include_router(health_router)
app.include_router(clients_router)
app.include_router(projects_router)
app.include_router(payments_router)
app.include_router(account_router)
app.include_router(reports_router)
app.include_router(campaign_router)
app.include_router(session_router)
