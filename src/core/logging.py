"""structlog setup for the freelance desk API.

Every event carries the request id and, once the caller's X-User-Id has
been resolved, the user whose workspace is being touched.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

import orjson
import structlog
from structlog.types import Processor

from src.core.config import settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_ctx: ContextVar[str | None] = ContextVar("user_id", default=None)


def _add_request_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Attach request_id and user_id to an event.

    A user_id passed explicitly by the caller wins over the request's,
    so store events logged for another identity keep it.
    """
    if request_id := request_id_ctx.get():
        event_dict["request_id"] = request_id
    if user_id := user_id_ctx.get():
        event_dict.setdefault("user_id", user_id)
    return event_dict


def _render_json(obj: Any, **kwargs: Any) -> str:
    # money and dates fall back to str so amounts log as "12.50"
    return orjson.dumps(obj, default=str).decode("utf-8")


def configure_logging() -> None:
    """Install the structlog pipeline.

    LOG_FORMAT picks the renderer; when unset, JSON is used everywhere
    except the development environment.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_request_context,
    ]

    log_format = settings.log_format.lower() if settings.log_format else None
    use_json = log_format == "json" or (
        log_format is None and settings.environment != "development"
    )

    if use_json:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.EventRenamer("message"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(serializer=_render_json),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if settings.debug else logging.INFO,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
