"""Tests for structured logging configuration."""

from decimal import Decimal

import structlog

from src.core.config import settings
from src.core.logging import (
    _add_request_context,
    _render_json,
    configure_logging,
    request_id_ctx,
    user_id_ctx,
)


def _configure_with(log_format: str) -> list:
    original_env = settings.environment
    original_format = settings.log_format
    try:
        settings.environment = "development"
        settings.log_format = log_format
        configure_logging()
        return list(structlog.get_config()["processors"])
    finally:
        settings.environment = original_env
        settings.log_format = original_format
        structlog.reset_defaults()


def test_configure_logging_json() -> None:
    """Use JSON logging with a message field when log_format=json."""
    processors = _configure_with("json")
    assert any(isinstance(p, structlog.processors.JSONRenderer) for p in processors)
    assert any(isinstance(p, structlog.processors.EventRenamer) for p in processors)


def test_configure_logging_console() -> None:
    """Use console logging when log_format=console."""
    processors = _configure_with("console")
    assert any(isinstance(p, structlog.dev.ConsoleRenderer) for p in processors)
    assert not any(isinstance(p, structlog.processors.JSONRenderer) for p in processors)


def test_context_vars_added_to_events() -> None:
    """Request and user identifiers are attached when set."""
    request_token = request_id_ctx.set("req-1")
    user_token = user_id_ctx.set("user-1")
    try:
        event = _add_request_context(None, "info", {"event": "client_added"})
        explicit = _add_request_context(None, "info", {"event": "x", "user_id": "user-9"})
    finally:
        request_id_ctx.reset(request_token)
        user_id_ctx.reset(user_token)

    assert event == {"event": "client_added", "request_id": "req-1", "user_id": "user-1"}
    assert explicit["user_id"] == "user-9"


def test_render_json_handles_decimal() -> None:
    assert _render_json({"amount": Decimal("12.50")}) == '{"amount":"12.50"}'
