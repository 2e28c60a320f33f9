"""Logging and observability configuration using Pydantic Logfire.

All modules use Python's standard logging library (logging.getLogger(__name__));
once configure_logfire() has run, those records are forwarded to Logfire.

Standard usage:
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Message", extra={"key": "value"})

Structured logging utilities:
    log_with_context(logger, "info", "Task added", collection="tasks", record_id=1)
"""

import logging

import logfire

from tasktracker.core.config import Settings, settings


def configure_logfire(app_settings: Settings | None = None) -> None:
    """Configure Pydantic Logfire and route standard logging through it.

    Nothing is sent to Logfire unless a token is configured.
    """
    app_settings = app_settings or settings
    logfire.configure(
        token=app_settings.logfire_token,
        service_name="tasktracker",
        service_version="0.1.0",
        environment=app_settings.environment,
        send_to_logfire="if-token-present",
    )
    logging.basicConfig(
        level=app_settings.log_level.upper(),
        handlers=[logfire.LogfireLoggingHandler()],
        force=True,
    )

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def span(name: str) -> logfire.LogfireSpan:
    """Create a custom span for repository operations.

    Usage:
        with span("task_repository.add"):
            ...
    """
    return logfire.span(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log a message with structured context fields.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        **context: Additional context fields (collection, record_id, path, etc.)
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=context)
