"""Structured logging setup.

Every module logs through a module-level ``structlog.get_logger()``.
This configures the processor chain once at startup.

Usage:
    from toolguard.core.logging_config import configure_logging

    configure_logging("DEBUG")
"""

import logging

import structlog


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog processors and level filtering.

    Args:
        level: Minimum log level name ("DEBUG", "INFO", "WARNING", ...)
        json_output: Render JSON lines instead of console output
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        cache_logger_on_first_use=False,
    )
