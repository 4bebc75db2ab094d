"""Structured logging setup for the CLI entry point."""

import logging

import structlog

LOG_LEVELS: dict[str, int] = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "silent": logging.CRITICAL + 10,
}


def resolve_log_level(level: str | None) -> int:
    """Translate a configured log level name into a logging level number.

    Unknown or missing names resolve to INFO.
    """
    if not level:
        return logging.INFO
    return LOG_LEVELS.get(level.strip().lower(), logging.INFO)


def configure_logging(level: str | None) -> None:
    """Configure structlog for console output at the configured verbosity."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level(level)),
        cache_logger_on_first_use=False,
    )
