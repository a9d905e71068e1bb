"""structlog setup shared by the HTTP service and the CLI."""

import logging

import structlog


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure structlog with level filtering and console rendering.

    Args:
        level: Log level name ("DEBUG", "INFO", ...) or logging constant
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
