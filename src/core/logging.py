"""
Structured logging configuration using structlog.

JSON output when LOG_JSON is set, console output otherwise. Context bound through
structlog.contextvars (for example the load under evaluation) is merged into
every event.
"""

import logging
from typing import Optional

import structlog
from structlog.typing import Processor

from src.core.config import get_config


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structlog for the application.

    Call this once at startup, before any logging.

    Args:
        level: Log level name. Defaults to LOG_LEVEL.
        json_output: Render JSON instead of console output. Defaults to LOG_JSON.
    """
    env = get_config().env
    level_name = (level or env.log_level).upper()
    if json_output is None:
        json_output = env.log_json

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str, **initial_values) -> structlog.BoundLogger:
    """
    Get a logger instance with the given name.

    Usage:
        from src.core.logging import get_logger

        log = get_logger(__name__)
        log.info("quote_scored", quote_id="Q-1")
    """
    return structlog.get_logger(name, **initial_values)
