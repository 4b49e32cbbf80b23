"""Structured logging setup for the wiremock-helper command line.

Library modules only call structlog.get_logger(); configuring output is
left to the application, which for the CLI is configure_logging().
"""

from __future__ import annotations

import logging
import sys
from typing import Literal

import structlog

LogFormat = Literal["console", "plain", "json"]
LOG_FORMATS: tuple[LogFormat, ...] = ("console", "plain", "json")


def configure_logging(log_level: str = "info", log_format: LogFormat = "console") -> structlog.stdlib.BoundLogger:
    """Configure structlog to write events to stderr.

    stdout is kept free for command output.
    """
    normalized_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=normalized_level,
        stream=sys.stderr,
        format="%(message)s",
        force=True,
    )

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.processors.format_exc_info,
    ]

    if log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    elif log_format == "plain":
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(normalized_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("wiremock_helper")
