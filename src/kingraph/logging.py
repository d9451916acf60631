"""Structlog-based logging for KinGraph.

Library code never prints; modules obtain a bound logger with ``get_logger``.
Records go through the stdlib root logger on stderr so that stdout stays
reserved for CLI payloads.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Literal, get_args

import structlog

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging(level: LogLevel = "WARNING") -> None:
    logging.basicConfig(
        format="%(message)s", stream=sys.stderr, level=getattr(logging, level), force=True
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "kingraph"):
    return structlog.get_logger(name)


def _env_level() -> LogLevel:
    level = os.getenv("KINGRAPH_LOG_LEVEL", "WARNING").upper()
    return level if level in get_args(LogLevel) else "WARNING"  # type: ignore[return-value]


# Initialize default config
configure_logging(_env_level())
