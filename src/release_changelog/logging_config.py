"""Structured logging for the changelog tool.

The changelog itself is the product of a run: the CLI prints it on stdout
and CI steps capture that stream verbatim. Every diagnostic therefore goes
to stderr as a structlog event, e.g.

  {"event": "report_built", "tickets": 12, "pending": 3, "level": "info"}

ENVIRONMENT=production switches to one JSON object per line, which is what
CI log viewers and log shippers expect. Anything else gets the colored
console renderer. LOG_LEVEL (or the CLI's --log-level) sets the threshold
for both structlog and the standard library loggers httpx writes to.

Usage:
    from release_changelog.logging_config import setup_logging, get_logger

    setup_logging(log_level="DEBUG")
    logger = get_logger(__name__)
    logger.info("commits_fetched", repo="myorg/api", count=42)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog


def _resolve_level(log_level: str | None) -> int:
    name = (log_level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def setup_logging(
    environment: str | None = None,
    log_level: str | None = None,
) -> None:
    """Route structlog and stdlib logging to stderr.

    Args:
        environment: "production" for JSON lines, anything else for console
                     output. Defaults to the ENVIRONMENT env var.
        log_level: Level name such as "DEBUG". Defaults to the LOG_LEVEL env
                   var, then INFO. Unknown names fall back to INFO.
    """
    production = (environment or os.environ.get("ENVIRONMENT", "")) == "production"
    level = _resolve_level(log_level)

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if production
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)
