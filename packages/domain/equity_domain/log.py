"""Logging configuration.

Provides a single entry point for configuring structured logging through
structlog on top of the stdlib logging module.

Configuration is read from settings (environment variables):
- LOG_LEVEL: DEBUG | INFO | WARNING | ERROR (default: INFO)
- LOG_FORMAT: json | console (default: console)

Usage:
    from equity_domain.log import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)
    logger.info("projection.computed", contributors=3)
"""

import logging
import sys
from typing import List, Literal, Optional

import structlog
from structlog.types import Processor

_configured = False


def configure_logging(
    level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR"]] = None,
    fmt: Optional[Literal["json", "console"]] = None,
    force: bool = False,
) -> None:
    """Configure structlog and the stdlib root handler.

    Should be called once by the host application at startup. Subsequent
    calls are no-ops unless force=True.

    Args:
        level: Log level (overrides LOG_LEVEL)
        fmt: Output format (overrides LOG_FORMAT)
        force: Reconfigure even if already configured
    """
    global _configured

    if _configured and not force:
        return

    from .settings import get_settings

    settings = get_settings()
    log_level = (level or settings.log_level).upper()
    log_format = (fmt or settings.log_format).lower()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level),
        force=True,
    )

    processors: List[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to a module name."""
    return structlog.get_logger(name)
