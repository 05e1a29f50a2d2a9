"""
Structured logging setup.

Every module logs through structlog with snake_case event names
and keyword context, e.g. logger.info("patch_applied", record_id=7).
"""

import logging
from typing import Optional

import structlog

from config.settings import settings


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level name, defaults to settings.log_level
        json_output: Render JSON lines, defaults to True in production
    """
    level = level or settings.log_level
    if json_output is None:
        json_output = settings.is_production

    logging.basicConfig(format="%(message)s")
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(getattr(logging, level))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer() if json_output
                else structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
