"""Structlog configuration.

Colored console output when attached to a terminal, JSON lines otherwise.
"""

import sys
from typing import List, Optional

import structlog

from cloudpool.config import get_settings


def configure_logging(json_output: Optional[bool] = None) -> None:
    """Configure structlog processors and renderer.

    Args:
        json_output: True for JSON, False for colored console output. When None,
            the ``log_json`` setting decides, falling back to TTY detection.
    """
    if json_output is None:
        json_output = get_settings().log_json
    if json_output is None:
        json_output = not sys.stdout.isatty()

    shared_processors: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors: List[structlog.types.Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
