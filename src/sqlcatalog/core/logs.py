"""Structured loggers for the core modules.

Core loggers are `structlog` wrappers around stdlib loggers under the
``sqlcatalog`` namespace. Until an application attaches handlers (see
`sqlcatalog.cli.common.logs.configure_logging`) nothing is printed: the
package logger carries a `NullHandler` and the root level filters debug
events.
"""

from __future__ import annotations

import logging

import structlog

logging.getLogger("sqlcatalog").addHandler(logging.NullHandler())

# Shared with the CLI formatter as its pre-chain for non-structlog records.
PRE_CHAIN = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
]

_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    *PRE_CHAIN,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger backed by ``logging.getLogger(name)``.

    Args:
        name: Logger name (typically __name__)

    Returns:
        A bound logger whose events are rendered by whatever
        `structlog.stdlib.ProcessorFormatter` the application installs.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )
