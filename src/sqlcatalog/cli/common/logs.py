"""Logging setup for the CLI.

Core modules log through `sqlcatalog.core.logs.get_logger`, which hands
events to stdlib `logging`; this attaches a console handler for them when
running from the command line. User-facing messages go through
`sqlcatalog.cli.common.output.out`, not through logs.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.stdlib import ProcessorFormatter

from sqlcatalog.core.logs import PRE_CHAIN

HANDLER_NAME = "sqlcatalog-cli"


class _StderrHandler(logging.StreamHandler):
    """Stream handler writing to whatever `sys.stderr` is at emit time."""

    def __init__(self) -> None:
        logging.Handler.__init__(self)

    @property
    def stream(self):
        return sys.stderr


def configure_logging(verbose: bool = False) -> None:
    """Render log events to stderr; DEBUG when verbose, WARNING otherwise."""
    handler = _StderrHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(),
            foreign_pre_chain=PRE_CHAIN,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [h for h in root_logger.handlers if h.name != HANDLER_NAME]
    root_logger.addHandler(handler)

    logging.getLogger("sqlcatalog").setLevel(logging.DEBUG if verbose else logging.WARNING)
    # SDK request logs stay quiet even in verbose mode
    logging.getLogger("databricks.sdk").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
