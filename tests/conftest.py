from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

# Import the local src tree, not a previously installed copy.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from sqlcatalog.cli.common.logs import HANDLER_NAME  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo `configure_logging` from in-process CLI calls after each test."""
    yield
    root_logger = logging.getLogger()
    root_logger.handlers = [h for h in root_logger.handlers if h.name != HANDLER_NAME]
    logging.getLogger("sqlcatalog").setLevel(logging.NOTSET)
