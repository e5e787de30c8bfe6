from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.source_tree import SourceTreeBuilder


@pytest.fixture
def source_tree(tmp_path: Path) -> SourceTreeBuilder:
    """Provide a docs root and a populated source checkout under tmp_path."""
    return SourceTreeBuilder(tmp_path).populate()


@pytest.fixture(autouse=True)
def _reset_refgen_logger():
    """Undo configure_logging so caplog sees records in every test."""
    logger = logging.getLogger("refgen")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
