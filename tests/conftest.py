"""Shared pytest fixtures."""

import logging
from typing import Iterator

import pytest


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    """Put back the root logger's handlers and level after a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
