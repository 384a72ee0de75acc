from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def debug_solver_logging() -> Iterator[None]:
    """Run every test with the package logger at DEBUG.

    Debug-level status lines and backtrack messages are then always
    formatted, so a broken log call fails the test that reaches it.
    """
    logger = logging.getLogger("terraweave")
    previous = logger.level
    logger.setLevel(logging.DEBUG)
    yield
    logger.setLevel(previous)
