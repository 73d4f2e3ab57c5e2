"""Shared pytest fixtures and configuration for the call-boundary test suite.

Guidelines
----------
* Hooks and work are plain callables or ``MagicMock`` spies.
* Tests must not depend on logging configuration left by other tests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from call_boundary.trace import BoundaryTrace


@pytest.fixture
def trace() -> BoundaryTrace:
    return BoundaryTrace()


@pytest.fixture
def clean_package_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger("call_boundary")
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    yield logger
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)
