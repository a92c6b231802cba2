from __future__ import annotations

import logging
from typing import Iterator

import pytest

from luastubgen.orchestrator import GenerationContext
from tests._fixtures.type_builder import TypeBuilder


@pytest.fixture
def types() -> TypeBuilder:
    """Provide a fresh descriptor builder per test."""
    return TypeBuilder()


@pytest.fixture
def context() -> GenerationContext:
    """Provide a generation context with default mapping options."""
    return GenerationContext()


@pytest.fixture(autouse=True)
def _reset_luastubgen_logger() -> Iterator[None]:
    """Undo CLI logging configuration so caplog keeps seeing records."""
    yield
    logger = logging.getLogger("luastubgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
