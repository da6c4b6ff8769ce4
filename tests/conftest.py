from __future__ import annotations

import logging
from collections.abc import Iterator
from random import Random

import pytest

from delve.environment.generators.base import BuildState
from tests.helpers import make_state


@pytest.fixture
def rng() -> Random:
    """A seeded stream so every test draws the same numbers on every run."""
    return Random(12345)


@pytest.fixture
def state() -> BuildState:
    """An all-wall 40x30 build state at depth 1."""
    return make_state(40, 30)


@pytest.fixture(autouse=True)
def quiet_generation_logs() -> Iterator[None]:
    """Keep chatty generator debug output out of failing test reports."""
    logger = logging.getLogger("delve")
    previous = logger.level
    logger.setLevel(logging.INFO)
    yield
    logger.setLevel(previous)
