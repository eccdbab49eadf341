"""Shared fixtures for instinct store tests."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from instinct.manager import InstinctManager
from instinct.store.memory import MemoryStore

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def manager(memory_store: MemoryStore, clock: FakeClock) -> InstinctManager:
    return InstinctManager(store=memory_store, clock=clock)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers bound to a captured stream once the test is over."""
    yield
    logger = logging.getLogger("instinct")
    for handler in list(logger.handlers):
        if getattr(handler, "_instinct_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
