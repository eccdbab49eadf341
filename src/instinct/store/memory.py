"""In-memory store implementation for testing."""

from __future__ import annotations

import copy
from typing import List, Optional

from instinct.store.base import Store
from instinct.types import Instinct


class MemoryStore(Store):
    """In-memory store backed by a list. Useful for testing."""

    def __init__(self, instincts: Optional[List[Instinct]] = None) -> None:
        self._instincts: List[Instinct] = copy.deepcopy(instincts or [])
        self.save_count = 0

    def load(self) -> List[Instinct]:
        return copy.deepcopy(self._instincts)

    def save(self, instincts: List[Instinct]) -> None:
        self._instincts = copy.deepcopy(instincts)
        self.save_count += 1
