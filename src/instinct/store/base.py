"""Abstract store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from instinct.types import Instinct


class Store(ABC):
    """Abstract base class for instinct storage backends.

    A store holds the whole collection; callers load it, operate on it and
    save it back in full.
    """

    @abstractmethod
    def load(self) -> List[Instinct]:
        """Return every stored instinct, in stored order."""

    @abstractmethod
    def save(self, instincts: List[Instinct]) -> None:
        """Replace the stored collection with *instincts*."""
