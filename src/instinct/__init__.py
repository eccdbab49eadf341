"""Instinct store — learned patterns with decaying confidence."""

from instinct.exceptions import (
    CorruptStoreError,
    DuplicateInstinctError,
    InstinctError,
    InstinctNotFoundError,
    InvalidImportError,
)
from instinct.manager import InstinctManager
from instinct.types import Cluster, EvolveReport, ImportResult, Instinct, StatusReport

__all__ = [
    "InstinctManager",
    "Instinct",
    "Cluster",
    "EvolveReport",
    "ImportResult",
    "StatusReport",
    "InstinctError",
    "InstinctNotFoundError",
    "DuplicateInstinctError",
    "InvalidImportError",
    "CorruptStoreError",
]
