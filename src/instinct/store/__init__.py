"""Storage backends for the instinct store."""

from instinct.store.base import Store
from instinct.store.json_file import JsonFileStore
from instinct.store.memory import MemoryStore

__all__ = ["Store", "MemoryStore", "JsonFileStore"]
