"""Configuration from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

STORE_DIR = os.path.join(".copilot", "skills", "continuous-learning", "learned")
STORE_FILE = "instincts.json"
DEFAULT_EXPORT_FILE = "instincts-export.json"

_ROOT_MARKERS = ("package.json", "pyproject.toml", ".git")


def find_project_root(start: Optional[str] = None) -> str:
    """Walk up from *start* to the first directory holding a project marker.

    Falls back to *start* (the working directory by default) when no marker
    is found before the filesystem root.
    """
    origin = Path(start or os.getcwd()).resolve()
    for candidate in (origin, *origin.parents):
        if any((candidate / marker).exists() for marker in _ROOT_MARKERS):
            return str(candidate)
    return str(origin)


def default_store_path(start: Optional[str] = None) -> str:
    return os.path.join(find_project_root(start), STORE_DIR, STORE_FILE)


@dataclass
class Settings:
    """Settings loaded from environment."""

    store_path: str = ""
    # "discard" | "backup" | "fail"
    on_corrupt: str = "discard"

    log_format: str = "pretty"  # "json" or "pretty"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            store_path=os.environ.get("INSTINCT_STORE_PATH") or default_store_path(),
            on_corrupt=os.environ.get("INSTINCT_ON_CORRUPT", "discard").lower(),
            log_format=os.environ.get("LOG_FORMAT", "pretty"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )
