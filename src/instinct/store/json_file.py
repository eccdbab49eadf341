"""JSON file store implementation."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Sequence

from pydantic import ValidationError

from instinct.exceptions import CorruptStoreError
from instinct.models import InstinctRecord, repair_stored
from instinct.store.base import Store
from instinct.types import Instinct

logger = logging.getLogger(__name__)

# What to do when the store file exists but cannot be read back.
CORRUPT_POLICIES = ("discard", "backup", "fail")


def _write_json(path: str, payload: List[Any]) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
        f.write("\n")


def dump_instincts(path: str, instincts: Sequence[Instinct]) -> None:
    """Write *instincts* to *path* as a pretty JSON array with trailing newline."""
    _write_json(path, [inst.to_dict() for inst in instincts])


class JsonFileStore(Store):
    """Store backed by a single JSON array on disk.

    The file is rewritten in full on every save. A missing file is an
    empty store. A file that is not a JSON array is handled according to
    *on_corrupt*:

    ``discard``
        log a warning and start from an empty collection
    ``backup``
        move the file aside to ``<name>.corrupt-<stamp>`` first
    ``fail``
        raise :class:`CorruptStoreError`

    Individual elements never trigger the policy. Out-of-range confidences
    and unparseable timestamps are repaired on load; elements that still
    fail the schema are left out of the collection but written back
    unchanged by the next save.
    """

    def __init__(self, path: str, on_corrupt: str = "discard") -> None:
        if on_corrupt not in CORRUPT_POLICIES:
            raise ValueError(
                f"on_corrupt must be one of {', '.join(CORRUPT_POLICIES)}, got {on_corrupt!r}"
            )
        self.path = str(path)
        self.on_corrupt = on_corrupt
        self._unreadable: List[Any] = []

    def load(self) -> List[Instinct]:
        self._unreadable = []
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise ValueError("top-level value is not a JSON array")
        except ValueError as exc:  # JSON and encoding errors
            return self._recover(exc)
        return self._parse(raw)

    def save(self, instincts: List[Instinct]) -> None:
        _write_json(self.path, [inst.to_dict() for inst in instincts] + self._unreadable)
        logger.debug(
            "Saved %d instincts to %s", len(instincts), self.path,
            extra={"path": self.path, "count": len(instincts)},
        )

    def _parse(self, raw: List[Any]) -> List[Instinct]:
        now = datetime.now(timezone.utc).isoformat()
        instincts: List[Instinct] = []
        for idx, item in enumerate(raw):
            fixed, repaired = repair_stored(item)
            try:
                record = InstinctRecord.model_validate(fixed)
            except ValidationError as exc:
                logger.warning(
                    "Skipping unreadable instinct at index %d of %s (%s). "
                    "It is kept in the file as is.",
                    idx, self.path, exc.errors()[0]["msg"],
                    extra={"path": self.path},
                )
                self._unreadable.append(item)
                continue
            if repaired:
                logger.warning(
                    'Repaired %s of instinct "%s" at index %d of %s.',
                    ", ".join(repaired), record.name, idx, self.path,
                    extra={"path": self.path},
                )
            instincts.append(record.to_instinct(now=now))
        return instincts

    def _recover(self, exc: Exception) -> List[Instinct]:
        reason = str(exc).splitlines()[0] if str(exc) else type(exc).__name__
        if self.on_corrupt == "fail":
            raise CorruptStoreError(self.path, reason) from exc
        if self.on_corrupt == "backup":
            stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
            backup = f"{self.path}.corrupt-{stamp}"
            os.replace(self.path, backup)
            logger.warning(
                "Could not parse instincts file (%s). Moved it to %s and starting fresh.",
                reason, backup, extra={"path": backup},
            )
        else:
            logger.warning(
                "Could not parse instincts file (%s). Starting fresh.",
                reason, extra={"path": self.path},
            )
        return []
