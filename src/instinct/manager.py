"""InstinctManager — entry point for working with an instinct store."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Callable, List, Optional

from pydantic import ValidationError

from instinct.analysis import cluster_by_category, summarize
from instinct.config import default_store_path
from instinct.exceptions import (
    DuplicateInstinctError,
    InstinctNotFoundError,
    InvalidImportError,
)
from instinct.models import InstinctRecord, new_instinct_id
from instinct.scoring import (
    INITIAL_CONFIDENCE,
    apply_decay,
    discount_imported,
    increment_confidence,
    utc_now,
)
from instinct.store.base import Store
from instinct.store.json_file import JsonFileStore, dump_instincts
from instinct.types import EvolveReport, ImportResult, Instinct, StatusReport

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class InstinctManager:
    """Learned-pattern store with confidence scoring.

    Every operation loads the collection, works on it and (for mutations)
    saves it back, so nothing is cached between calls.

    Usage::

        manager = InstinctManager(path="instincts.json")
        inst = manager.add("retry-backoff", "code-pattern", "wrap flaky calls")
        manager.use(inst.id)
        report = manager.evolve()
    """

    def __init__(
        self,
        store: Optional[Store] = None,
        path: Optional[str] = None,
        on_corrupt: str = "discard",
        clock: Optional[Clock] = None,
    ) -> None:
        if store is not None and path is not None:
            raise ValueError("pass either store or path, not both")
        if store is None:
            store = JsonFileStore(path or default_store_path(), on_corrupt=on_corrupt)
        self._store = store
        self._clock: Clock = clock or utc_now

    @property
    def store(self) -> Store:
        return self._store

    def _now(self) -> datetime:
        return self._clock()

    def _projected(self) -> List[Instinct]:
        now = self._now()
        return [apply_decay(inst, now) for inst in self._store.load()]

    def add(
        self,
        name: str,
        category: str,
        pattern: str,
        tags: Optional[List[str]] = None,
    ) -> Instinct:
        """Add a new instinct with the initial confidence. Names must be unique."""
        if not all(value and value.strip() for value in (name, category, pattern)):
            raise ValueError("name, category and pattern are all required")

        instincts = self._store.load()
        if any(i.name == name for i in instincts):
            raise DuplicateInstinctError(name)

        now = self._now().isoformat()
        instinct = Instinct(
            id=new_instinct_id(),
            name=name,
            category=category,
            pattern=pattern,
            confidence=INITIAL_CONFIDENCE,
            created=now,
            last_used=now,
            use_count=0,
            tags=list(tags or []),
        )
        instincts.append(instinct)
        self._store.save(instincts)
        logger.info(
            'Added instinct "%s" (%s) with confidence %s',
            name, instinct.id, instinct.confidence,
            extra={"instinct_id": instinct.id},
        )
        return instinct

    def remove(self, instinct_id: str) -> Instinct:
        """Delete an instinct by ID and return it."""
        instincts = self._store.load()
        for idx, inst in enumerate(instincts):
            if inst.id == instinct_id:
                removed = instincts.pop(idx)
                break
        else:
            raise InstinctNotFoundError(instinct_id)

        self._store.save(instincts)
        logger.info(
            'Removed instinct "%s" (%s)', removed.name, removed.id,
            extra={"instinct_id": removed.id},
        )
        return removed

    def get(self, instinct_id: str) -> Optional[Instinct]:
        """Get an instinct by ID, as stored (no decay applied)."""
        for inst in self._store.load():
            if inst.id == instinct_id:
                return inst
        return None

    def use(self, instinct_id: str) -> Instinct:
        """Record a successful use of an instinct, raising its confidence."""
        instincts = self._store.load()
        target = next((i for i in instincts if i.id == instinct_id), None)
        if target is None:
            raise InstinctNotFoundError(instinct_id)

        increment_confidence(target, self._now())
        self._store.save(instincts)
        logger.debug(
            'Used instinct "%s": confidence %s, %d uses',
            target.name, target.confidence, target.use_count,
            extra={"instinct_id": target.id},
        )
        return target

    def list(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        min_confidence: Optional[float] = None,
    ) -> List[Instinct]:
        """List instincts with decay applied, highest confidence first.

        The decayed confidences are a projection and are not saved.
        """
        instincts = self._projected()

        if category is not None:
            instincts = [i for i in instincts if i.category == category]
        if search:
            q = search.lower()
            instincts = [
                i for i in instincts
                if q in i.name.lower() or q in i.pattern.lower()
            ]
        if min_confidence is not None:
            instincts = [i for i in instincts if i.confidence >= min_confidence]

        instincts.sort(key=lambda i: i.confidence, reverse=True)
        return instincts

    def export_instincts(self, path: str) -> List[Instinct]:
        """Write the raw collection (no decay, no filtering) to *path*."""
        instincts = self._store.load()
        dump_instincts(path, instincts)
        logger.info(
            "Exported %d instincts to %s", len(instincts), path,
            extra={"path": path, "count": len(instincts)},
        )
        return instincts

    def import_instincts(self, path: str) -> ImportResult:
        """Import instincts from a JSON array file.

        Records whose name already exists locally are skipped. Added records
        get a new local ID and a discounted confidence, since they have not
        been validated in this project yet. The file is validated in full
        before anything is written.
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"File not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidImportError(f"Invalid JSON in import file: {exc}") from exc

        if not isinstance(data, list):
            raise InvalidImportError("Import file must contain a JSON array of instincts.")

        records: List[InstinctRecord] = []
        for idx, item in enumerate(data):
            try:
                records.append(InstinctRecord.model_validate(item))
            except ValidationError as exc:
                raise InvalidImportError(
                    f"Invalid instinct at index {idx}: {exc.errors()[0]['msg']}"
                ) from exc

        instincts = self._store.load()
        names = {i.name for i in instincts}
        now = self._now().isoformat()
        result = ImportResult()

        for record in records:
            if record.name in names:
                result.skipped += 1
                continue
            instinct = record.to_instinct(
                now=now,
                id=new_instinct_id(),
                confidence=discount_imported(record.confidence),
            )
            instincts.append(instinct)
            names.add(instinct.name)
            result.added += 1
            defaulted = [k for k in record.defaulted_keys() if k != "id"]
            if defaulted:
                result.defaulted[instinct.name] = defaulted

        self._store.save(instincts)
        logger.info(
            "Imported %d instincts (%d duplicates skipped).",
            result.added, result.skipped,
            extra={"path": path, "count": result.added},
        )
        return result

    def evolve(self) -> EvolveReport:
        """Cluster decay-projected instincts by category. Read-only."""
        return cluster_by_category(self._projected())

    def status(self) -> StatusReport:
        """Summary statistics over decay-projected instincts. Read-only."""
        return summarize(self._projected())
