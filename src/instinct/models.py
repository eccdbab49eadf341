"""Pydantic schema for instinct records read from JSON."""

from __future__ import annotations

import secrets
from typing import Any, List, Optional, Tuple

try:
    from pydantic import BaseModel, ConfigDict, Field, field_validator
except ImportError:
    raise ImportError("Pydantic is required. Install with: pip install instinct-store")

from instinct.scoring import (
    CONFIDENCE_CAP,
    CONFIDENCE_FLOOR,
    INITIAL_CONFIDENCE,
    parse_timestamp,
)
from instinct.types import Instinct


class InstinctRecord(BaseModel):
    """One instinct as found in a store or import file.

    Only ``name`` is mandatory; every other field has a default so that
    records exported by older tools still load.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    category: str = "uncategorized"
    pattern: str = ""
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    created: Optional[str] = None
    last_used: Optional[str] = Field(default=None, alias="lastUsed")
    use_count: int = Field(default=0, ge=0, alias="useCount")
    tags: List[str] = Field(default_factory=list)

    @field_validator("created", "last_used")
    @classmethod
    def validate_timestamp(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            try:
                parse_timestamp(v)
            except ValueError:
                raise ValueError(f"not an ISO 8601 timestamp: {v!r}")
        return v

    def defaulted_keys(self) -> List[str]:
        """JSON keys that were absent from the source and took a default."""
        missing = []
        for name, info in type(self).model_fields.items():
            if name not in self.model_fields_set:
                missing.append(info.alias or name)
        return missing

    def to_instinct(
        self,
        now: str,
        id: Optional[str] = None,
        confidence: Optional[float] = None,
    ) -> Instinct:
        """Build an :class:`Instinct`, filling gaps with *now* and defaults."""
        created = self.created or self.last_used or now
        if confidence is None:
            confidence = self.confidence
        if confidence is None:
            confidence = INITIAL_CONFIDENCE
        return Instinct(
            id=id or self.id or new_instinct_id(),
            name=self.name,
            category=self.category,
            pattern=self.pattern,
            confidence=confidence,
            created=created,
            last_used=self.last_used or created,
            use_count=self.use_count,
            tags=list(self.tags),
        )


def new_instinct_id() -> str:
    return "inst-" + secrets.token_hex(4)


def repair_stored(item: Any) -> Tuple[Any, List[str]]:
    """Bring a stored element back within the schema where that is safe.

    Confidence is clamped into the valid range and unparseable timestamps
    are dropped so they fall back to defaults. Returns the (possibly
    copied) element and the JSON keys that were changed.
    """
    if not isinstance(item, dict):
        return item, []
    fixed = dict(item)
    repaired: List[str] = []

    conf = fixed.get("confidence")
    if isinstance(conf, (int, float)) and not isinstance(conf, bool):
        clamped = min(CONFIDENCE_CAP, max(CONFIDENCE_FLOOR, conf))
        if clamped != conf:
            fixed["confidence"] = clamped
            repaired.append("confidence")

    for key in ("created", "lastUsed"):
        value = fixed.get(key)
        if value is None:
            continue
        try:
            parse_timestamp(value)
        except (TypeError, ValueError, AttributeError):
            del fixed[key]
            repaired.append(key)
    return fixed, repaired
