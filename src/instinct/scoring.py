"""Confidence rules: time-based decay, use increments and import discount."""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from instinct.types import Instinct

INITIAL_CONFIDENCE = 0.5
CONFIDENCE_INCREMENT = 0.05
CONFIDENCE_CAP = 0.95
CONFIDENCE_FLOOR = 0.1
DECAY_PER_WEEK = 0.01
IMPORT_DISCOUNT = 0.8

_SECONDS_PER_DAY = 86400.0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp; accepts a trailing ``Z``, naive means UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _round(value: float) -> float:
    return round(value, 4)


def weeks_unused(last_used: str, now: datetime) -> int:
    """Whole weeks elapsed between *last_used* and *now*."""
    days = (now - parse_timestamp(last_used)).total_seconds() / _SECONDS_PER_DAY
    return math.floor(days / 7)


def decayed_confidence(confidence: float, last_used: str, now: datetime) -> float:
    weeks = weeks_unused(last_used, now)
    if weeks <= 0:
        return confidence
    decayed = max(CONFIDENCE_FLOOR, confidence - weeks * DECAY_PER_WEEK)
    return _round(min(confidence, decayed))


def apply_decay(instinct: Instinct, now: datetime) -> Instinct:
    """Return a copy of *instinct* with confidence projected to *now*.

    Decay is always measured from ``last_used``, so the result depends only
    on elapsed time and never on how often the projection was computed.
    The input record is left untouched.
    """
    return replace(
        instinct,
        confidence=decayed_confidence(instinct.confidence, instinct.last_used, now),
        tags=list(instinct.tags),
    )


def increment_confidence(instinct: Instinct, now: datetime) -> Instinct:
    """Record a successful use: bump confidence and reset the decay clock."""
    instinct.confidence = _round(
        min(CONFIDENCE_CAP, instinct.confidence + CONFIDENCE_INCREMENT)
    )
    instinct.last_used = now.isoformat()
    instinct.use_count += 1
    return instinct


def discount_imported(confidence: Optional[float]) -> float:
    """Confidence assigned to a record imported from elsewhere."""
    if confidence is None:
        confidence = INITIAL_CONFIDENCE
    return _round(max(CONFIDENCE_FLOOR, confidence * IMPORT_DISCOUNT))
