"""Core data types for the instinct store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class Instinct:
    """A single learned pattern."""

    id: str
    name: str
    category: str
    pattern: str
    confidence: float = 0.5
    created: str = ""
    last_used: str = ""
    use_count: int = 0
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the on-disk (camelCase) keys."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "pattern": self.pattern,
            "confidence": self.confidence,
            "created": self.created,
            "lastUsed": self.last_used,
            "useCount": self.use_count,
            "tags": list(self.tags),
        }


@dataclass
class Cluster:
    """Instincts sharing a category, evaluated for promotion to a skill."""

    category: str
    members: List[Instinct]
    average_confidence: float
    ready: bool


@dataclass
class EvolveReport:
    clusters: List[Cluster]
    ready_count: int


@dataclass
class StatusReport:
    total: int
    average_confidence: float
    high_confidence: int
    low_confidence: int
    categories: Dict[str, int] = field(default_factory=dict)


@dataclass
class ImportResult:
    """Outcome of an import: counts plus the keys defaulted per added name."""

    added: int = 0
    skipped: int = 0
    defaulted: Dict[str, List[str]] = field(default_factory=dict)
