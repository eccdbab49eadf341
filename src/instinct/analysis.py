"""Category clustering and summary statistics over decay-projected instincts."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Sequence

from instinct.types import Cluster, EvolveReport, Instinct, StatusReport

UNCATEGORIZED = "uncategorized"
READY_MIN_SIZE = 3
READY_MIN_CONFIDENCE = 0.7
HIGH_CONFIDENCE = 0.7
LOW_CONFIDENCE = 0.3


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return round(sum(values) / len(values), 4)


def category_of(instinct: Instinct) -> str:
    return instinct.category or UNCATEGORIZED


def cluster_by_category(instincts: Sequence[Instinct]) -> EvolveReport:
    """Group instincts by category and flag clusters ready to become skills.

    Clusters keep the order in which their category first appears, and
    members keep store order.
    """
    groups: Dict[str, List[Instinct]] = {}
    for inst in instincts:
        groups.setdefault(category_of(inst), []).append(inst)

    clusters: List[Cluster] = []
    for category, members in groups.items():
        avg = _mean([m.confidence for m in members])
        ready = len(members) >= READY_MIN_SIZE and avg >= READY_MIN_CONFIDENCE
        clusters.append(
            Cluster(
                category=category,
                members=members,
                average_confidence=avg,
                ready=ready,
            )
        )
    return EvolveReport(
        clusters=clusters,
        ready_count=sum(1 for c in clusters if c.ready),
    )


def summarize(instincts: Sequence[Instinct]) -> StatusReport:
    counts = Counter(category_of(i) for i in instincts)
    return StatusReport(
        total=len(instincts),
        average_confidence=_mean([i.confidence for i in instincts]),
        high_confidence=sum(1 for i in instincts if i.confidence >= HIGH_CONFIDENCE),
        low_confidence=sum(1 for i in instincts if i.confidence < LOW_CONFIDENCE),
        categories=dict(counts.most_common()),
    )
