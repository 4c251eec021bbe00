"""Additive confidence scoring used by module probes.

Each probe adds documented weights for the signals it finds; the total is
clamped into [0, 1] when the DetectionResult is built.
"""

from __future__ import annotations

from typing import Iterable, List

from stackdoc.core.models import DetectionResult


class ScoreCard:
    """Accumulates weighted evidence for one probe."""

    def __init__(self) -> None:
        self.confidence = 0.0
        self.evidence: List[str] = []

    def add(self, weight: float, evidence: str) -> None:
        self.confidence += weight
        self.evidence.append(evidence)

    def add_if(self, condition: object, weight: float, evidence: str) -> bool:
        """Add a weight only when the condition holds. Returns the condition."""
        if condition:
            self.add(weight, evidence)
        return bool(condition)

    def add_count(self, count: int, per_item: float, cap: float, evidence: str) -> None:
        """Add ``min(count * per_item, cap)`` for a non-zero count."""
        if count > 0:
            self.add(min(count * per_item, cap), f"{evidence}: {count}")

    def add_each(self, items: Iterable[str], weight: float, label: str) -> None:
        for item in items:
            self.add(weight, f"{label}: {item}")

    def scale(self, factor: float, evidence: str) -> None:
        self.confidence *= factor
        self.evidence.append(evidence)

    def result(self, excludes: Iterable[str] = ()) -> DetectionResult:
        return DetectionResult(
            confidence=self.confidence,
            evidence=tuple(self.evidence),
            excludes=frozenset(excludes),
        )
