"""Tests for stackdoc.core.models."""

from __future__ import annotations

from stackdoc.core.models import (
    ACCEPTANCE_THRESHOLD,
    COMMAND_BUCKETS,
    SECTION_ORDER,
    DetectionResult,
    PriorityClass,
    Section,
    StackCommands,
)


class TestDetectionResult:
    """Tests for DetectionResult."""

    def test_confidence_is_clamped(self) -> None:
        """Test that confidence is clamped into [0, 1]."""
        assert DetectionResult(confidence=1.7).confidence == 1.0
        assert DetectionResult(confidence=-0.2).confidence == 0.0

    def test_nan_confidence_is_rejected(self) -> None:
        result = DetectionResult(confidence=float("nan"))
        assert result.confidence == 0.0
        assert result.accepted is False

    def test_accepted_is_strictly_above_threshold(self) -> None:
        """Test that a result at exactly the threshold is rejected."""
        assert DetectionResult(confidence=ACCEPTANCE_THRESHOLD).accepted is False
        assert DetectionResult(confidence=0.31).accepted is True
        assert DetectionResult(confidence=0.0).accepted is False

    def test_rejected_carries_reason(self) -> None:
        """Test the rejected() constructor."""
        result = DetectionResult.rejected("boom")
        assert result.confidence == 0.0
        assert result.evidence == ("boom",)
        assert DetectionResult.rejected().evidence == ()

    def test_excludes_normalized_to_frozenset(self) -> None:
        """Test that excludes are stored as a frozenset."""
        result = DetectionResult(confidence=0.5, excludes=["react", "react"])
        assert result.excludes == frozenset({"react"})

    def test_to_dict(self) -> None:
        """Test dictionary form used by JSON output."""
        result = DetectionResult(confidence=0.95, evidence=("a",), excludes={"b"})
        assert result.to_dict() == {
            "confidence": 0.95,
            "accepted": True,
            "evidence": ["a"],
            "excludes": ["b"],
        }


class TestPriorityClass:
    """Tests for PriorityClass ranking."""

    def test_rank_follows_declaration_order(self) -> None:
        """Test that earlier classes rank higher."""
        ranks = [priority.rank for priority in PriorityClass]
        assert ranks == sorted(ranks, reverse=True)
        assert PriorityClass.META_FRAMEWORK.rank > PriorityClass.FRAMEWORK.rank
        assert PriorityClass.SPECIALIZED_LANGUAGE.rank > PriorityClass.BASE_LANGUAGE.rank


class TestSectionOrder:
    """Tests for the fixed section order."""

    def test_order(self) -> None:
        assert SECTION_ORDER == (
            Section.STACK,
            Section.COMMANDS,
            Section.WORKFLOW,
            Section.GUIDELINES,
        )


class TestStackCommands:
    """Tests for StackCommands."""

    def test_default_is_empty(self) -> None:
        """Test that a new StackCommands has no commands."""
        assert StackCommands().is_empty()

    def test_merged_keeps_order_and_duplicates(self) -> None:
        """Test that merging concatenates buckets without deduplication."""
        first = StackCommands(dev=["npm run dev"], install=["npm install"])
        second = StackCommands(dev=["npm run dev", "php artisan serve"])

        merged = StackCommands.merged([first, second])

        assert merged.dev == ["npm run dev", "npm run dev", "php artisan serve"]
        assert merged.install == ["npm install"]
        assert first.dev == ["npm run dev"]

    def test_to_dict_has_every_bucket(self) -> None:
        """Test that to_dict lists all five buckets."""
        data = StackCommands(test=["pytest"]).to_dict()
        assert list(data) == list(COMMAND_BUCKETS)
        assert data["test"] == ["pytest"]
