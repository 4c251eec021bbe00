"""Tests for detection orchestration and version resolution."""

from __future__ import annotations

from conftest import StubFramework
from stackdoc.core.models import DetectionResult
from stackdoc.pipeline.diagnostics import Diagnostics, DiagnosticSeverity
from stackdoc.pipeline.orchestrator import (
    DetectionOrchestrator,
    VersionResolver,
    resolve_exclusions,
)
from stackdoc.pipeline.parallel import ParallelModuleExecutor


class ExplodingModule(StubFramework):
    def probe(self, snapshot):
        raise ValueError("bad manifest")

    def resolve_version(self, snapshot):
        raise OSError("lockfile unreadable")


class TestResolveExclusions:
    """Tests for resolve_exclusions."""

    def test_exclusion_wins_over_confidence(self) -> None:
        """Test that an excluded module leaves even with higher confidence."""
        results = {
            "next": DetectionResult(confidence=0.5, excludes={"react"}),
            "react": DetectionResult(confidence=1.0),
        }

        accepted, excluded = resolve_exclusions(results, ["next", "react"])

        assert accepted == ("next",)
        assert excluded == {"react": ("next",)}

    def test_rejected_module_does_not_exclude(self) -> None:
        """Test that only accepted results contribute exclusions."""
        results = {
            "next": DetectionResult(confidence=0.2, excludes={"react"}),
            "react": DetectionResult(confidence=0.9),
        }
        accepted, excluded = resolve_exclusions(results, ["next", "react"])
        assert accepted == ("react",)
        assert excluded == {}

    def test_excluding_unaccepted_id_is_noop(self) -> None:
        results = {"next": DetectionResult(confidence=0.9, excludes={"react"})}
        accepted, excluded = resolve_exclusions(results, ["next", "react"])
        assert accepted == ("next",)
        assert excluded == {}

    def test_self_exclusion_is_ignored(self) -> None:
        """Test that a module excluding itself stays accepted with a warning."""
        diagnostics = Diagnostics()
        results = {"odd": DetectionResult(confidence=0.9, excludes={"odd"})}

        accepted, _ = resolve_exclusions(results, ["odd"], diagnostics)

        assert accepted == ("odd",)
        assert diagnostics.for_module("odd")[0].severity == DiagnosticSeverity.WARNING

    def test_mutual_exclusion_removes_both(self) -> None:
        results = {
            "a": DetectionResult(confidence=0.9, excludes={"b"}),
            "b": DetectionResult(confidence=0.9, excludes={"a"}),
        }
        accepted, excluded = resolve_exclusions(results, ["a", "b"])
        assert accepted == ()
        assert set(excluded) == {"a", "b"}

    def test_accepted_follows_given_order(self) -> None:
        """Test that the accepted tuple is in canonical order."""
        results = {
            "beta": DetectionResult(confidence=0.9),
            "alpha": DetectionResult(confidence=0.4),
        }
        accepted, _ = resolve_exclusions(results, ["alpha", "beta"])
        assert accepted == ("alpha", "beta")


class TestDetectionOrchestrator:
    """Tests for DetectionOrchestrator."""

    def test_probe_failure_is_contained(self, make_snapshot) -> None:
        """Test that a raising probe is recorded and the rest still run."""
        diagnostics = Diagnostics()
        modules = [ExplodingModule("broken"), StubFramework("fine")]

        report = DetectionOrchestrator().detect(make_snapshot(), modules, diagnostics)

        assert report.accepted == ("fine",)
        assert "bad manifest" in report.failed["broken"]
        assert report.results["broken"].confidence == 0.0
        assert diagnostics.has_errors is True

    def test_threshold(self, make_snapshot) -> None:
        modules = [StubFramework("low", confidence=0.3), StubFramework("high", confidence=0.31)]
        report = DetectionOrchestrator().detect(make_snapshot(), modules)
        assert report.accepted == ("high",)

    def test_deterministic_across_modes(self, make_snapshot) -> None:
        """Test that parallel and sequential runs give the same report."""
        modules = [
            StubFramework("meta", excludes={"base"}),
            StubFramework("base"),
            StubFramework("other", confidence=0.5),
        ]
        snapshot = make_snapshot()

        parallel = DetectionOrchestrator(ParallelModuleExecutor(max_workers=4)).detect(snapshot, modules)
        sequential = DetectionOrchestrator(ParallelModuleExecutor(sequential=True)).detect(snapshot, modules)

        assert parallel.accepted == sequential.accepted == ("meta", "other")
        assert parallel.to_dict() == sequential.to_dict()


class TestVersionResolver:
    """Tests for VersionResolver."""

    def test_versions(self, make_snapshot) -> None:
        modules = [StubFramework("react", version="18"), StubFramework("vue")]
        versions = VersionResolver().resolve(make_snapshot(), modules)
        assert versions == {"react": "18", "vue": None}

    def test_failure_degrades_to_no_version(self, make_snapshot) -> None:
        diagnostics = Diagnostics()
        versions = VersionResolver().resolve(make_snapshot(), [ExplodingModule("broken")], diagnostics)
        assert versions == {"broken": None}
        assert len(diagnostics.warnings()) == 1
