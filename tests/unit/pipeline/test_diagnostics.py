"""Tests for stackdoc.pipeline.diagnostics."""

from __future__ import annotations

from stackdoc.pipeline.diagnostics import Diagnostic, Diagnostics, DiagnosticSeverity


class TestDiagnostics:
    """Tests for the per-run diagnostics collector."""

    def test_filters(self) -> None:
        diagnostics = Diagnostics()
        diagnostics.info("detection", "starting")
        diagnostics.warning("guidelines", "missing file", "react")
        diagnostics.error("detection", "probe failed", "vue")

        assert len(diagnostics) == 3
        assert [d.module_id for d in diagnostics.warnings()] == ["react"]
        assert [d.module_id for d in diagnostics.errors()] == ["vue"]
        assert len(diagnostics.for_phase("detection")) == 2
        assert diagnostics.has_errors is True

    def test_str_and_dict(self) -> None:
        entry = Diagnostic(phase="versions", message="lookup failed", module_id="php")
        assert str(entry) == "[versions] php: lookup failed"
        assert entry.to_dict() == {
            "phase": "versions",
            "module": "php",
            "severity": DiagnosticSeverity.WARNING.value,
            "message": "lookup failed",
        }

    def test_str_without_module(self) -> None:
        assert str(Diagnostic(phase="render", message="done")) == "[render] done"
