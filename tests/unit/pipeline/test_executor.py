"""Tests for the generation pipeline."""

from __future__ import annotations

import threading
from typing import Dict

import pytest

from conftest import StubFramework, StubLanguage
from stackdoc.composition.content import GuidelineSource, GuidelineStore
from stackdoc.composition.document import GENERIC_STACK, NO_COMMANDS, NO_GUIDELINES
from stackdoc.config.models import PipelineConfig
from stackdoc.core.errors import GuidelineNotFoundError, PipelineCancelledError
from stackdoc.core.models import Section, StackCommands
from stackdoc.modules.catalog import ModuleCatalog
from stackdoc.modules.registry import create_catalog
from stackdoc.pipeline.executor import StackPipeline


class DictSource(GuidelineSource):
    """Guideline source backed by a dict."""

    def __init__(self, contents: Dict[str, str]) -> None:
        self.contents = contents

    def load(self, relative_path: str) -> str:
        try:
            return self.contents[relative_path]
        except KeyError:
            raise GuidelineNotFoundError(relative_path) from None


class BrokenCommands(StubFramework):
    def commands(self, snapshot):
        raise RuntimeError("no scripts")


GUIDELINES = {
    "alpha/guidelines/framework.md": "## Alpha Guidelines",
    "beta/guidelines/framework.md": "## Beta Guidelines",
    "js/guidelines/language.md": "## JavaScript Guidelines",
}


class TestStackPipeline:
    """Tests for StackPipeline."""

    @pytest.fixture
    def config(self) -> PipelineConfig:
        return PipelineConfig(max_workers=4)

    def test_tie_order_follows_display_name(self, make_snapshot, config: PipelineConfig) -> None:
        """Test that same-class modules appear in display-name order everywhere."""
        catalog = ModuleCatalog([
            StubFramework("beta", display_name="Beta", commands=StackCommands(dev=["beta dev"])),
            StubFramework("alpha", display_name="Alpha", commands=StackCommands(dev=["alpha dev"])),
        ])

        result = StackPipeline(catalog, DictSource(GUIDELINES), config).run(make_snapshot())

        assert result.accepted == ("alpha", "beta")
        assert [m.id for m in result.modules] == ["alpha", "beta"]
        assert result.commands.dev == ["alpha dev", "beta dev"]
        assert [f.module_id for f in result.fragments] == ["alpha", "beta"]
        assert "Detected Stack: Alpha, Beta" in result.document.section(Section.STACK)

    def test_frameworks_before_languages(self, make_snapshot, config: PipelineConfig) -> None:
        """Test that language guidelines follow framework guidelines."""
        catalog = ModuleCatalog([StubLanguage("js"), StubFramework("alpha", display_name="Alpha")])

        result = StackPipeline(catalog, DictSource(GUIDELINES), config).run(make_snapshot())

        body = result.document.section(Section.GUIDELINES)
        assert body == "## Alpha Guidelines\n\n## JavaScript Guidelines"

    def test_missing_versioned_guideline_is_a_warning(self, make_snapshot, config: PipelineConfig) -> None:
        """Test that a missing reference is skipped with a warning."""
        catalog = ModuleCatalog([StubFramework("alpha", version="2")])

        result = StackPipeline(catalog, DictSource(GUIDELINES), config).run(make_snapshot())

        assert [f.reference.relative_path for f in result.fragments] == ["alpha/guidelines/framework.md"]
        warnings = result.diagnostics.for_phase("guidelines")
        assert len(warnings) == 1
        assert "alpha/guidelines/2/features.md" in warnings[0].message
        assert result.versions == {"alpha": "2"}

    def test_generic_fallback(self, make_snapshot, config: PipelineConfig) -> None:
        """Test the document produced when nothing is accepted."""
        catalog = ModuleCatalog([StubFramework("alpha", confidence=0.1)])

        result = StackPipeline(catalog, DictSource(GUIDELINES), config).run(make_snapshot())

        assert result.accepted == ()
        assert f"Detected Stack: {GENERIC_STACK}" in result.document.section(Section.STACK)
        assert NO_COMMANDS in result.document.section(Section.COMMANDS)
        assert NO_GUIDELINES in result.document.section(Section.GUIDELINES)

    def test_disabled_modules_are_not_probed(self, make_snapshot, config: PipelineConfig) -> None:
        catalog = ModuleCatalog([StubFramework("alpha"), StubFramework("beta")])
        catalog.set_enabled("beta", False)

        result = StackPipeline(catalog, DictSource(GUIDELINES), config).run(make_snapshot())

        assert result.accepted == ("alpha",)
        assert "beta" not in result.report.results

    def test_contribution_failure_is_contained(self, make_snapshot, config: PipelineConfig) -> None:
        """Test that a module whose commands raise drops out of composition only."""
        catalog = ModuleCatalog([
            BrokenCommands("alpha", display_name="Alpha"),
            StubFramework("beta", display_name="Beta", commands=StackCommands(test=["beta test"])),
        ])

        result = StackPipeline(catalog, DictSource(GUIDELINES), config).run(make_snapshot())

        assert result.accepted == ("alpha", "beta")
        assert result.commands.test == ["beta test"]
        assert [f.module_id for f in result.fragments] == ["beta"]
        assert result.diagnostics.for_module("alpha")

    def test_cancelled_run_produces_nothing(self, make_snapshot, config: PipelineConfig) -> None:
        cancel = threading.Event()
        cancel.set()
        pipeline = StackPipeline(ModuleCatalog([StubFramework("alpha")]), DictSource(GUIDELINES), config)

        with pytest.raises(PipelineCancelledError):
            pipeline.run(make_snapshot(), cancel_event=cancel)

    def test_render_section(self, make_snapshot, config: PipelineConfig) -> None:
        """Test that a single section body can be rendered by name."""
        catalog = ModuleCatalog([StubFramework("alpha", commands=StackCommands(lint=["alpha lint"]))])
        pipeline = StackPipeline(catalog, DictSource(GUIDELINES), config)

        body = pipeline.render_section(make_snapshot(), "commands")

        assert body.startswith("## Commands")
        assert "- `alpha lint`" in body

    def test_deterministic_output(self, make_snapshot) -> None:
        """Test that sequential and parallel runs render the same document."""
        catalog = ModuleCatalog([
            StubFramework("beta", display_name="Beta", commands=StackCommands(dev=["b"])),
            StubFramework("alpha", display_name="Alpha", commands=StackCommands(dev=["a"])),
            StubLanguage("js"),
        ])
        snapshot = make_snapshot()

        parallel = StackPipeline(catalog, DictSource(GUIDELINES), PipelineConfig(max_workers=8)).run(snapshot)
        sequential = StackPipeline(
            catalog, DictSource(GUIDELINES), PipelineConfig(sequential=True)
        ).run(snapshot)

        assert parallel.document.render() == sequential.document.render()


class TestBuiltinStack:
    """End-to-end runs over the built-in catalog and bundled guidelines."""

    @pytest.fixture
    def pipeline(self) -> StackPipeline:
        return StackPipeline(create_catalog(), GuidelineStore(), PipelineConfig(max_workers=4))

    def test_react_project(self, make_snapshot, pipeline: StackPipeline) -> None:
        """Test that React's core guideline appears exactly once."""
        snapshot = make_snapshot(dependencies={"react": "^18.2.0", "react-dom": "^18.2.0"})
        react_core = GuidelineStore().load("react/guidelines/framework.md").strip()

        result = pipeline.run(snapshot)

        guidelines = result.document.section(Section.GUIDELINES)
        assert "react" in result.accepted
        assert result.versions["react"] == "18"
        assert guidelines.count(react_core) == 1
        assert result.document.section(Section.STACK).startswith("## Detected Stack: React")

    def test_next_excludes_react(self, make_snapshot, pipeline: StackPipeline) -> None:
        """Test that an accepted Next.js leaves no react/ fragment behind."""
        snapshot = make_snapshot(
            dependencies={"next": "^14.2.0", "react": "^18.2.0", "react-dom": "^18.2.0"},
            config_files=["next.config.js"],
        )

        result = pipeline.run(snapshot)

        paths = [fragment.reference.relative_path for fragment in result.fragments]
        assert "next" in result.accepted
        assert "react" not in result.accepted
        assert result.report.excluded["react"] == ("next",)
        assert "next/guidelines/framework.md" in paths
        assert not any(path.startswith("react/") for path in paths)
        assert "## React Guidelines" not in result.document.section(Section.GUIDELINES)
