"""Tests for stackdoc.modules.frontend."""

from __future__ import annotations

from stackdoc.modules.frontend import (
    AstroModule,
    NextModule,
    NuxtModule,
    ReactModule,
    SvelteKitModule,
    VueModule,
)
from stackdoc.pipeline.orchestrator import DetectionOrchestrator
from stackdoc.pipeline.parallel import ParallelModuleExecutor


class TestReactModule:
    """Tests for ReactModule."""

    def test_detects_dependency(self, make_snapshot) -> None:
        """Test that a react dependency alone is accepted."""
        snapshot = make_snapshot(dependencies={"react": "^18.2.0"})

        result = ReactModule().probe(snapshot)

        assert result.accepted is True
        assert result.confidence == 0.9
        assert "react in dependencies" in result.evidence

    def test_no_signal(self, make_snapshot) -> None:
        """Test that layout signals alone do not count."""
        snapshot = make_snapshot(
            dependencies={"vue": "^3.0.0"},
            files=["src/components/Button.jsx", "public/index.html"],
        )
        result = ReactModule().probe(snapshot)
        assert result.confidence == 0.0
        assert result.accepted is False

    def test_version_from_range(self, make_snapshot) -> None:
        """Test that ^18.2.0 resolves to version 18."""
        snapshot = make_snapshot(dependencies={"react": "^18.2.0"})
        assert ReactModule().resolve_version(snapshot) == "18"

    def test_guideline_refs(self) -> None:
        """Test the core reference comes before the versioned one."""
        refs = ReactModule().guideline_refs("18")
        assert [ref.relative_path for ref in refs] == [
            "react/guidelines/framework.md",
            "react/guidelines/18/features.md",
        ]
        assert all(ref.version == "18" for ref in refs)

    def test_guideline_refs_without_version(self) -> None:
        refs = ReactModule().guideline_refs(None)
        assert [ref.relative_path for ref in refs] == ["react/guidelines/framework.md"]

    def test_commands_use_package_manager(self, make_snapshot) -> None:
        """Test that commands use the project's package manager."""
        snapshot = make_snapshot(dependencies={"react": "^18.2.0"}, files=["yarn.lock"])

        commands = ReactModule().commands(snapshot)

        assert commands.dev == ["yarn run dev", "yarn run start"]
        assert commands.lint == ["yarn run lint", "yarn run lint:fix"]
        assert commands.install == ["yarn install"]


class TestNextModule:
    """Tests for NextModule."""

    def test_excludes_react(self, make_snapshot) -> None:
        snapshot = make_snapshot(dependencies={"next": "^14.1.0", "react": "^18.2.0"})
        result = NextModule().probe(snapshot)
        assert result.accepted is True
        assert result.excludes == frozenset({"react"})

    def test_bare_pages_directory_is_not_next(self, make_snapshot) -> None:
        """Test that pages/ and app/ without next do not score."""
        snapshot = make_snapshot(files=["pages/index.js", "app/page.tsx"])
        assert NextModule().probe(snapshot).confidence == 0.0

    def test_next_and_react_detect_only_next(self, make_snapshot) -> None:
        """Test that an accepted Next.js removes React from the accepted set."""
        snapshot = make_snapshot(dependencies={"next": "^14.1.0", "react": "^18.2.0"})
        orchestrator = DetectionOrchestrator(ParallelModuleExecutor(sequential=True))

        report = orchestrator.detect(snapshot, [NextModule(), ReactModule()])

        assert report.accepted == ("next",)
        assert report.excluded == {"react": ("next",)}
        assert report.results["react"].accepted is True


class TestOtherFrameworks:
    """Tests for the remaining JavaScript frameworks."""

    def test_vue_files_alone_stay_at_threshold(self, make_snapshot) -> None:
        """Test that the .vue file signal is capped at the threshold."""
        files = [f"src/components/C{index}.vue" for index in range(10)]
        result = VueModule().probe(make_snapshot(files=files))
        assert result.confidence == 0.3
        assert result.accepted is False

    def test_nuxt_excludes_vue(self, make_snapshot) -> None:
        snapshot = make_snapshot(dependencies={"nuxt": "^3.10.0", "vue": "^3.4.0"})
        result = NuxtModule().probe(snapshot)
        assert result.accepted is True
        assert "vue" in result.excludes

    def test_sveltekit_excludes_svelte(self, make_snapshot) -> None:
        snapshot = make_snapshot(dev_dependencies={"@sveltejs/kit": "^2.0.0", "svelte": "^5.0.0"})
        result = SvelteKitModule().probe(snapshot)
        assert result.accepted is True
        assert result.excludes == frozenset({"svelte"})
        assert SvelteKitModule().resolve_version(snapshot) == "2"

    def test_astro_config_only(self, make_snapshot) -> None:
        """Test that an Astro config file alone is enough."""
        snapshot = make_snapshot(config_files=["astro.config.mjs"], files=["src/pages/index.astro"])
        result = AstroModule().probe(snapshot)
        assert result.accepted is True
        assert AstroModule().resolve_version(snapshot) is None
