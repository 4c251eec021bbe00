"""CSS frameworks."""

from __future__ import annotations

from typing import Optional

from stackdoc.core.models import DetectionResult, ModuleMetadata, PriorityClass
from stackdoc.core.versions import major_version
from stackdoc.detection.snapshot import ProjectSnapshot
from stackdoc.modules.base import LibraryModule
from stackdoc.modules.scoring import ScoreCard


class CssFrameworkModule(LibraryModule):
    priority_class = PriorityClass.CSS_FRAMEWORK
    guideline_file = "css-framework.md"


class TailwindModule(CssFrameworkModule):
    """Tailwind CSS.

    Weights: tailwindcss dependency 0.9, tailwind.config.* 0.8,
    @tailwindcss/vite or @tailwindcss/postcss 0.5, postcss config 0.1.
    """

    id = "tailwind"
    npm_package = "tailwindcss"
    metadata = ModuleMetadata(
        display_name="Tailwind CSS",
        description="Utility-first CSS framework",
        supported_versions=("3.x", "4.x"),
        keywords=("css", "utility-first", "styling"),
        homepage="https://tailwindcss.com",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.has_npm("tailwindcss"), 0.9, "tailwindcss dependency")
        card.add_if(
            any(name.startswith("tailwind.config.") for name in snapshot.config_files),
            0.8,
            "Tailwind config file",
        )
        card.add_if(
            snapshot.has_npm("@tailwindcss/vite") or snapshot.has_npm("@tailwindcss/postcss"),
            0.5,
            "Tailwind v4 integration package",
        )
        card.add_if(
            any(name.startswith("postcss.config.") for name in snapshot.config_files),
            0.1,
            "PostCSS config file",
        )
        return card.result(self.excludes)


class BootstrapModule(CssFrameworkModule):
    """Bootstrap.

    Weights: bootstrap npm dependency 0.9, twbs/bootstrap composer
    package 0.8, react-bootstrap or bootstrap-vue 0.3.
    """

    id = "bootstrap"
    npm_package = "bootstrap"
    composer_package = "twbs/bootstrap"
    metadata = ModuleMetadata(
        display_name="Bootstrap",
        description="Component-based CSS framework",
        supported_versions=("4.x", "5.x"),
        keywords=("css", "components", "responsive"),
        homepage="https://getbootstrap.com",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.has_npm("bootstrap"), 0.9, "bootstrap dependency")
        card.add_if(snapshot.has_composer("twbs/bootstrap"), 0.8, "twbs/bootstrap composer package")
        card.add_if(
            snapshot.has_npm("react-bootstrap") or snapshot.has_npm("bootstrap-vue"),
            0.3,
            "Bootstrap component bindings",
        )
        return card.result(self.excludes)


class BulmaModule(CssFrameworkModule):
    """Bulma. Guidelines exist for the 0.9 and 1.x lines only.

    Weights: bulma dependency 0.9, .sass/.scss files importing bulma 0.3.
    """

    id = "bulma"
    npm_package = "bulma"
    metadata = ModuleMetadata(
        display_name="Bulma",
        description="Flexbox-based CSS framework",
        supported_versions=("0.9.x", "1.x"),
        keywords=("css", "flexbox", "sass"),
        homepage="https://bulma.io",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.has_npm("bulma"), 0.9, "bulma dependency")
        if not card.evidence:
            return card.result()
        for path in snapshot.files_with_suffix(".scss", ".sass")[:20]:
            content = snapshot.read_text(path)
            if content and "bulma" in content:
                card.add(0.3, f"bulma imported in {path}")
                break
        return card.result(self.excludes)

    def resolve_version(self, snapshot: ProjectSnapshot) -> Optional[str]:
        major = major_version(super().resolve_version(snapshot))
        if major is None:
            return None
        return "1" if major >= 1 else "0.9"
