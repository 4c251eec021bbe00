"""Programming language modules."""

from __future__ import annotations

import re
from typing import List, Optional

from stackdoc.core.models import (
    DetectionResult,
    GuidelineReference,
    ModuleMetadata,
    PriorityClass,
)
from stackdoc.core.versions import major_minor, major_version
from stackdoc.detection.snapshot import ProjectSnapshot
from stackdoc.modules.base import LanguageModule
from stackdoc.modules.scoring import ScoreCard

# ECMAScript edition assumed when no Node.js version is declared
DEFAULT_ES_VERSION = "ES2020"


class TypeScriptModule(LanguageModule):
    """TypeScript.

    Weights: tsconfig.json 0.9, typescript dependency 0.8, .ts/.tsx files
    (declarations excluded) 0.1 each up to 0.7, .d.ts files 0.05 each up
    to 0.3, @types packages 0.1, other tsconfig variants 0.2 each.
    """

    id = "typescript"
    priority_class = PriorityClass.SPECIALIZED_LANGUAGE
    npm_package = "typescript"
    metadata = ModuleMetadata(
        display_name="TypeScript",
        description="Typed superset of JavaScript",
        supported_versions=("4.x", "5.x"),
        keywords=("javascript", "types", "compiler"),
        homepage="https://www.typescriptlang.org",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.has_config("tsconfig.json"), 0.9, "tsconfig.json")
        card.add_if(snapshot.has_npm("typescript"), 0.8, "typescript dependency")
        sources = [
            path for path in snapshot.files_with_suffix(".ts", ".tsx") if not path.endswith(".d.ts")
        ]
        card.add_count(len(sources), 0.1, 0.7, "TypeScript files")
        card.add_count(len(snapshot.files_with_suffix(".d.ts")), 0.05, 0.3, "declaration files")
        card.add_if(
            any(name.startswith("@types/") for name in snapshot.npm_names()), 0.1, "@types packages"
        )
        card.add_each(
            sorted(
                name for name in snapshot.config_files
                if name.startswith("tsconfig.") and name != "tsconfig.json"
            ),
            0.2,
            "TypeScript config file",
        )
        return card.result(self.excludes)


class PHPModule(LanguageModule):
    """PHP. Versions are major.minor, e.g. ``8.3``.

    Weights: composer.json 0.9, .php files 0.1 each up to 0.7, PHP tool
    config files 0.2 each, src/ or app/ 0.1 each, index.php or
    public/index.php 0.2 each.
    """

    id = "php"
    priority_class = PriorityClass.SPECIALIZED_LANGUAGE
    metadata = ModuleMetadata(
        display_name="PHP",
        description="Server-side scripting language",
        supported_versions=("8.1", "8.2", "8.3", "8.4"),
        keywords=("php", "backend"),
        homepage="https://www.php.net",
    )

    CONFIG_FILES = ("php.ini", ".php-version", ".php-cs-fixer.php", "phpunit.xml", "phpstan.neon")
    ENTRY_POINTS = ("index.php", "public/index.php")

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.composer_json is not None, 0.9, "composer.json")
        card.add_count(len(snapshot.files_with_suffix(".php")), 0.1, 0.7, "PHP files")
        card.add_each(
            [name for name in self.CONFIG_FILES if snapshot.has_file(name)], 0.2, "PHP config file"
        )
        if card.evidence:
            for directory in ("src", "app"):
                card.add_if(snapshot.has_dir(directory), 0.1, f"PHP directory: {directory}")
        card.add_each(
            [path for path in self.ENTRY_POINTS if snapshot.has_file(path)], 0.2, "PHP entry point"
        )
        return card.result(self.excludes)

    def resolve_version(self, snapshot: ProjectSnapshot) -> Optional[str]:
        constraint = snapshot.composer_require.get("php")
        version = major_minor(str(constraint)) if constraint else None
        if version:
            return version

        pinned = snapshot.read_text(".php-version")
        if pinned:
            version = major_minor(pinned.strip())
            if version:
                return version

        lock = snapshot.read_text("composer.lock")
        if lock:
            match = re.search(r'"platform"\s*:\s*\{[^}]*"php"\s*:\s*"([^"]+)"', lock)
            if match:
                return major_minor(match.group(1))
        return None


class JavaScriptModule(LanguageModule):
    """JavaScript. Versions are ECMAScript editions, e.g. ``ES2022``.

    Weights: package.json 0.8, .js/.mjs/.cjs files 0.05 each up to 0.5,
    Node.js lockfiles 0.2 each, JavaScript tool configs 0.1 each, src/ or
    lib/ 0.05 each. Halved when TypeScript sources outnumber JavaScript.
    """

    id = "javascript"
    priority_class = PriorityClass.BASE_LANGUAGE
    metadata = ModuleMetadata(
        display_name="JavaScript",
        description="The language of the web",
        supported_versions=("ES2015+",),
        keywords=("javascript", "node", "browser"),
        homepage="https://developer.mozilla.org/docs/Web/JavaScript",
    )

    NODE_FILES = ("package-lock.json", "yarn.lock", "pnpm-lock.yaml", "bun.lockb")
    TOOL_CONFIGS = (
        ".eslintrc.js",
        ".eslintrc.json",
        "eslint.config.js",
        ".babelrc",
        "babel.config.js",
        "webpack.config.js",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.package_json is not None, 0.8, "package.json")
        js_files = snapshot.files_with_suffix(".js", ".mjs", ".cjs")
        card.add_count(len(js_files), 0.05, 0.5, "JavaScript files")
        card.add_each(
            [name for name in self.NODE_FILES if snapshot.has_file(name)], 0.2, "Node.js file"
        )
        card.add_each(
            [name for name in self.TOOL_CONFIGS if snapshot.has_file(name)], 0.1, "JavaScript config"
        )
        if card.evidence:
            for directory in ("src", "lib"):
                card.add_if(snapshot.has_dir(directory), 0.05, f"JavaScript directory: {directory}")
        ts_files = [
            path for path in snapshot.files_with_suffix(".ts") if not path.endswith(".d.ts")
        ]
        if len(ts_files) > len(js_files):
            card.scale(0.5, "more TypeScript than JavaScript files")
        return card.result(self.excludes)

    def resolve_version(self, snapshot: ProjectSnapshot) -> Optional[str]:
        node = snapshot.engines.get("node")
        if not node:
            node = (snapshot.read_text(".nvmrc") or "").strip() or None
        major = major_version(str(node)) if node else None
        if major is None:
            return DEFAULT_ES_VERSION if snapshot.package_json is not None else None
        # Rough mapping: Node 6 shipped ES2015, one edition per release since.
        return f"ES{2015 + major - 6}"

    def guideline_refs(self, version: Optional[str] = None) -> List[GuidelineReference]:
        # Guidelines are not split by ECMAScript edition.
        return super().guideline_refs(None)
