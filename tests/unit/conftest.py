"""Shared fixtures for stackdoc unit tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional

import pytest

from stackdoc.core.models import (
    DetectionResult,
    ModuleMetadata,
    PriorityClass,
    StackCommands,
)
from stackdoc.detection.snapshot import ProjectSnapshot
from stackdoc.modules.base import FrameworkModule, LanguageModule, LibraryModule
from stackdoc.modules.catalog import ModuleCatalog


class StubFramework(FrameworkModule):
    """Framework module with a fixed probe result and commands."""

    priority_class = PriorityClass.FRAMEWORK

    def __init__(
        self,
        module_id: str,
        confidence: float = 0.9,
        excludes: Iterable[str] = (),
        display_name: Optional[str] = None,
        priority: PriorityClass = PriorityClass.FRAMEWORK,
        commands: Optional[StackCommands] = None,
        version: Optional[str] = None,
    ) -> None:
        self.id = module_id  # type: ignore[misc]
        self.priority_class = priority  # type: ignore[misc]
        self.metadata = ModuleMetadata(display_name=display_name or module_id.title())  # type: ignore[misc]
        self._confidence = confidence
        self._excludes = frozenset(excludes)
        self._commands = commands or StackCommands()
        self._version = version

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        return DetectionResult(
            confidence=self._confidence,
            evidence=(f"stub {self.id}",),
            excludes=self._excludes,
        )

    def resolve_version(self, snapshot: ProjectSnapshot) -> Optional[str]:
        return self._version

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        return StackCommands.merged([self._commands])


class StubLanguage(LanguageModule):
    """Language module with a fixed probe result."""

    priority_class = PriorityClass.BASE_LANGUAGE

    def __init__(self, module_id: str, confidence: float = 0.9, display_name: Optional[str] = None) -> None:
        self.id = module_id  # type: ignore[misc]
        self.metadata = ModuleMetadata(display_name=display_name or module_id.title())  # type: ignore[misc]
        self._confidence = confidence

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        return DetectionResult(confidence=self._confidence)


class StubLibrary(LibraryModule):
    """Library module with a fixed probe result."""

    priority_class = PriorityClass.CSS_FRAMEWORK

    def __init__(self, module_id: str, confidence: float = 0.9, display_name: Optional[str] = None) -> None:
        self.id = module_id  # type: ignore[misc]
        self.metadata = ModuleMetadata(display_name=display_name or module_id.title())  # type: ignore[misc]
        self._confidence = confidence

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        return DetectionResult(confidence=self._confidence)


@pytest.fixture
def make_snapshot(tmp_path: Path) -> Callable[..., ProjectSnapshot]:
    """Build a ProjectSnapshot rooted at tmp_path without touching the disk."""

    def _make(
        dependencies: Optional[Dict[str, str]] = None,
        dev_dependencies: Optional[Dict[str, str]] = None,
        composer_require: Optional[Dict[str, str]] = None,
        composer_require_dev: Optional[Dict[str, str]] = None,
        files: Iterable[str] = (),
        directories: Iterable[str] = (),
        config_files: Iterable[str] = (),
        package_json: Optional[Dict[str, Any]] = None,
    ) -> ProjectSnapshot:
        if package_json is None and (dependencies or dev_dependencies):
            package_json = {
                "dependencies": dict(dependencies or {}),
                "devDependencies": dict(dev_dependencies or {}),
            }
        composer_json = None
        if composer_require is not None or composer_require_dev is not None:
            composer_json = {
                "require": dict(composer_require or {}),
                "require-dev": dict(composer_require_dev or {}),
            }
        config_files = set(config_files)
        if package_json is not None:
            config_files.add("package.json")
        if composer_json is not None:
            config_files.add("composer.json")
        return ProjectSnapshot(
            root=tmp_path,
            package_json=package_json,
            composer_json=composer_json,
            files=tuple(files),
            directories=frozenset(directories),
            config_files=frozenset(config_files),
        )

    return _make


@pytest.fixture
def make_catalog() -> Callable[..., ModuleCatalog]:
    """Build a catalog from module instances."""

    def _make(*modules: Any) -> ModuleCatalog:
        return ModuleCatalog(modules)

    return _make


@pytest.fixture
def stackdoc_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point STACKDOC_HOME at an empty directory so no global config leaks in."""
    home = tmp_path / "stackdoc-home"
    home.mkdir()
    monkeypatch.setenv("STACKDOC_HOME", str(home))
    return home


@pytest.fixture
def react_project(tmp_path: Path) -> Path:
    """A small React + TypeScript project on disk."""
    root = tmp_path / "app"
    (root / "src").mkdir(parents=True)
    (root / "package.json").write_text(
        json.dumps({
            "dependencies": {"react": "^18.2.0", "react-dom": "^18.2.0"},
            "scripts": {"dev": "vite", "build": "vite build"},
        })
    )
    (root / "tsconfig.json").write_text("{}")
    (root / "src" / "App.tsx").write_text("export const App = () => null;\n")
    return root
