"""Module contract.

A module detects one technology in a project snapshot and names the
guideline content that applies to it. There are three variants:

- FrameworkModule: application frameworks, contributes commands
- LibraryModule: CSS frameworks and ecosystem tools, may contribute commands
- LanguageModule: programming languages, never contributes commands

Modules are stateless between runs; everything they need comes from the
snapshot passed to each call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, FrozenSet, List, Optional, Tuple

from stackdoc.core.models import (
    DetectionResult,
    GuidelineCategory,
    GuidelineReference,
    ModuleKind,
    ModuleMetadata,
    PriorityClass,
    StackCommands,
)
from stackdoc.core.versions import composer_version_info, npm_version_info
from stackdoc.detection.snapshot import ProjectSnapshot


class Module(ABC):
    """Base class for all modules."""

    id: ClassVar[str]
    kind: ClassVar[ModuleKind]
    priority_class: ClassVar[PriorityClass]
    metadata: ClassVar[ModuleMetadata]

    # Module ids removed from the accepted set when this module is accepted.
    excludes: ClassVar[FrozenSet[str]] = frozenset()

    # Packages whose installed or declared version is the module's version.
    composer_package: ClassVar[Optional[str]] = None
    npm_package: ClassVar[Optional[str]] = None

    # Core guideline file name under "<id>/guidelines/".
    guideline_file: ClassVar[str] = "framework.md"
    # Extra unversioned guideline files, emitted after the core one.
    extra_guidelines: ClassVar[Tuple[str, ...]] = ()

    @property
    def display_name(self) -> str:
        return self.metadata.display_name

    @property
    def guideline_category(self) -> GuidelineCategory:
        return GuidelineCategory.FRAMEWORK

    @abstractmethod
    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        """Score how likely it is that the project uses this technology."""

    def resolve_version(self, snapshot: ProjectSnapshot) -> Optional[str]:
        """Return the major version in use, or None if unknown.

        The default looks up ``composer_package`` then ``npm_package``,
        preferring the installed version over the manifest range.
        """
        info = None
        if self.composer_package:
            info = composer_version_info(snapshot, self.composer_package)
        if info is None and self.npm_package:
            info = npm_version_info(snapshot, self.npm_package)
        return str(info.major) if info else None

    def guideline_refs(self, version: Optional[str] = None) -> List[GuidelineReference]:
        """Return this module's guideline references, core reference first.

        Args:
            version: Resolved version, or None.

        Returns:
            The core reference, any extra references, then the
            version-specific ``<version>/features.md`` reference when a
            version is known.
        """
        refs = [self._ref(self.guideline_file, version)]
        refs.extend(self._ref(name, version) for name in self.extra_guidelines)
        if version:
            refs.append(self._ref(f"{version}/features.md", version))
        return refs

    def _ref(self, name: str, version: Optional[str]) -> GuidelineReference:
        return GuidelineReference(
            relative_path=f"{self.id}/guidelines/{name}",
            priority_class=self.priority_class,
            category=self.guideline_category,
            version=version,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"


class CommandProvider(ABC):
    """Extension for modules that suggest development commands."""

    @abstractmethod
    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        """Return the commands this module suggests for the project."""


class FrameworkModule(Module, CommandProvider):
    kind = ModuleKind.FRAMEWORK


class LibraryModule(Module, CommandProvider):
    kind = ModuleKind.LIBRARY

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        return StackCommands()


class LanguageModule(Module):
    kind = ModuleKind.LANGUAGE
    guideline_file = "language.md"

    @property
    def guideline_category(self) -> GuidelineCategory:
        return GuidelineCategory.LANGUAGE


def js_package_manager(snapshot: ProjectSnapshot) -> str:
    """Package manager used in suggested JavaScript commands."""
    return snapshot.preferred_package_manager or "npm"

