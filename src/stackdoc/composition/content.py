"""Guideline content resolution.

Guideline references are relative paths such as
``react/guidelines/framework.md``. The store looks them up in the
user-configured directories first, then in the guidelines bundled with
the package.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from importlib import resources
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

from stackdoc.core.errors import GuidelineNotFoundError
from stackdoc.core.logging import get_logger

LOGGER = get_logger(__name__)

BUNDLED_PACKAGE = "stackdoc"
BUNDLED_DIR = "guidelines"


class GuidelineSource(ABC):
    """Resolves a guideline reference path to its content."""

    @abstractmethod
    def load(self, relative_path: str) -> str:
        """Return the content of a guideline.

        Raises:
            GuidelineNotFoundError: If the guideline does not exist.
        """


def _validate(relative_path: str) -> PurePosixPath:
    path = PurePosixPath(relative_path)
    if not relative_path or path.is_absolute() or ".." in path.parts:
        raise GuidelineNotFoundError(relative_path, "is not a valid relative path")
    return path


class GuidelineStore(GuidelineSource):
    """Filesystem-backed guideline store with bundled fallback."""

    def __init__(
        self,
        search_paths: Iterable[Path] = (),
        include_bundled: bool = True,
    ) -> None:
        """Initialize the store.

        Args:
            search_paths: Directories searched before the bundled content.
            include_bundled: Whether to fall back to bundled guidelines.
        """
        self._search_paths: List[Path] = [Path(p) for p in search_paths]
        self._include_bundled = include_bundled

    @property
    def search_paths(self) -> List[Path]:
        return list(self._search_paths)

    def load(self, relative_path: str) -> str:
        path = _validate(relative_path)

        for directory in self._search_paths:
            candidate = directory.joinpath(*path.parts)
            if candidate.is_file():
                LOGGER.debug(f"Loaded guideline {relative_path} from {directory}")
                return candidate.read_text(encoding="utf-8")

        if self._include_bundled:
            content = self._load_bundled(path)
            if content is not None:
                return content

        raise GuidelineNotFoundError(relative_path)

    def _load_bundled(self, path: PurePosixPath) -> Optional[str]:
        resource = resources.files(BUNDLED_PACKAGE).joinpath(BUNDLED_DIR)
        for part in path.parts:
            resource = resource.joinpath(part)
        if resource.is_file():
            return resource.read_text(encoding="utf-8")
        return None

    def list_available(self) -> List[str]:
        """List bundled guideline paths, sorted."""
        found: List[str] = []
        root = resources.files(BUNDLED_PACKAGE).joinpath(BUNDLED_DIR)

        def walk(node, prefix: str) -> None:
            for child in node.iterdir():
                name = f"{prefix}{child.name}"
                if child.is_dir():
                    walk(child, f"{name}/")
                elif child.name.endswith(".md"):
                    found.append(name)

        if root.is_dir():
            walk(root, "")
        return sorted(found)
