"""Gitignore-style exclusion of paths from the project scan.

Patterns come from the ``.stackdocignore`` file at the project root and
from the ``ignore`` list of the configuration. Matching uses pathspec, so
``**`` globbing, ``!`` negation and ``#`` comments all behave as in git.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

import pathspec

from stackdoc.core.logging import get_logger

LOGGER = get_logger(__name__)

IGNORE_FILE_NAME = ".stackdocignore"


class IgnorePatterns:
    """A compiled set of gitignore-style patterns."""

    def __init__(self, patterns: Iterable[str], source: str = "config") -> None:
        self._source = source
        self._patterns: List[str] = [
            p.strip() for p in patterns if p.strip() and not p.strip().startswith("#")
        ]
        self._spec = pathspec.PathSpec.from_lines(
            pathspec.patterns.GitWildMatchPattern,
            self._patterns,
        )
        if self._patterns:
            LOGGER.debug(f"Loaded {len(self._patterns)} ignore patterns from {source}")

    @property
    def patterns(self) -> List[str]:
        return list(self._patterns)

    def __bool__(self) -> bool:
        return bool(self._patterns)

    def matches(self, relative_path: str, is_dir: bool = False) -> bool:
        """Check a relative POSIX path against the patterns.

        Directories are matched with a trailing slash so that patterns
        like ``build/`` apply to them.
        """
        candidate = relative_path.replace("\\", "/")
        if is_dir and not candidate.endswith("/"):
            candidate += "/"
        return self._spec.match_file(candidate)

    @classmethod
    def from_file(cls, file_path: Path) -> Optional["IgnorePatterns"]:
        if not file_path.is_file():
            return None
        try:
            content = file_path.read_text(encoding="utf-8")
        except OSError as e:
            LOGGER.warning(f"Failed to load ignore file {file_path}: {e}")
            return None
        return cls(content.splitlines(), source=str(file_path))

    @classmethod
    def for_project(cls, project_root: Path, extra: Iterable[str] = ()) -> "IgnorePatterns":
        """Combine the project's ignore file with extra (config) patterns."""
        patterns: List[str] = []
        from_file = cls.from_file(project_root / IGNORE_FILE_NAME)
        if from_file is not None:
            patterns.extend(from_file.patterns)
        patterns.extend(extra)
        return cls(patterns, source=f"{project_root}")
