"""Project scanner.

Walks a project directory once and builds the ProjectSnapshot shared by
every module probe:
- parses package.json, composer.json, pyproject.toml and requirements files
- records relative file and directory paths, skipping dependency and
  build directories
- records recognised configuration files at the root
"""

from __future__ import annotations

import fnmatch
import json
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set

from stackdoc.core.logging import get_logger
from stackdoc.detection.ignore import IgnorePatterns
from stackdoc.detection.snapshot import ProjectSnapshot

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

LOGGER = get_logger(__name__)

# Default cap on the number of files recorded
DEFAULT_MAX_FILES = 20000

# Directories recorded as present but never descended into
SKIP_DIRS = {
    ".git",
    ".svn",
    ".hg",
    "node_modules",
    "vendor",
    "__pycache__",
    ".venv",
    "venv",
    ".tox",
    ".pytest_cache",
    ".mypy_cache",
    ".ruff_cache",
    "dist",
    "build",
    "target",
    ".next",
    ".nuxt",
    ".output",
    ".svelte-kit",
    ".astro",
    "coverage",
    "storage",
    "bootstrap/cache",
}

# Root-level files recognised as configuration (fnmatch patterns)
CONFIG_FILE_PATTERNS = (
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "bun.lockb",
    "bun.lock",
    "composer.json",
    "composer.lock",
    "requirements*.txt",
    "Pipfile",
    "pyproject.toml",
    "setup.py",
    "Cargo.toml",
    "go.mod",
    "tsconfig*.json",
    "jsconfig.json",
    "vite.config.*",
    "vitest.config.*",
    "webpack.config.*",
    "next.config.*",
    "nuxt.config.*",
    "astro.config.*",
    "svelte.config.*",
    "vue.config.*",
    "tailwind.config.*",
    "postcss.config.*",
    "phpunit.xml",
    "phpunit.xml.dist",
    "pint.json",
    "artisan",
    "manage.py",
    ".nvmrc",
    ".node-version",
    ".php-version",
    ".env",
    "Dockerfile",
    "docker-compose.yml",
    "boost.json",
)

REQUIREMENTS_PATTERN = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def scan_project(
    project_root: Path,
    ignore: Optional[IgnorePatterns] = None,
    max_files: int = DEFAULT_MAX_FILES,
) -> ProjectSnapshot:
    """Build a snapshot of a project directory.

    Args:
        project_root: Directory to scan.
        ignore: Patterns excluding paths from the file listing.
        max_files: Stop recording files after this many.

    Returns:
        Immutable ProjectSnapshot.

    Raises:
        NotADirectoryError: If project_root is not a directory.
    """
    root = project_root.resolve()
    if not root.is_dir():
        raise NotADirectoryError(f"{root} is not a directory")

    files, directories = _walk(root, ignore, max_files)
    root_names = {path for path in files if "/" not in path}
    config_files = {
        name for name in root_names
        if any(fnmatch.fnmatch(name, pattern) for pattern in CONFIG_FILE_PATTERNS)
    }

    snapshot = ProjectSnapshot(
        root=root,
        package_json=_load_json_manifest(root / "package.json"),
        composer_json=_load_json_manifest(root / "composer.json"),
        python_dependencies=_python_dependencies(root, root_names),
        files=tuple(files),
        directories=frozenset(directories),
        config_files=frozenset(config_files),
    )
    LOGGER.info(
        f"Scanned {root}: {len(files)} files, {len(config_files)} config files"
    )
    return snapshot


def _walk(root: Path, ignore: Optional[IgnorePatterns], max_files: int) -> tuple[List[str], Set[str]]:
    files: List[str] = []
    directories: Set[str] = set()

    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        rel_dir = "" if rel_dir == "." else rel_dir

        kept: List[str] = []
        for name in sorted(dirnames):
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if ignore and ignore.matches(rel, is_dir=True):
                continue
            directories.add(rel)
            if name in SKIP_DIRS or rel in SKIP_DIRS:
                continue
            kept.append(name)
        dirnames[:] = kept

        for name in sorted(filenames):
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if ignore and ignore.matches(rel):
                continue
            files.append(rel)
            if len(files) >= max_files:
                LOGGER.warning(f"File limit of {max_files} reached while scanning {root}")
                return files, directories

    return files, directories


def _load_json_manifest(path: Path) -> Optional[Dict[str, Any]]:
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        LOGGER.warning(f"Ignoring malformed manifest {path}: {e}")
        return None
    if not isinstance(data, dict):
        LOGGER.warning(f"Ignoring manifest {path}: expected a JSON object")
        return None
    return data


def _python_dependencies(root: Path, root_names: Iterable[str]) -> Set[str]:
    deps: Set[str] = set()

    if "pyproject.toml" in root_names:
        try:
            with open(root / "pyproject.toml", "rb") as f:
                data = tomllib.load(f)
        except (OSError, ValueError) as e:
            LOGGER.warning(f"Ignoring malformed pyproject.toml: {e}")
            data = {}
        project = data.get("project", {})
        specs: List[str] = list(project.get("dependencies", []))
        for group in project.get("optional-dependencies", {}).values():
            specs.extend(group)
        deps.update(_requirement_names(specs))
        poetry = data.get("tool", {}).get("poetry", {}).get("dependencies", {})
        deps.update(_normalize(name) for name in poetry if name != "python")

    for name in root_names:
        if fnmatch.fnmatch(name, "requirements*.txt"):
            try:
                content = (root / name).read_text(encoding="utf-8")
            except (OSError, ValueError) as e:
                LOGGER.warning(f"Could not read {name}: {e}")
                continue
            deps.update(_requirement_names(content.splitlines()))

    return deps


def _requirement_names(lines: Iterable[str]) -> Set[str]:
    names = set()
    for line in lines:
        if not isinstance(line, str) or line.strip().startswith(("#", "-")):
            continue
        match = REQUIREMENTS_PATTERN.match(line)
        if match:
            names.add(_normalize(match.group(1)))
    return names


def _normalize(name: str) -> str:
    return re.sub(r"[-_.]+", "-", name).lower()
