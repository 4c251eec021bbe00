"""Read-only view of a project used by every module probe."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

# Lockfile name to package manager, in detection order.
LOCKFILE_MANAGERS: Tuple[Tuple[str, str], ...] = (
    ("package-lock.json", "npm"),
    ("yarn.lock", "yarn"),
    ("pnpm-lock.yaml", "pnpm"),
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("composer.lock", "composer"),
)

# Preferred JavaScript package manager when several lockfiles exist.
JS_MANAGER_PREFERENCE: Tuple[str, ...] = ("bun", "yarn", "pnpm", "npm")


@dataclass(frozen=True)
class ProjectSnapshot:
    """Pre-parsed manifests and file listing of one project.

    Built once per run and shared by all probes. Probes must treat it as
    immutable; modules that need lockfile data read it from ``root``.
    """

    root: Path
    """Project root directory."""

    package_json: Optional[Dict[str, Any]] = None
    """Parsed package.json, or None if absent or malformed."""

    composer_json: Optional[Dict[str, Any]] = None
    """Parsed composer.json, or None if absent or malformed."""

    python_dependencies: FrozenSet[str] = frozenset()
    """Lowercased Python distribution names from pyproject/requirements."""

    files: Tuple[str, ...] = ()
    """Relative POSIX paths of files found, in walk order."""

    directories: FrozenSet[str] = frozenset()
    """Relative POSIX paths of directories found, skipped ones included."""

    config_files: FrozenSet[str] = frozenset()
    """Names of recognised configuration files at the project root."""

    _file_set: FrozenSet[str] = field(default=frozenset(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", tuple(self.files))
        object.__setattr__(self, "directories", frozenset(self.directories))
        object.__setattr__(self, "config_files", frozenset(self.config_files))
        object.__setattr__(self, "python_dependencies", frozenset(self.python_dependencies))
        object.__setattr__(self, "_file_set", frozenset(self.files))

    # package.json

    def _npm_section(self, name: str) -> Dict[str, str]:
        if not self.package_json:
            return {}
        section = self.package_json.get(name)
        return section if isinstance(section, dict) else {}

    @property
    def dependencies(self) -> Dict[str, str]:
        return self._npm_section("dependencies")

    @property
    def dev_dependencies(self) -> Dict[str, str]:
        return self._npm_section("devDependencies")

    @property
    def scripts(self) -> Dict[str, str]:
        return self._npm_section("scripts")

    @property
    def engines(self) -> Dict[str, str]:
        return self._npm_section("engines")

    def npm_dependency(self, name: str) -> Optional[str]:
        """Return the version range of an npm package, dependencies first."""
        if name in self.dependencies:
            return str(self.dependencies[name])
        if name in self.dev_dependencies:
            return str(self.dev_dependencies[name])
        return None

    def has_npm(self, name: str) -> bool:
        return self.npm_dependency(name) is not None

    def npm_names(self) -> List[str]:
        return list(self.dependencies) + [
            name for name in self.dev_dependencies if name not in self.dependencies
        ]

    # composer.json

    def _composer_section(self, name: str) -> Dict[str, str]:
        if not self.composer_json:
            return {}
        section = self.composer_json.get(name)
        return section if isinstance(section, dict) else {}

    @property
    def composer_require(self) -> Dict[str, str]:
        return self._composer_section("require")

    @property
    def composer_require_dev(self) -> Dict[str, str]:
        return self._composer_section("require-dev")

    def composer_requirement(self, name: str) -> Optional[str]:
        """Return the constraint of a composer package, require first."""
        if name in self.composer_require:
            return str(self.composer_require[name])
        if name in self.composer_require_dev:
            return str(self.composer_require_dev[name])
        return None

    def has_composer(self, name: str) -> bool:
        return self.composer_requirement(name) is not None

    # files

    def has_config(self, name: str) -> bool:
        return name in self.config_files

    def has_any_config(self, *names: str) -> bool:
        return any(name in self.config_files for name in names)

    def has_file(self, relative_path: str) -> bool:
        return relative_path in self._file_set

    def has_dir(self, relative_path: str) -> bool:
        relative_path = relative_path.rstrip("/")
        if relative_path in self.directories:
            return True
        prefix = relative_path + "/"
        return any(path.startswith(prefix) for path in self.files)

    def files_with_suffix(self, *suffixes: str) -> List[str]:
        return [path for path in self.files if path.endswith(suffixes)]

    def files_under(self, directory: str, *suffixes: str) -> List[str]:
        prefix = directory.rstrip("/") + "/"
        return [
            path for path in self.files
            if path.startswith(prefix) and (not suffixes or path.endswith(suffixes))
        ]

    def read_text(self, relative_path: str) -> Optional[str]:
        """Read a project file, returning None when it is missing or unreadable."""
        try:
            return (self.root / relative_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

    # derived project information

    @property
    def package_managers(self) -> List[str]:
        managers: List[str] = []
        for lockfile, manager in LOCKFILE_MANAGERS:
            if (self.has_file(lockfile) or self.has_config(lockfile)) and manager not in managers:
                managers.append(manager)
        if self.package_json is not None and not any(m in managers for m in JS_MANAGER_PREFERENCE):
            managers.append("npm")
        if self.composer_json is not None and "composer" not in managers:
            managers.append("composer")
        return managers

    @property
    def preferred_package_manager(self) -> Optional[str]:
        """Preferred JavaScript package manager: bun > yarn > pnpm > npm."""
        managers = self.package_managers
        for manager in JS_MANAGER_PREFERENCE:
            if manager in managers:
                return manager
        return None

    @property
    def runtime(self) -> str:
        if self.has_any_config("bun.lockb", "bun.lock"):
            return "bun"
        if self.package_json is not None:
            return "node"
        if self.composer_json is not None:
            return "php"
        if self.python_dependencies or self.has_any_config(
            "pyproject.toml", "requirements.txt", "Pipfile", "setup.py"
        ):
            return "python"
        if self.has_config("Cargo.toml"):
            return "rust"
        if self.has_config("go.mod"):
            return "go"
        return "generic"
