"""Version normalization and installed-version lookup.

Manifest ranges (``^18.2.0``, ``~11.0``, ``>=8.2 <9``, ``18.x``) are reduced
to the lowest version they admit. When the package is actually installed
(node_modules, package-lock.json, yarn.lock, vendor/composer/installed.json,
composer.lock) the installed version wins over the manifest range.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Tuple

from stackdoc.core.logging import get_logger

if TYPE_CHECKING:
    from stackdoc.detection.snapshot import ProjectSnapshot

LOGGER = get_logger(__name__)

VERSION_PATTERN = re.compile(r"(\d+)(?:\.(\d+|[xX*]))?")


@dataclass(frozen=True)
class VersionInfo:
    """Version of one package as seen in the manifest and on disk."""

    raw: str
    major: int
    installed: Optional[str] = None

    @property
    def source(self) -> str:
        return "both" if self.installed else "dependency"


def parse_version(spec: Optional[str]) -> Optional[Tuple[int, Optional[int]]]:
    """Return (major, minor) of the lowest version a range admits.

    Args:
        spec: Version string or range as written in a manifest.

    Returns:
        Tuple of major and minor (minor is None for wildcards), or None
        when the string carries no numeric version (``*``, ``dev-main``).
    """
    if not spec or not isinstance(spec, str):
        return None

    # Only the first alternative of "a || b" matters for the lower bound.
    first = spec.split("||")[0].strip()
    match = VERSION_PATTERN.search(first)
    if not match:
        return None

    major = int(match.group(1))
    minor_text = match.group(2)
    minor = int(minor_text) if minor_text and minor_text.isdigit() else None
    return major, minor


def major_version(spec: Optional[str]) -> Optional[int]:
    parsed = parse_version(spec)
    return parsed[0] if parsed else None


def major_minor(spec: Optional[str]) -> Optional[str]:
    """Return ``"major.minor"`` for a spec, or None if it lacks a minor."""
    parsed = parse_version(spec)
    if not parsed or parsed[1] is None:
        return None
    return f"{parsed[0]}.{parsed[1]}"


def _read_json(path: Path) -> Optional[Any]:
    if not path.is_file():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        LOGGER.debug(f"Could not read {path}: {e}")
        return None


def installed_npm_version(project_root: Path, package: str) -> Optional[str]:
    """Look up the installed version of an npm package.

    Checks node_modules first, then package-lock.json (v1 and v2+
    layouts), then yarn.lock.
    """
    manifest = _read_json(project_root / "node_modules" / package / "package.json")
    if isinstance(manifest, dict) and manifest.get("version"):
        return str(manifest["version"])

    lock = _read_json(project_root / "package-lock.json")
    if isinstance(lock, dict):
        entry = (lock.get("dependencies") or {}).get(package) or (
            lock.get("packages") or {}
        ).get(f"node_modules/{package}")
        if isinstance(entry, dict) and entry.get("version"):
            return str(entry["version"])
        return None

    yarn_lock = project_root / "yarn.lock"
    if yarn_lock.is_file():
        try:
            content = yarn_lock.read_text(encoding="utf-8")
        except OSError as e:
            LOGGER.debug(f"Could not read {yarn_lock}: {e}")
            return None
        pattern = re.compile(
            rf'^"?{re.escape(package)}@[^\n]*:\s*\n\s+version:?\s+"?([^"\s]+)"?',
            re.MULTILINE,
        )
        match = pattern.search(content)
        if match:
            return match.group(1)

    return None


def installed_composer_version(project_root: Path, package: str) -> Optional[str]:
    """Look up the installed version of a composer package.

    Checks vendor/composer/installed.json first, then composer.lock.
    """
    installed = _read_json(project_root / "vendor" / "composer" / "installed.json")
    if installed is not None:
        packages = installed.get("packages", []) if isinstance(installed, dict) else installed
        return _find_composer_package(packages, package)

    lock = _read_json(project_root / "composer.lock")
    if isinstance(lock, dict):
        packages = list(lock.get("packages") or []) + list(lock.get("packages-dev") or [])
        return _find_composer_package(packages, package)

    return None


def _find_composer_package(packages: Any, name: str) -> Optional[str]:
    if not isinstance(packages, list):
        return None
    for entry in packages:
        if isinstance(entry, dict) and entry.get("name") == name and entry.get("version"):
            return str(entry["version"])
    return None


def npm_version_info(snapshot: "ProjectSnapshot", package: str) -> Optional[VersionInfo]:
    """Resolve the effective version of an npm dependency."""
    spec = snapshot.npm_dependency(package)
    if spec is None:
        return None
    return _effective(spec, installed_npm_version(snapshot.root, package))


def composer_version_info(snapshot: "ProjectSnapshot", package: str) -> Optional[VersionInfo]:
    """Resolve the effective version of a composer requirement."""
    spec = snapshot.composer_requirement(package)
    if spec is None:
        return None
    return _effective(spec, installed_composer_version(snapshot.root, package))


def _effective(spec: str, installed: Optional[str]) -> Optional[VersionInfo]:
    installed_major = major_version(installed)
    spec_major = major_version(spec)
    major = installed_major if installed_major is not None else spec_major
    if major is None:
        return None
    return VersionInfo(
        raw=spec,
        major=major,
        installed=installed if installed_major is not None else None,
    )
