"""Typed configuration for stackdoc."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from stackdoc.detection.scanner import DEFAULT_MAX_FILES
from stackdoc.pipeline.parallel import DEFAULT_MAX_WORKERS, DEFAULT_TIMEOUT

DEFAULT_OUTPUT_FILE = "CLAUDE.md"


@dataclass
class OutputConfig:
    """Where the generated document is written."""

    file: str = DEFAULT_OUTPUT_FILE


@dataclass
class ModulesConfig:
    """Module enable/disable lists.

    A non-empty ``enabled`` list is an allow-list: only the named modules
    stay enabled. ``disabled`` is applied afterwards.
    """

    enabled: List[str] = field(default_factory=list)
    disabled: List[str] = field(default_factory=list)


@dataclass
class GuidelinesConfig:
    """Directories searched for guideline overrides before bundled content."""

    paths: List[str] = field(default_factory=list)

    def resolved_paths(self, project_root: Path) -> List[Path]:
        """Resolve relative paths against the project root."""
        resolved = []
        for raw in self.paths:
            path = Path(raw).expanduser()
            resolved.append(path if path.is_absolute() else project_root / path)
        return resolved


@dataclass
class PipelineConfig:
    """Configuration for pipeline execution."""

    max_workers: int = DEFAULT_MAX_WORKERS
    timeout: Optional[float] = DEFAULT_TIMEOUT
    sequential: bool = False


@dataclass
class ScanConfig:
    max_files: int = DEFAULT_MAX_FILES


@dataclass
class StackdocConfig:
    """Complete stackdoc configuration."""

    version: int = 1
    output: OutputConfig = field(default_factory=OutputConfig)
    modules: ModulesConfig = field(default_factory=ModulesConfig)
    guidelines: GuidelinesConfig = field(default_factory=GuidelinesConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    ignore: List[str] = field(default_factory=list)

    # Where this config was assembled from, e.g. "project:/repo/.stackdoc.yml"
    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def sources(self) -> List[str]:
        return list(self._config_sources)
