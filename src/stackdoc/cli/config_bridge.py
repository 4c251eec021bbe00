"""Bridge between CLI arguments, configuration and pipeline objects."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict

from stackdoc.composition.content import GuidelineStore
from stackdoc.config.models import StackdocConfig
from stackdoc.core.logging import get_logger
from stackdoc.detection import IgnorePatterns, ProjectSnapshot, scan_project
from stackdoc.modules.catalog import ModuleCatalog
from stackdoc.modules.registry import create_catalog
from stackdoc.pipeline.executor import StackPipeline

LOGGER = get_logger(__name__)


class ConfigBridge:
    """Translates CLI arguments and configuration to runtime objects."""

    @staticmethod
    def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
        """Convert CLI arguments to config override dict.

        CLI arguments take precedence over config file values.

        Args:
            args: Parsed CLI arguments.

        Returns:
            Dictionary of config overrides.
        """
        overrides: Dict[str, Any] = {}

        output = getattr(args, "output", None)
        if output:
            overrides["output"] = {"file": output}

        if getattr(args, "sequential", False):
            overrides["pipeline"] = {"sequential": True}

        return overrides

    @staticmethod
    def create_catalog(config: StackdocConfig) -> ModuleCatalog:
        return create_catalog(
            enabled=config.modules.enabled,
            disabled=config.modules.disabled,
        )

    @staticmethod
    def create_pipeline(config: StackdocConfig, project_root: Path) -> StackPipeline:
        """Build a pipeline from configuration.

        Args:
            config: Loaded configuration.
            project_root: Root that relative guideline paths resolve against.

        Returns:
            Configured StackPipeline.
        """
        store = GuidelineStore(search_paths=config.guidelines.resolved_paths(project_root))
        return StackPipeline(
            catalog=ConfigBridge.create_catalog(config),
            store=store,
            config=config.pipeline,
        )

    @staticmethod
    def scan(config: StackdocConfig, project_root: Path) -> ProjectSnapshot:
        ignore = IgnorePatterns.for_project(project_root, config.ignore)
        LOGGER.debug(f"Scanning {project_root} (max {config.scan.max_files} files)")
        return scan_project(project_root, ignore=ignore, max_files=config.scan.max_files)

    @staticmethod
    def output_path(config: StackdocConfig, project_root: Path) -> Path:
        """Resolve the configured output file against the project root."""
        path = Path(config.output.file).expanduser()
        return path if path.is_absolute() else project_root / path
