"""Detect command implementation."""

from __future__ import annotations

import json
from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from stackdoc.config.models import StackdocConfig

from stackdoc.cli.commands import Command
from stackdoc.cli.config_bridge import ConfigBridge
from stackdoc.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_PIPELINE_ERROR, EXIT_SUCCESS
from stackdoc.config.loader import get_default_config
from stackdoc.core.errors import StackdocError
from stackdoc.core.logging import get_logger
from stackdoc.detection.snapshot import ProjectSnapshot
from stackdoc.pipeline.executor import PipelineResult

LOGGER = get_logger(__name__)


def display_detection(result: PipelineResult, snapshot: ProjectSnapshot) -> None:
    """Print a short summary of accepted modules."""
    print("Detected:")
    print(f"  Runtime:      {snapshot.runtime}")
    if snapshot.package_managers:
        print(f"  Packages:     {', '.join(snapshot.package_managers)}")

    if result.modules:
        for module in result.modules:
            version = result.versions.get(module.id)
            label = f"{module.display_name} {version}" if version else module.display_name
            confidence = result.report.results[module.id].confidence
            print(f"  {module.kind.value.title():<13} {label} ({confidence:.0%})")
    else:
        print("  (no frameworks or languages detected; using Generic)")
    print()


class DetectCommand(Command):
    """Prints detection results without writing anything."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "detect"

    def execute(self, args: Namespace, config: "StackdocConfig | None" = None) -> int:
        """Execute the detect command.

        Args:
            args: Parsed command-line arguments.
            config: Loaded stackdoc configuration.

        Returns:
            Exit code.
        """
        config = config or get_default_config()
        project_root = Path(args.path).resolve()
        if not project_root.is_dir():
            print(f"Error: {project_root} is not a directory")
            return EXIT_INVALID_USAGE

        try:
            snapshot = ConfigBridge.scan(config, project_root)
            result = ConfigBridge.create_pipeline(config, project_root).run(snapshot)
        except (StackdocError, OSError) as e:
            LOGGER.error(f"Detection failed: {e}")
            return EXIT_PIPELINE_ERROR

        if getattr(args, "json", False):
            print(json.dumps(self._to_dict(result, snapshot), indent=2))
            return EXIT_SUCCESS

        display_detection(result, snapshot)
        if getattr(args, "show_details", False):
            self._display_details(result)
        return EXIT_SUCCESS

    def _to_dict(self, result: PipelineResult, snapshot: ProjectSnapshot) -> Dict[str, Any]:
        return {
            "project_root": str(snapshot.root),
            "runtime": snapshot.runtime,
            "package_managers": snapshot.package_managers,
            "detection": result.report.to_dict(),
            "versions": result.versions,
            "commands": result.commands.to_dict(),
            "guidelines": [fragment.reference.relative_path for fragment in result.fragments],
            "diagnostics": [entry.to_dict() for entry in result.diagnostics.entries],
        }

    def _display_details(self, result: PipelineResult) -> None:
        """Print confidence and evidence for every probed module."""
        print("All modules:")
        ranked = sorted(
            result.report.results.items(),
            key=lambda item: (-item[1].confidence, item[0]),
        )
        for module_id, detection in ranked:
            if result.report.is_accepted(module_id):
                status = "accepted"
            elif module_id in result.report.excluded:
                status = f"excluded by {', '.join(result.report.excluded[module_id])}"
            elif module_id in result.report.failed:
                status = "failed"
            else:
                status = "rejected"
            print(f"  {module_id:<14} {detection.confidence:.2f}  {status}")
            for evidence in detection.evidence:
                print(f"      - {evidence}")

        if result.diagnostics.entries:
            print("\nDiagnostics:")
            for entry in result.diagnostics.entries:
                print(f"  {entry.severity.value}: {entry}")
