"""Init command implementation.

Full generation:
1. Decide what to do about an existing output file
2. Scan the project and run the pipeline
3. Write (or, on a dry run, print) the merged document
"""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import questionary
from questionary import Style

if TYPE_CHECKING:
    from stackdoc.config.models import StackdocConfig

from stackdoc.cli.commands import Command
from stackdoc.cli.commands.detect import display_detection
from stackdoc.cli.config_bridge import ConfigBridge
from stackdoc.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_PIPELINE_ERROR, EXIT_SUCCESS
from stackdoc.composition.markers import MarkerManager
from stackdoc.config.loader import get_default_config
from stackdoc.core.errors import StackdocError
from stackdoc.core.logging import get_logger
from stackdoc.generation import WorkspaceWriter, WriteAction

LOGGER = get_logger(__name__)

# Custom questionary style
STYLE = Style([
    ("qmark", "fg:cyan bold"),
    ("question", "bold"),
    ("answer", "fg:cyan"),
    ("pointer", "fg:cyan bold"),
    ("highlighted", "fg:cyan bold"),
    ("selected", "fg:green"),
    ("separator", "fg:gray"),
    ("instruction", "fg:gray"),
])

ACTION_MESSAGES = {
    WriteAction.CREATED: "Created",
    WriteAction.APPENDED: "Added stackdoc sections to",
    WriteAction.UPDATED: "Updated",
    WriteAction.UNCHANGED: "No changes to",
}

DRY_RUN_MESSAGES = {
    WriteAction.CREATED: "would create",
    WriteAction.APPENDED: "would add stackdoc sections to",
    WriteAction.UPDATED: "would update",
    WriteAction.UNCHANGED: "no changes to",
}


class InitCommand(Command):
    """Detects the stack and writes the guideline document."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "init"

    def execute(self, args: Namespace, config: "StackdocConfig | None" = None) -> int:
        """Execute the init command.

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

        output_path = ConfigBridge.output_path(config, project_root)

        if output_path.exists() and not args.dry_run:
            proceed = self._confirm_existing(output_path, args)
            if proceed is None:
                return EXIT_INVALID_USAGE
            if not proceed:
                return EXIT_SUCCESS

        print("\nAnalyzing project...\n")
        try:
            snapshot = ConfigBridge.scan(config, project_root)
            result = ConfigBridge.create_pipeline(config, project_root).run(snapshot)
        except (StackdocError, OSError) as e:
            LOGGER.error(f"Generation failed: {e}")
            return EXIT_PIPELINE_ERROR

        display_detection(result, snapshot)

        writer = WorkspaceWriter()
        try:
            if args.dry_run:
                outcome = writer.plan(result.document, output_path)
                print(f"Dry run: {DRY_RUN_MESSAGES[outcome.action]} {output_path}\n")
                print(outcome.content)
                return EXIT_SUCCESS
            outcome = writer.write(result.document, output_path)
        except OSError as e:
            LOGGER.error(f"Could not write {output_path}: {e}")
            return EXIT_PIPELINE_ERROR

        print(f"{ACTION_MESSAGES[outcome.action]} {self._display_path(output_path, project_root)}")

        warnings = result.diagnostics.warnings() + result.diagnostics.errors()
        if warnings:
            print(f"\n{len(warnings)} module issue(s) during generation; run with --verbose for details.")

        return EXIT_SUCCESS

    def _confirm_existing(self, output_path: Path, args: Namespace) -> Optional[bool]:
        """Decide whether to touch an existing output file.

        Returns:
            True to proceed, False to stop cleanly, None on a usage error.
        """
        content = output_path.read_text(encoding="utf-8")
        configured = MarkerManager().has_any_section(content)
        what = "already has stackdoc sections" if configured else "already exists"

        if args.force:
            print(f"{output_path.name} {what}; updating (--force).")
            return True

        if args.safe:
            print(f"{output_path.name} {what}; nothing written (--safe).")
            print("Use --force to update it anyway.")
            return False

        if args.yes:
            print(f"{output_path.name} {what}; updating (--yes).")
            return True

        if args.non_interactive:
            print(f"Error: {output_path.name} {what} and neither --force nor --yes was given.")
            return None

        question = (
            "Update the existing stackdoc sections?"
            if configured
            else f"Add stackdoc sections to the existing {output_path.name}?"
        )
        answer = questionary.confirm(question, default=True, style=STYLE).ask()
        if not answer:
            print("Aborted.")
            return False
        return True

    @staticmethod
    def _display_path(path: Path, project_root: Path) -> str:
        try:
            return str(path.relative_to(project_root))
        except ValueError:
            return str(path)
