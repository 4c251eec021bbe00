"""Update command implementation.

Regenerates a single marker-delimited section of an existing document.
"""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import questionary

if TYPE_CHECKING:
    from stackdoc.config.models import StackdocConfig

from stackdoc.cli.commands import Command
from stackdoc.cli.commands.init import STYLE
from stackdoc.cli.config_bridge import ConfigBridge
from stackdoc.cli.exit_codes import (
    EXIT_INVALID_USAGE,
    EXIT_ISSUES_FOUND,
    EXIT_PIPELINE_ERROR,
    EXIT_SUCCESS,
)
from stackdoc.config.loader import get_default_config
from stackdoc.core.errors import SectionNotFoundError, StackdocError
from stackdoc.core.logging import get_logger
from stackdoc.core.models import SECTION_ORDER, Section
from stackdoc.generation import WorkspaceWriter

LOGGER = get_logger(__name__)

SECTION_NAMES = [section.value for section in SECTION_ORDER]


def normalize_update_args(args: Namespace) -> None:
    """Resolve ``update [section] [path]`` when only a path was given."""
    section = getattr(args, "section", None)
    if section and section not in SECTION_NAMES and getattr(args, "path", None) is None:
        args.path = section
        args.section = None
    if not getattr(args, "path", None):
        args.path = "."


class UpdateCommand(Command):
    """Regenerates one section of the document in place."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "update"

    def execute(self, args: Namespace, config: "StackdocConfig | None" = None) -> int:
        """Execute the update command.

        Args:
            args: Parsed command-line arguments.
            config: Loaded stackdoc configuration.

        Returns:
            Exit code: 0 on success, 1 if the document or section is
            missing, 2 on pipeline failure, 3 on invalid usage.
        """
        normalize_update_args(args)
        config = config or get_default_config()
        project_root = Path(args.path).resolve()
        if not project_root.is_dir():
            print(f"Error: {project_root} is not a directory")
            return EXIT_INVALID_USAGE

        section_name = args.section or self._prompt_section(args)
        if section_name is None:
            return EXIT_INVALID_USAGE
        if section_name not in SECTION_NAMES:
            print(f"Error: unknown section '{section_name}'. Choose from: {', '.join(SECTION_NAMES)}")
            return EXIT_INVALID_USAGE
        section = Section(section_name)

        output_path = ConfigBridge.output_path(config, project_root)
        if not output_path.exists():
            print(f"{output_path.name} not found. Run 'stackdoc init' first.")
            return EXIT_ISSUES_FOUND

        try:
            snapshot = ConfigBridge.scan(config, project_root)
            body = ConfigBridge.create_pipeline(config, project_root).render_section(snapshot, section)
        except (StackdocError, OSError) as e:
            LOGGER.error(f"Generation failed: {e}")
            return EXIT_PIPELINE_ERROR

        try:
            changed = WorkspaceWriter().regenerate(output_path, section, body)
        except SectionNotFoundError as e:
            print(f"Error: {e}.")
            print("Run 'stackdoc init --force' to add the stackdoc sections.")
            return EXIT_ISSUES_FOUND

        if changed:
            print(f"Regenerated '{section.value}' section in {output_path.name}")
        else:
            print(f"'{section.value}' section in {output_path.name} is already up to date")

        if getattr(args, "show_details", False):
            print()
            print(body)

        return EXIT_SUCCESS

    def _prompt_section(self, args: Namespace) -> Optional[str]:
        """Ask which section to regenerate.

        Returns:
            The chosen section name, or None if no answer is possible.
        """
        if getattr(args, "non_interactive", False) or not sys.stdin.isatty():
            print(f"Error: no section given. Choose from: {', '.join(SECTION_NAMES)}")
            return None

        answer = questionary.select(
            "Which section should be regenerated?",
            choices=SECTION_NAMES,
            style=STYLE,
        ).ask()
        if answer is None:
            print("Aborted.")
        return answer
