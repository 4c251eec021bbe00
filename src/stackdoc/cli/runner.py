"""CLI runner orchestration.

This module handles command dispatch and execution for the stackdoc CLI.
"""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import Iterable, Optional

from importlib.metadata import version, PackageNotFoundError

from stackdoc.cli.arguments import build_parser
from stackdoc.cli.commands import Command
from stackdoc.cli.commands.detect import DetectCommand
from stackdoc.cli.commands.init import InitCommand
from stackdoc.cli.commands.modules import ModulesCommand
from stackdoc.cli.commands.status import StatusCommand
from stackdoc.cli.commands.update import UpdateCommand, normalize_update_args
from stackdoc.cli.commands.validate import ValidateCommand
from stackdoc.cli.config_bridge import ConfigBridge
from stackdoc.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from stackdoc.config import load_config
from stackdoc.config.loader import ConfigError
from stackdoc.config.models import StackdocConfig
from stackdoc.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get stackdoc version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("stackdoc")
    except PackageNotFoundError:
        # Fallback for source checkouts that have not built metadata.
        from stackdoc import __version__
        return __version__


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(self) -> None:
        """Initialize CLIRunner with parser and commands."""
        self.parser = build_parser()
        self._version = get_version()
        self.init_cmd = InitCommand()
        self.update_cmd = UpdateCommand()
        self.detect_cmd = DetectCommand()
        self.modules_cmd = ModulesCommand()
        self.status_cmd = StatusCommand(version=self._version)
        self.validate_cmd = ValidateCommand()

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        # Handle --help specially to return 0
        if argv is not None:
            argv_list = list(argv)
            if "--help" in argv_list or "-h" in argv_list:
                self.parser.print_help()
                return EXIT_SUCCESS
        else:
            argv_list = None

        try:
            args = self.parser.parse_args(argv_list)
        except SystemExit as e:
            # argparse exits with 2 on usage errors
            return EXIT_SUCCESS if e.code == 0 else EXIT_INVALID_USAGE

        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        command = getattr(args, "command", None)

        if command == "init":
            return self._handle_with_config(self.init_cmd, args)
        elif command == "update":
            normalize_update_args(args)
            return self._handle_with_config(self.update_cmd, args)
        elif command == "detect":
            return self._handle_with_config(self.detect_cmd, args)
        elif command == "modules":
            return self._handle_with_config(self.modules_cmd, args)
        elif command == "status":
            return self._handle_with_config(self.status_cmd, args)
        elif command == "validate":
            return self._handle_validate(args)
        else:
            # No command specified - show help
            self.parser.print_help()
            return EXIT_SUCCESS

    def _load_config(self, args: Namespace) -> Optional[StackdocConfig]:
        """Load configuration for the project named by ``args.path``.

        Returns:
            The merged configuration, or None if it could not be loaded.
        """
        project_root = Path(getattr(args, "path", None) or ".").resolve()
        try:
            return load_config(
                project_root=project_root,
                cli_config_path=getattr(args, "config", None),
                cli_overrides=ConfigBridge.args_to_overrides(args),
            )
        except ConfigError as e:
            LOGGER.error(str(e))
            print(f"Error: {e}")
            return None

    def _handle_with_config(self, command: Command, args: Namespace) -> int:
        """Load configuration, then execute ``command`` with it.

        Args:
            command: Command to execute.
            args: Parsed command-line arguments.

        Returns:
            Exit code.
        """
        config = self._load_config(args)
        if config is None:
            return EXIT_INVALID_USAGE
        return command.execute(args, config)

    def _handle_validate(self, args: Namespace) -> int:
        """Handle the validate command.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code.
        """
        return self.validate_cmd.execute(args)
