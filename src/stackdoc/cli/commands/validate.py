"""Validate command implementation.

Checks a stackdoc configuration file and shows which modules it leaves
enabled.
"""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING, List, Tuple

if TYPE_CHECKING:
    from stackdoc.config.models import StackdocConfig

from stackdoc.cli.commands import Command
from stackdoc.cli.config_bridge import ConfigBridge
from stackdoc.cli.exit_codes import EXIT_ISSUES_FOUND, EXIT_INVALID_USAGE, EXIT_SUCCESS
from stackdoc.config.loader import (
    PROJECT_CONFIG_NAMES,
    dict_to_config,
    find_project_config,
    load_yaml_file,
)
from stackdoc.config.validation import (
    ConfigValidationIssue,
    ValidationSeverity,
    validate_config_file,
)

MODULE_LIST_KEYS = ("modules.enabled.", "modules.disabled.")


def split_issues(
    issues: List[ConfigValidationIssue],
) -> Tuple[List[ConfigValidationIssue], List[ConfigValidationIssue], List[ConfigValidationIssue]]:
    """Split issues into errors, unknown module ids and other warnings."""
    errors, unknown_modules, warnings = [], [], []
    for issue in issues:
        if issue.severity == ValidationSeverity.ERROR:
            errors.append(issue)
        elif issue.key and issue.key.startswith(MODULE_LIST_KEYS):
            unknown_modules.append(issue)
        else:
            warnings.append(issue)
    return errors, unknown_modules, warnings


class ValidateCommand(Command):
    """Validates stackdoc configuration files."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "validate"

    def execute(self, args: Namespace, config: "StackdocConfig | None" = None) -> int:
        """Execute the validate command.

        Args:
            args: Parsed command-line arguments.
            config: Unused; the file named by ``--config`` (or the project
                config in the working directory) is validated on its own.

        Returns:
            Exit code: 0 = valid, 1 = has errors, 3 = file not found.
        """
        config_path = getattr(args, "config", None)
        if config_path:
            config_path = Path(config_path)
        else:
            config_path = find_project_config(Path.cwd())

        if config_path is None:
            print("No configuration file found.")
            print(f"Looked for: {', '.join(PROJECT_CONFIG_NAMES)}")
            return EXIT_INVALID_USAGE

        if not config_path.exists():
            print(f"Configuration file not found: {config_path}")
            return EXIT_INVALID_USAGE

        print(f"Validating {config_path}...")
        is_valid, issues = validate_config_file(config_path)
        errors, unknown_modules, warnings = split_issues(issues)

        if errors:
            print(f"\nErrors ({len(errors)}):")
            for issue in errors:
                self._print_issue(issue)

        if unknown_modules:
            print(f"\nUnknown modules ({len(unknown_modules)}):")
            for issue in unknown_modules:
                self._print_unknown_module(issue)
            print("  Run 'stackdoc modules --format list' to see valid ids.")

        if warnings:
            print(f"\nWarnings ({len(warnings)}):")
            for issue in warnings:
                self._print_issue(issue)

        if not is_valid:
            print(f"\nConfiguration is invalid ({len(errors)} error(s)).")
            return EXIT_ISSUES_FOUND

        self._print_module_selection(config_path)

        warning_count = len(unknown_modules) + len(warnings)
        if warning_count:
            print(f"\nConfiguration is valid with {warning_count} warning(s).")
        else:
            print("\nConfiguration is valid.")
        return EXIT_SUCCESS

    def _print_issue(self, issue: ConfigValidationIssue) -> None:
        location = f" [{issue.key}]" if issue.key else ""
        print(f"  - {issue.message}{location}")
        if issue.suggestion:
            print(f"    Did you mean '{issue.suggestion}'?")

    def _print_unknown_module(self, issue: ConfigValidationIssue) -> None:
        list_key, _, module_id = (issue.key or "").rpartition(".")
        line = f"  - {module_id} (in {list_key})"
        if issue.suggestion:
            line += f"; did you mean '{issue.suggestion}'?"
        print(line)

    def _print_module_selection(self, config_path: Path) -> None:
        """Show how many built-in modules the file's lists leave enabled."""
        config = dict_to_config(load_yaml_file(config_path))
        stats = ConfigBridge.create_catalog(config).stats()
        print(f"\nModules: {stats['enabled']} of {stats['total']} enabled")
        if stats["enabled"] == 0:
            print("  No modules are enabled; the document will describe a Generic stack.")
