"""Argument parser construction for stackdoc CLI.

This module builds the argument parser with subcommands:
- stackdoc init     - Detect the stack and write the guideline document
- stackdoc update   - Regenerate one section of the document
- stackdoc detect   - Print detection results without writing
- stackdoc modules  - List the module catalog
- stackdoc status   - Show version, configuration and document status
- stackdoc validate - Validate a configuration file
"""

from __future__ import annotations

import argparse
from pathlib import Path

from stackdoc.core.models import SECTION_ORDER


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show stackdoc version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: .stackdoc.yml in project root).",
    )


def _add_path_argument(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help=help_text,
    )


def _build_init_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'init' subcommand parser."""
    init_parser = subparsers.add_parser(
        "init",
        help="Detect the project stack and write the guideline document.",
        description=(
            "Detect frameworks, libraries and languages, then compose "
            "commands and guidelines into the output document."
        ),
    )
    _add_path_argument(init_parser, "Project directory (default: current directory).")
    init_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Update an existing output file without asking.",
    )
    init_parser.add_argument(
        "--safe",
        action="store_true",
        help="Stop if the output file already exists.",
    )
    init_parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Answer yes to every prompt.",
    )
    init_parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Never prompt; fail when input would be required.",
    )
    init_parser.add_argument(
        "--output", "-o",
        metavar="FILE",
        help="Output file, relative to the project (default: CLAUDE.md).",
    )
    init_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the resulting document instead of writing it.",
    )
    init_parser.add_argument(
        "--sequential",
        action="store_true",
        help="Run module tasks one at a time (for debugging).",
    )
    _add_config_option(init_parser)


def _build_update_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'update' subcommand parser."""
    sections = ", ".join(section.value for section in SECTION_ORDER)
    update_parser = subparsers.add_parser(
        "update",
        help="Regenerate one section of the document.",
        description=(
            "Re-run detection and replace a single marker-delimited section "
            "of an existing document, leaving everything else untouched."
        ),
    )
    update_parser.add_argument(
        "section",
        nargs="?",
        help=f"Section to regenerate ({sections}). Prompted for when omitted.",
    )
    update_parser.add_argument(
        "path",
        nargs="?",
        help="Project directory (default: current directory).",
    )
    update_parser.add_argument(
        "--output", "-o",
        metavar="FILE",
        help="Output file, relative to the project (default: CLAUDE.md).",
    )
    update_parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Never prompt for the section.",
    )
    update_parser.add_argument(
        "--verbose",
        action="store_true",
        dest="show_details",
        help="Print the regenerated section body.",
    )
    _add_config_option(update_parser)


def _build_detect_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'detect' subcommand parser."""
    detect_parser = subparsers.add_parser(
        "detect",
        help="Print detection results without writing anything.",
    )
    _add_path_argument(detect_parser, "Project directory (default: current directory).")
    detect_parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine-readable JSON.",
    )
    detect_parser.add_argument(
        "--verbose",
        action="store_true",
        dest="show_details",
        help="Show confidence and evidence for every module.",
    )
    _add_config_option(detect_parser)


def _build_modules_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'modules' subcommand parser."""
    modules_parser = subparsers.add_parser(
        "modules",
        help="List the module catalog.",
    )
    modules_parser.add_argument(
        "--type",
        choices=["framework", "language", "library"],
        dest="module_type",
        help="Only list modules of this kind.",
    )
    status_group = modules_parser.add_mutually_exclusive_group()
    status_group.add_argument(
        "--enabled",
        action="store_true",
        dest="only_enabled",
        help="Only list enabled modules.",
    )
    status_group.add_argument(
        "--disabled",
        action="store_true",
        dest="only_disabled",
        help="Only list disabled modules.",
    )
    modules_parser.add_argument(
        "--format",
        choices=["table", "list", "json"],
        default="table",
        help="Output format (default: table).",
    )
    _add_config_option(modules_parser)


def _build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'status' subcommand parser."""
    status_parser = subparsers.add_parser(
        "status",
        help="Show version, configuration and document status.",
    )
    _add_path_argument(status_parser, "Project directory (default: current directory).")
    _add_config_option(status_parser)


def _build_validate_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'validate' subcommand parser."""
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a stackdoc configuration file.",
    )
    _add_config_option(validate_parser)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for stackdoc CLI.

    Returns:
        Configured ArgumentParser instance with subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="stackdoc",
        description="stackdoc - Stack-aware guideline documents for AI coding assistants.",
        epilog=(
            "Examples:\n"
            "  stackdoc init                     # Write CLAUDE.md for this project\n"
            "  stackdoc init --dry-run           # Preview the document\n"
            "  stackdoc update commands          # Regenerate the Commands section\n"
            "  stackdoc detect --json            # Print detection as JSON\n"
            "  stackdoc modules --type language  # List language modules\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    _add_global_options(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands:",
        metavar="COMMAND",
    )

    _build_init_parser(subparsers)
    _build_update_parser(subparsers)
    _build_detect_parser(subparsers)
    _build_modules_parser(subparsers)
    _build_status_parser(subparsers)
    _build_validate_parser(subparsers)

    return parser
