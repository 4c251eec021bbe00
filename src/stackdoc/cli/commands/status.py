"""Status command implementation."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stackdoc.config.models import StackdocConfig

from stackdoc.cli.commands import Command
from stackdoc.cli.config_bridge import ConfigBridge
from stackdoc.cli.exit_codes import EXIT_SUCCESS
from stackdoc.composition.content import GuidelineStore
from stackdoc.composition.markers import MarkerManager
from stackdoc.config.loader import get_default_config
from stackdoc.config.paths import get_stackdoc_home
from stackdoc.core.models import SECTION_ORDER


class StatusCommand(Command):
    """Shows version, configuration sources, catalog and document status."""

    def __init__(self, version: str):
        """Initialize StatusCommand.

        Args:
            version: Current stackdoc version string.
        """
        self._version = version

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: "StackdocConfig | None" = None) -> int:
        """Execute the status command.

        Args:
            args: Parsed command-line arguments.
            config: Loaded stackdoc configuration.

        Returns:
            Exit code (always 0 for status).
        """
        config = config or get_default_config()
        project_root = Path(getattr(args, "path", ".")).resolve()

        print(f"stackdoc version: {self._version}")
        print(f"Home: {get_stackdoc_home()}")
        print(f"Project: {project_root}")
        print()

        print("Configuration:")
        if config.sources:
            for source in config.sources:
                print(f"  {source}")
        else:
            print("  (built-in defaults)")
        print()

        stats = ConfigBridge.create_catalog(config).stats()
        print(
            f"Modules: {stats['enabled']} of {stats['total']} enabled "
            f"({stats['frameworks']} frameworks, {stats['libraries']} libraries, "
            f"{stats['languages']} languages)"
        )
        store = GuidelineStore(search_paths=config.guidelines.resolved_paths(project_root))
        print(f"Bundled guidelines: {len(store.list_available())}")
        for path in store.search_paths:
            marker = "" if path.is_dir() else " (missing)"
            print(f"  override: {path}{marker}")
        print()

        output_path = ConfigBridge.output_path(config, project_root)
        if not output_path.exists():
            print(f"Document: {output_path.name} not found (run 'stackdoc init')")
            return EXIT_SUCCESS

        content = output_path.read_text(encoding="utf-8")
        markers = MarkerManager()
        present = [s.value for s in SECTION_ORDER if markers.has_section(content, s.value)]
        missing = [s.value for s in SECTION_ORDER if s.value not in present]
        print(f"Document: {output_path}")
        print(f"  Sections present: {', '.join(present) if present else 'none'}")
        if missing:
            print(f"  Sections missing: {', '.join(missing)}")

        return EXIT_SUCCESS
