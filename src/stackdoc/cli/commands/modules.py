"""Modules command implementation."""

from __future__ import annotations

import json
from argparse import Namespace
from typing import TYPE_CHECKING, Dict, List

if TYPE_CHECKING:
    from stackdoc.config.models import StackdocConfig

from stackdoc.cli.commands import Command
from stackdoc.cli.config_bridge import ConfigBridge
from stackdoc.cli.exit_codes import EXIT_SUCCESS
from stackdoc.config.loader import get_default_config
from stackdoc.modules.base import Module
from stackdoc.modules.catalog import ModuleCatalog


class ModulesCommand(Command):
    """Lists the module catalog."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "modules"

    def execute(self, args: Namespace, config: "StackdocConfig | None" = None) -> int:
        """Execute the modules command.

        Lists modules in catalog order, filtered by kind and status.

        Args:
            args: Parsed command-line arguments.
            config: Loaded stackdoc configuration (for enable/disable lists).

        Returns:
            Exit code (always 0 for modules).
        """
        catalog = ConfigBridge.create_catalog(config or get_default_config())
        modules = self._filter(catalog, args)
        output_format = getattr(args, "format", "table")

        if output_format == "json":
            print(json.dumps([self._to_dict(catalog, m) for m in modules], indent=2))
        elif output_format == "list":
            for module in modules:
                print(module.id)
        else:
            self._print_table(catalog, modules)

        return EXIT_SUCCESS

    def _filter(self, catalog: ModuleCatalog, args: Namespace) -> List[Module]:
        module_type = getattr(args, "module_type", None)
        modules = []
        for module in catalog.all_modules():
            if module_type and module.kind.value != module_type:
                continue
            enabled = catalog.is_enabled(module.id)
            if getattr(args, "only_enabled", False) and not enabled:
                continue
            if getattr(args, "only_disabled", False) and enabled:
                continue
            modules.append(module)
        return modules

    def _to_dict(self, catalog: ModuleCatalog, module: Module) -> Dict[str, object]:
        return {
            "id": module.id,
            "name": module.display_name,
            "kind": module.kind.value,
            "priority": module.priority_class.value,
            "enabled": catalog.is_enabled(module.id),
            "description": module.metadata.description,
            "excludes": sorted(module.excludes),
        }

    def _print_table(self, catalog: ModuleCatalog, modules: List[Module]) -> None:
        if not modules:
            print("No modules match.")
            return

        rows = [
            (
                module.id,
                module.display_name,
                module.kind.value,
                module.priority_class.value,
                "enabled" if catalog.is_enabled(module.id) else "disabled",
            )
            for module in modules
        ]
        headers = ("ID", "NAME", "KIND", "PRIORITY", "STATUS")
        widths = [max(len(str(row[i])) for row in rows + [headers]) for i in range(len(headers))]

        print("  ".join(h.ljust(w) for h, w in zip(headers, widths)))
        print("  ".join("-" * w for w in widths))
        for row in rows:
            print("  ".join(str(cell).ljust(w) for cell, w in zip(row, widths)).rstrip())

        stats = catalog.stats()
        print(f"\n{len(modules)} shown, {stats['enabled']} of {stats['total']} enabled")
