"""Module catalog: registration, enable/disable state and canonical order."""

from __future__ import annotations

import threading
from typing import Dict, Iterable, Iterator, List, Optional

from stackdoc.core.errors import DuplicateModuleError, UnknownModuleError
from stackdoc.core.logging import get_logger
from stackdoc.core.models import ModuleKind
from stackdoc.modules.base import Module

LOGGER = get_logger(__name__)


def catalog_sort_key(module: Module) -> tuple:
    """Priority class descending, then display name, then id."""
    return (-module.priority_class.rank, module.display_name.casefold(), module.id)


class ModuleCatalog:
    """Holds registered modules and their enabled flags.

    Modules are enabled on registration. ``enabled_modules()`` yields the
    canonical order every later phase iterates in.
    """

    def __init__(self, modules: Optional[Iterable[Module]] = None) -> None:
        self._modules: Dict[str, Module] = {}
        self._enabled: Dict[str, bool] = {}
        self._lock = threading.Lock()
        for module in modules or ():
            self.register(module)

    def register(self, module: Module) -> None:
        """Register a module.

        Raises:
            DuplicateModuleError: If a module with the same id exists.
        """
        with self._lock:
            if module.id in self._modules:
                raise DuplicateModuleError(module.id)
            self._modules[module.id] = module
            self._enabled[module.id] = True
        LOGGER.debug(f"Registered module {module.id} ({module.kind.value})")

    def set_enabled(self, module_id: str, enabled: bool) -> bool:
        """Enable or disable a module. Unknown ids are ignored.

        Returns:
            True if the module exists, False otherwise.
        """
        with self._lock:
            if module_id not in self._modules:
                action = "enable" if enabled else "disable"
                LOGGER.warning(f"Cannot {action} unknown module '{module_id}'")
                return False
            self._enabled[module_id] = enabled
        return True

    def is_enabled(self, module_id: str) -> bool:
        return self._enabled.get(module_id, False)

    def get(self, module_id: str) -> Module:
        try:
            return self._modules[module_id]
        except KeyError:
            raise UnknownModuleError(module_id) from None

    def all_modules(self) -> List[Module]:
        """Every registered module in canonical order."""
        return sorted(self._modules.values(), key=catalog_sort_key)

    def enabled_modules(self) -> List[Module]:
        """Enabled modules in canonical order."""
        return [module for module in self.all_modules() if self._enabled[module.id]]

    def apply_config(self, enabled: Iterable[str] = (), disabled: Iterable[str] = ()) -> None:
        """Apply enable/disable lists from configuration.

        A non-empty ``enabled`` list disables every module not named in
        it; ``disabled`` is applied afterwards.
        """
        enabled = list(enabled)
        if enabled:
            for module_id in self._modules:
                self._enabled[module_id] = False
            for module_id in enabled:
                self.set_enabled(module_id, True)
        for module_id in disabled:
            self.set_enabled(module_id, False)

    def stats(self) -> Dict[str, int]:
        modules = list(self._modules.values())
        return {
            "total": len(modules),
            "enabled": sum(1 for module in modules if self._enabled[module.id]),
            "frameworks": sum(1 for module in modules if module.kind == ModuleKind.FRAMEWORK),
            "languages": sum(1 for module in modules if module.kind == ModuleKind.LANGUAGE),
            "libraries": sum(1 for module in modules if module.kind == ModuleKind.LIBRARY),
        }

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def __iter__(self) -> Iterator[Module]:
        return iter(self.all_modules())
