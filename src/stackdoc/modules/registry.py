"""Built-in module registration table."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple, Type

from stackdoc.modules.base import Module
from stackdoc.modules.catalog import ModuleCatalog
from stackdoc.modules.css import BootstrapModule, BulmaModule, TailwindModule
from stackdoc.modules.frontend import (
    AstroModule,
    NextModule,
    NuxtModule,
    ReactModule,
    SolidModule,
    SvelteKitModule,
    SvelteModule,
    VueModule,
)
from stackdoc.modules.languages import JavaScriptModule, PHPModule, TypeScriptModule
from stackdoc.modules.laravel import (
    FluxFreeModule,
    FluxProModule,
    FolioModule,
    InertiaModule,
    LaravelBoostModule,
    LaravelModule,
    LivewireModule,
    PennantModule,
    PestModule,
    PHPUnitModule,
    PintModule,
    VoltModule,
)

BUILTIN_MODULES: Tuple[Type[Module], ...] = (
    # Meta-frameworks
    AstroModule,
    NextModule,
    NuxtModule,
    SvelteKitModule,
    LaravelModule,
    LaravelBoostModule,
    # Frameworks
    ReactModule,
    VueModule,
    SvelteModule,
    SolidModule,
    # CSS frameworks
    TailwindModule,
    BootstrapModule,
    BulmaModule,
    # Laravel ecosystem
    LivewireModule,
    VoltModule,
    InertiaModule,
    FluxFreeModule,
    FluxProModule,
    FolioModule,
    PennantModule,
    PestModule,
    PHPUnitModule,
    PintModule,
    # Languages
    TypeScriptModule,
    PHPModule,
    JavaScriptModule,
)


def create_catalog(
    modules: Optional[Iterable[Type[Module]]] = None,
    enabled: Iterable[str] = (),
    disabled: Iterable[str] = (),
) -> ModuleCatalog:
    """Build a catalog from a registration table.

    Args:
        modules: Module classes to register (defaults to BUILTIN_MODULES).
        enabled: If non-empty, only these module ids stay enabled.
        disabled: Module ids to disable.

    Returns:
        Populated ModuleCatalog.
    """
    catalog = ModuleCatalog()
    for module_class in modules if modules is not None else BUILTIN_MODULES:
        catalog.register(module_class())
    catalog.apply_config(enabled=enabled, disabled=disabled)
    return catalog
