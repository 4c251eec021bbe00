"""Detection and guideline modules."""

from stackdoc.modules.base import (
    CommandProvider,
    FrameworkModule,
    LanguageModule,
    LibraryModule,
    Module,
)
from stackdoc.modules.catalog import ModuleCatalog
from stackdoc.modules.registry import BUILTIN_MODULES, create_catalog

__all__ = [
    "BUILTIN_MODULES",
    "CommandProvider",
    "FrameworkModule",
    "LanguageModule",
    "LibraryModule",
    "Module",
    "ModuleCatalog",
    "create_catalog",
]
