"""Exception hierarchy for stackdoc.

Only catalog misconfiguration is fatal. Everything raised inside a
pipeline run is caught at the smallest scope (one module, one guideline
reference) and reported through diagnostics instead.
"""

from __future__ import annotations


class StackdocError(Exception):
    """Base class for all stackdoc errors."""

    pass


class DuplicateModuleError(StackdocError):
    """A module with the same id is already registered in the catalog."""

    def __init__(self, module_id: str):
        super().__init__(f"Module '{module_id}' is already registered")
        self.module_id = module_id


class UnknownModuleError(StackdocError):
    """Lookup of a module id that the catalog does not know."""

    def __init__(self, module_id: str):
        super().__init__(f"Unknown module '{module_id}'")
        self.module_id = module_id


class GuidelineNotFoundError(StackdocError):
    """A guideline reference could not be resolved by the content store."""

    def __init__(self, relative_path: str, reason: str = "not found"):
        super().__init__(f"Guideline '{relative_path}' {reason}")
        self.relative_path = relative_path


class SectionNotFoundError(StackdocError):
    """A document does not contain the markers of the requested section."""

    def __init__(self, section: str):
        super().__init__(f"Section '{section}' not found in document")
        self.section = section


class PipelineCancelledError(StackdocError):
    """The pipeline run was cancelled before it produced a document."""

    pass
