"""Project scanning.

Builds the read-only ProjectSnapshot that module probes consume.
"""

from stackdoc.detection.ignore import IgnorePatterns
from stackdoc.detection.scanner import DEFAULT_MAX_FILES, scan_project
from stackdoc.detection.snapshot import ProjectSnapshot

__all__ = [
    "DEFAULT_MAX_FILES",
    "IgnorePatterns",
    "ProjectSnapshot",
    "scan_project",
]
