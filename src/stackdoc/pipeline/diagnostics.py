"""Structured per-run diagnostics.

Pipeline phases record contained failures here (a probe that raised, a
missing guideline, a version lookup that failed) instead of aborting the
run. Every entry is also logged.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional

from stackdoc.core.logging import get_logger

LOGGER = get_logger(__name__)


class DiagnosticSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    DiagnosticSeverity.INFO: logging.INFO,
    DiagnosticSeverity.WARNING: logging.WARNING,
    DiagnosticSeverity.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Diagnostic:
    """One diagnostic entry."""

    phase: str
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    module_id: Optional[str] = None

    def __str__(self) -> str:
        prefix = f"[{self.phase}]"
        if self.module_id:
            prefix += f" {self.module_id}:"
        return f"{prefix} {self.message}"

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "phase": self.phase,
            "module": self.module_id,
            "severity": self.severity.value,
            "message": self.message,
        }


class Diagnostics:
    """Thread-safe collector of diagnostics for one pipeline run."""

    def __init__(self) -> None:
        self._entries: List[Diagnostic] = []
        self._lock = threading.Lock()

    def add(
        self,
        phase: str,
        message: str,
        severity: DiagnosticSeverity = DiagnosticSeverity.WARNING,
        module_id: Optional[str] = None,
    ) -> Diagnostic:
        entry = Diagnostic(phase=phase, message=message, severity=severity, module_id=module_id)
        with self._lock:
            self._entries.append(entry)
        LOGGER.log(_LOG_LEVELS[severity], str(entry))
        return entry

    def info(self, phase: str, message: str, module_id: Optional[str] = None) -> Diagnostic:
        return self.add(phase, message, DiagnosticSeverity.INFO, module_id)

    def warning(self, phase: str, message: str, module_id: Optional[str] = None) -> Diagnostic:
        return self.add(phase, message, DiagnosticSeverity.WARNING, module_id)

    def error(self, phase: str, message: str, module_id: Optional[str] = None) -> Diagnostic:
        return self.add(phase, message, DiagnosticSeverity.ERROR, module_id)

    @property
    def entries(self) -> List[Diagnostic]:
        with self._lock:
            return list(self._entries)

    def errors(self) -> List[Diagnostic]:
        return [e for e in self.entries if e.severity == DiagnosticSeverity.ERROR]

    def warnings(self) -> List[Diagnostic]:
        return [e for e in self.entries if e.severity == DiagnosticSeverity.WARNING]

    def for_module(self, module_id: str) -> List[Diagnostic]:
        return [e for e in self.entries if e.module_id == module_id]

    def for_phase(self, phase: str) -> List[Diagnostic]:
        return [e for e in self.entries if e.phase == phase]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors())

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
