"""Detection orchestration and version resolution.

Detection runs every enabled module's probe concurrently against the same
snapshot, then applies exclusions once all probes have finished:

1. accepted = ids whose result is accepted (confidence > 0.3)
2. excluded = union of ``excludes`` over accepted results only
3. every excluded id leaves the accepted set, whatever its own confidence

A module listing its own id in ``excludes`` is not removed. Excluding an
id that was never accepted changes nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from stackdoc.core.logging import get_logger
from stackdoc.core.models import DetectionResult
from stackdoc.detection.snapshot import ProjectSnapshot
from stackdoc.modules.base import Module
from stackdoc.pipeline.diagnostics import Diagnostics
from stackdoc.pipeline.parallel import ParallelModuleExecutor

LOGGER = get_logger(__name__)

PHASE_DETECTION = "detection"
PHASE_VERSIONS = "versions"


@dataclass(frozen=True)
class DetectionReport:
    """Outcome of the detection phase."""

    results: Dict[str, DetectionResult] = field(default_factory=dict)
    """Result of every probed module, failed probes included."""

    accepted: Tuple[str, ...] = ()
    """Accepted module ids after exclusion, in catalog order."""

    excluded: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    """Removed module id to the accepted ids that excluded it."""

    failed: Dict[str, str] = field(default_factory=dict)
    """Module id to error message for probes that raised or timed out."""

    def is_accepted(self, module_id: str) -> bool:
        return module_id in self.accepted

    def to_dict(self) -> Dict[str, object]:
        return {
            "accepted": list(self.accepted),
            "excluded": {k: list(v) for k, v in self.excluded.items()},
            "failed": dict(self.failed),
            "results": {k: v.to_dict() for k, v in self.results.items()},
        }


def resolve_exclusions(
    results: Mapping[str, DetectionResult],
    order: Sequence[str],
    diagnostics: Optional[Diagnostics] = None,
) -> Tuple[Tuple[str, ...], Dict[str, Tuple[str, ...]]]:
    """Apply exclusions to a complete set of probe results.

    Args:
        results: Probe result per module id.
        order: Canonical module order; the accepted tuple follows it.
        diagnostics: Optional collector for self-exclusion warnings.

    Returns:
        Tuple of (accepted ids, excluded id to excluding ids).
    """
    accepted = [module_id for module_id in order if module_id in results and results[module_id].accepted]
    accepted_set = set(accepted)

    excluded_by: Dict[str, List[str]] = {}
    for module_id in accepted:
        for target in sorted(results[module_id].excludes):
            if target == module_id:
                message = "module excludes itself; ignoring"
                if diagnostics is not None:
                    diagnostics.warning(PHASE_DETECTION, message, module_id)
                else:
                    LOGGER.warning(f"{module_id}: {message}")
                continue
            if target in accepted_set:
                excluded_by.setdefault(target, []).append(module_id)

    for target, sources in excluded_by.items():
        LOGGER.info(f"Excluding {target} (excluded by {', '.join(sources)})")

    final = tuple(module_id for module_id in accepted if module_id not in excluded_by)
    return final, {target: tuple(sources) for target, sources in excluded_by.items()}


class DetectionOrchestrator:
    """Runs module probes in parallel and resolves exclusions."""

    def __init__(self, executor: Optional[ParallelModuleExecutor] = None) -> None:
        self._executor = executor or ParallelModuleExecutor()

    def detect(
        self,
        snapshot: ProjectSnapshot,
        modules: Sequence[Module],
        diagnostics: Optional[Diagnostics] = None,
    ) -> DetectionReport:
        """Probe every module and return the accepted set.

        Args:
            snapshot: Read-only project snapshot shared by all probes.
            modules: Enabled modules in catalog order.
            diagnostics: Collector for probe failures.

        Returns:
            DetectionReport with per-module results and the accepted ids.
        """
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        task_results = self._executor.run(
            modules, lambda module: module.probe(snapshot), phase=PHASE_DETECTION
        )

        results: Dict[str, DetectionResult] = {}
        failed: Dict[str, str] = {}
        for module_id, task_result in task_results.items():
            value = task_result.value
            if task_result.success and isinstance(value, DetectionResult):
                results[module_id] = value
                continue
            error = task_result.error or f"probe returned {type(value).__name__}"
            failed[module_id] = error
            results[module_id] = DetectionResult.rejected(error)
            diagnostics.error(PHASE_DETECTION, f"probe failed: {error}", module_id)

        accepted, excluded = resolve_exclusions(
            results, [module.id for module in modules], diagnostics
        )
        LOGGER.info(f"Accepted modules: {', '.join(accepted) if accepted else 'none'}")
        return DetectionReport(results=results, accepted=accepted, excluded=excluded, failed=failed)


class VersionResolver:
    """Resolves versions of accepted modules in parallel.

    A lookup that raises or times out degrades to "no version".
    """

    def __init__(self, executor: Optional[ParallelModuleExecutor] = None) -> None:
        self._executor = executor or ParallelModuleExecutor()

    def resolve(
        self,
        snapshot: ProjectSnapshot,
        modules: Sequence[Module],
        diagnostics: Optional[Diagnostics] = None,
    ) -> Dict[str, Optional[str]]:
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        task_results = self._executor.run(
            modules, lambda module: module.resolve_version(snapshot), phase=PHASE_VERSIONS
        )

        versions: Dict[str, Optional[str]] = {}
        for module_id, task_result in task_results.items():
            if not task_result.success:
                diagnostics.warning(
                    PHASE_VERSIONS, f"version lookup failed: {task_result.error}", module_id
                )
                versions[module_id] = None
                continue
            value = task_result.value
            versions[module_id] = str(value) if value else None
        return versions
