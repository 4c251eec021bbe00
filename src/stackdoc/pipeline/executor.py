"""Pipeline executor for orchestrating generation phases."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from stackdoc.composition.composer import GuidelineComposer, merge_commands, ordered_refs
from stackdoc.composition.content import GuidelineSource
from stackdoc.composition.document import ComposedDocument, build_document
from stackdoc.config.models import PipelineConfig
from stackdoc.core.errors import PipelineCancelledError
from stackdoc.core.logging import get_logger
from stackdoc.core.models import GuidelineFragment, GuidelineReference, Section, StackCommands
from stackdoc.detection.snapshot import ProjectSnapshot
from stackdoc.modules.base import CommandProvider, Module
from stackdoc.modules.catalog import ModuleCatalog
from stackdoc.pipeline.diagnostics import Diagnostics
from stackdoc.pipeline.orchestrator import DetectionOrchestrator, DetectionReport, VersionResolver
from stackdoc.pipeline.parallel import ParallelModuleExecutor

LOGGER = get_logger(__name__)

PHASE_CONTRIBUTIONS = "contributions"

Contribution = Tuple[List[GuidelineReference], StackCommands]


@dataclass
class PipelineResult:
    """Everything one pipeline run produced."""

    report: DetectionReport
    modules: List[Module] = field(default_factory=list)
    """Accepted modules in catalog order."""
    versions: Dict[str, Optional[str]] = field(default_factory=dict)
    fragments: List[GuidelineFragment] = field(default_factory=list)
    commands: StackCommands = field(default_factory=StackCommands)
    document: ComposedDocument = field(default_factory=ComposedDocument)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def accepted(self) -> Tuple[str, ...]:
        return self.report.accepted


class StackPipeline:
    """Orchestrates the generation pipeline.

    Pipeline phases, each a barrier for the next:
    1. Detection (parallel probes, then exclusions)
    2. Version resolution for accepted modules (parallel)
    3. Guideline references and commands (parallel)
    4. Guideline content loading
    5. Document rendering

    A set cancellation event is checked before each phase; once set, the
    run stops with PipelineCancelledError and produces no document.
    """

    def __init__(
        self,
        catalog: ModuleCatalog,
        store: GuidelineSource,
        config: Optional[PipelineConfig] = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            catalog: Module catalog; its enabled modules are probed.
            store: Guideline content source.
            config: Optional pipeline execution settings.
        """
        self._catalog = catalog
        self._store = store
        self._config = config or PipelineConfig()

    def _executor(self) -> ParallelModuleExecutor:
        return ParallelModuleExecutor(
            max_workers=self._config.max_workers,
            sequential=self._config.sequential,
            timeout=self._config.timeout,
        )

    def run(
        self,
        snapshot: ProjectSnapshot,
        cancel_event: Optional[threading.Event] = None,
    ) -> PipelineResult:
        """Run every phase against a project snapshot.

        Args:
            snapshot: Read-only project snapshot.
            cancel_event: Optional event that aborts the run when set.

        Returns:
            PipelineResult with the rendered document and diagnostics.

        Raises:
            PipelineCancelledError: If the cancel event was set.
        """
        diagnostics = Diagnostics()
        executor = self._executor()
        modules = self._catalog.enabled_modules()
        LOGGER.info(f"Running pipeline for {snapshot.root} with {len(modules)} modules")

        _check_cancelled(cancel_event, "detection")
        report = DetectionOrchestrator(executor).detect(snapshot, modules, diagnostics)
        accepted = [self._catalog.get(module_id) for module_id in report.accepted]

        _check_cancelled(cancel_event, "versions")
        versions = VersionResolver(executor).resolve(snapshot, accepted, diagnostics)

        _check_cancelled(cancel_event, "contributions")
        refs_by_module, commands = self._contributions(snapshot, accepted, versions, executor, diagnostics)

        _check_cancelled(cancel_event, "guidelines")
        fragments = GuidelineComposer(self._store).compose(
            ordered_refs(report.accepted, refs_by_module), diagnostics
        )

        _check_cancelled(cancel_event, "render")
        document = build_document(accepted, versions, snapshot, commands, fragments)

        return PipelineResult(
            report=report,
            modules=accepted,
            versions=versions,
            fragments=fragments,
            commands=commands,
            document=document,
            diagnostics=diagnostics,
        )

    def _contributions(
        self,
        snapshot: ProjectSnapshot,
        accepted: List[Module],
        versions: Dict[str, Optional[str]],
        executor: ParallelModuleExecutor,
        diagnostics: Diagnostics,
    ) -> Tuple[Dict[str, List[GuidelineReference]], StackCommands]:
        """Collect guideline references and commands per accepted module."""

        def contribute(module: Module) -> Contribution:
            refs = module.guideline_refs(versions.get(module.id))
            if isinstance(module, CommandProvider):
                return refs, module.commands(snapshot)
            return refs, StackCommands()

        task_results = executor.run(accepted, contribute, phase=PHASE_CONTRIBUTIONS)

        refs_by_module: Dict[str, List[GuidelineReference]] = {}
        module_commands: List[Tuple[str, StackCommands]] = []
        for module_id, task_result in task_results.items():
            if not task_result.success or task_result.value is None:
                diagnostics.warning(
                    PHASE_CONTRIBUTIONS, f"contribution failed: {task_result.error}", module_id
                )
                continue
            refs, commands = task_result.value
            refs_by_module[module_id] = list(refs)
            module_commands.append((module_id, commands))
        return refs_by_module, merge_commands(module_commands)

    def render_section(
        self,
        snapshot: ProjectSnapshot,
        section: Union[Section, str],
    ) -> str:
        """Run the pipeline and return the body of one section."""
        section = Section(section)
        return self.run(snapshot).document.section(section)


def _check_cancelled(cancel_event: Optional[threading.Event], phase: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        LOGGER.info(f"Pipeline cancelled before {phase} phase")
        raise PipelineCancelledError(f"Pipeline cancelled before {phase} phase")
