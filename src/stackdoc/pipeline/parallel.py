"""Parallel per-module task execution using ThreadPoolExecutor."""

from __future__ import annotations

import math
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, Sequence, TypeVar

from stackdoc.core.logging import get_logger
from stackdoc.modules.base import Module

LOGGER = get_logger(__name__)

# Default number of worker threads
DEFAULT_MAX_WORKERS = 8

# Default time one module task may take, in seconds
DEFAULT_TIMEOUT = 10.0

T = TypeVar("T")


@dataclass
class ModuleTaskResult(Generic[T]):
    """Result of one module task."""

    module_id: str
    value: Optional[T] = None
    error: Optional[str] = None
    success: bool = True
    timed_out: bool = False


class ParallelModuleExecutor:
    """Runs one callable per module on a thread pool.

    Each result lands in its own slot keyed by module id; aggregation is
    guarded by a lock. A task that raises, or is still running when the
    phase deadline passes, is reported as failed without affecting the
    other tasks.
    """

    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        sequential: bool = False,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the executor.

        Args:
            max_workers: Maximum number of concurrent module threads.
            sequential: If True, run tasks one after another (for debugging).
            timeout: Seconds a single task may take, or None for no limit.
        """
        self._max_workers = max(1, max_workers)
        self._sequential = sequential
        self._timeout = timeout
        self._results_lock = threading.Lock()

    @property
    def sequential(self) -> bool:
        return self._sequential

    def run(
        self,
        modules: Sequence[Module],
        task: Callable[[Module], T],
        phase: str = "task",
    ) -> Dict[str, ModuleTaskResult[T]]:
        """Run ``task`` for every module and collect results by module id.

        Args:
            modules: Modules to run the task for.
            task: Callable receiving one module.
            phase: Phase name used in log messages.

        Returns:
            Mapping of module id to its task result, in the order of
            ``modules``.
        """
        if not modules:
            return {}

        if self._sequential:
            results = self._run_sequential(modules, task, phase)
        else:
            results = self._run_parallel(modules, task, phase)
        return {module.id: results[module.id] for module in modules}

    def _run_sequential(
        self,
        modules: Sequence[Module],
        task: Callable[[Module], T],
        phase: str,
    ) -> Dict[str, ModuleTaskResult[T]]:
        """Run tasks sequentially (for debugging). No timeout applies."""
        return {module.id: self._run_one(module, task, phase) for module in modules}

    def _run_parallel(
        self,
        modules: Sequence[Module],
        task: Callable[[Module], T],
        phase: str,
    ) -> Dict[str, ModuleTaskResult[T]]:
        results: Dict[str, ModuleTaskResult[T]] = {}
        executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix=f"stackdoc-{phase}",
        )
        try:
            future_to_module: Dict[Future, Module] = {
                executor.submit(self._run_one, module, task, phase): module
                for module in modules
            }
            deadline = self._deadline(len(modules))

            for future, module in future_to_module.items():
                remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
                try:
                    result = future.result(timeout=remaining)
                except FutureTimeoutError:
                    LOGGER.warning(f"{phase}: module {module.id} timed out")
                    future.cancel()
                    result = ModuleTaskResult(
                        module_id=module.id,
                        error=f"timed out after {self._timeout}s",
                        success=False,
                        timed_out=True,
                    )
                with self._results_lock:
                    results[module.id] = result
        finally:
            # Do not block on tasks that overran their deadline.
            executor.shutdown(wait=False, cancel_futures=True)

        return results

    def _deadline(self, task_count: int) -> Optional[float]:
        if self._timeout is None:
            return None
        waves = math.ceil(task_count / self._max_workers)
        return time.monotonic() + self._timeout * waves

    def _run_one(
        self,
        module: Module,
        task: Callable[[Module], T],
        phase: str,
    ) -> ModuleTaskResult[T]:
        """Run a single task and capture its outcome. Never raises."""
        LOGGER.debug(f"{phase}: running {module.id}")
        try:
            value: Any = task(module)
        except Exception as e:
            LOGGER.debug(f"{phase}: {module.id} raised {type(e).__name__}: {e}")
            return ModuleTaskResult(
                module_id=module.id,
                error=f"{type(e).__name__}: {e}",
                success=False,
            )
        return ModuleTaskResult(module_id=module.id, value=value)
