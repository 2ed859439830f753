# src/housekeeper/tasks/task_guard.py

from __future__ import annotations

"""
Execution guard.

- at most one running invocation per task id (a second dispatch is dropped, not queued),
- task failures are reported to a sink and never reach the caller,
- the RUNNING -> IDLE transition happens on every exit path.
"""

import contextlib
import logging
import time
from collections.abc import Iterator

from ..core.ports import FailureSink, RunRecorder
from .task_models import DispatchOutcome, ExecutionState, Task, TaskResult

logger = logging.getLogger(__name__)


class LoggingFailureSink:
    """Default sink: failures go to the log with their traceback."""

    def report_failure(self, task_id: str, error: BaseException | None, message: str) -> None:
        if error is not None:
            logger.error("Task %s failed: %s", task_id, message, exc_info=error)
        else:
            logger.error("Task %s failed: %s", task_id, message or "(no details)")


class ExecutionGuard:
    def __init__(
        self,
        sink: FailureSink | None = None,
        *,
        recorder: RunRecorder | None = None,
    ) -> None:
        self._sink: FailureSink = sink if sink is not None else LoggingFailureSink()
        self._recorder = recorder
        self._states: dict[str, ExecutionState] = {}

    def state_of(self, task_id: str) -> ExecutionState:
        return self._states.get(task_id, ExecutionState.IDLE)

    def running(self) -> list[str]:
        return [tid for tid, st in self._states.items() if st is ExecutionState.RUNNING]

    @contextlib.contextmanager
    def _running(self, task_id: str) -> Iterator[None]:
        self._states[task_id] = ExecutionState.RUNNING
        try:
            yield
        finally:
            # IDLE is the default; only running ids are kept.
            self._states.pop(task_id, None)

    def dispatch(self, task: Task) -> DispatchOutcome:
        task_id = task.id
        if self.state_of(task_id) is ExecutionState.RUNNING:
            logger.debug("Task %s already running; dropping due signal", task_id)
            return DispatchOutcome.SKIPPED

        started_at = time.time()
        with self._running(task_id):
            try:
                raw = task.body()
            except Exception as e:
                result = TaskResult.failure(e)
            else:
                result = raw if isinstance(raw, TaskResult) else TaskResult.success()

        outcome = DispatchOutcome.COMPLETED if result.ok else DispatchOutcome.FAILED
        if result.ok:
            logger.debug("Task %s completed", task_id)
        else:
            self._report(task_id, result)

        self._record(task_id, started_at, outcome, result)
        return outcome

    def _report(self, task_id: str, result: TaskResult) -> None:
        try:
            self._sink.report_failure(task_id, result.error, result.message)
        except Exception:
            logger.exception("Failure sink crashed while reporting task_id=%s", task_id)

    def _record(self, task_id: str, started_at: float, outcome: DispatchOutcome, result: TaskResult) -> None:
        if self._recorder is None:
            return
        try:
            self._recorder.record_run(
                task_id=task_id,
                started_at=started_at,
                finished_at=time.time(),
                outcome=outcome.value,
                error=None if result.ok else result.message,
            )
        except Exception:
            logger.exception("record_run failed task_id=%s", task_id)
