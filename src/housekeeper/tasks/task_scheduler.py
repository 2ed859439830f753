# src/housekeeper/tasks/task_scheduler.py

from __future__ import annotations

"""
Maintenance scheduler.

The host drives it from its own event loop:
- on_tick(now, idle_seconds) once per loop iteration,
- on_event(name) whenever a named host event happens (focus-lost, post-init, ...).

Due tasks are dispatched synchronously, in registration order, through the
execution guard. Nothing here awaits or blocks; run_idle_loop is the small
asyncio driver that samples an idle source and feeds ticks.
"""

import asyncio
import logging
import time

from ..core.ports import FailureSink, HostListener, IdleSource, RunRecorder
from .task_guard import ExecutionGuard
from .task_models import DispatchOutcome, IdleAfter, Task, TaskBody, TriggerSpec
from .task_registry import TaskRegistry

logger = logging.getLogger(__name__)


class TriggerEngine:
    """Turns host ticks and named events into guarded dispatches."""

    def __init__(self, registry: TaskRegistry, guard: ExecutionGuard) -> None:
        self._registry = registry
        self._guard = guard

    def on_tick(self, now: float, idle_seconds: float) -> list[str]:
        due = self._snapshot(self._registry.list_due(idle_seconds=idle_seconds))
        self._registry.observe_idle(idle_seconds)

        # Re-arm / disable before running anything, so a failing body still re-arms.
        for task in due:
            if not isinstance(task.trigger, IdleAfter):
                continue
            self._registry.mark_fired(task.id, now)
            if task.trigger.repeating:
                self._registry.rearm(task.id)
            else:
                self._registry.disable(task.id)

        return self._dispatch_all(due)

    def on_event(self, name: str, now: float | None = None) -> list[str]:
        due = self._snapshot(self._registry.list_due(last_event=name))
        stamp = time.time() if now is None else now
        for task in due:
            self._registry.mark_fired(task.id, stamp)
        if due:
            logger.debug("Event %s -> %s", name, ", ".join(t.id for t in due))
        return self._dispatch_all(due)

    def _snapshot(self, ids: list[str]) -> list[Task]:
        tasks = (self._registry.get(task_id) for task_id in ids)
        return [t for t in tasks if t is not None]

    def _dispatch_all(self, due: list[Task]) -> list[str]:
        dispatched: list[str] = []
        for task in due:
            # An earlier body in this batch may have unregistered or replaced it;
            # a replacement arms from scratch and is not due in this batch.
            if self._registry.get(task.id) is not task:
                continue
            outcome = self._guard.dispatch(task)
            if outcome is not DispatchOutcome.SKIPPED:
                dispatched.append(task.id)
        return dispatched


class MaintenanceScheduler:
    """
    One independent scheduler instance: registry + guard + trigger engine.

    Several instances can coexist (tests create one per case); no state is global.
    """

    def __init__(
        self,
        *,
        sink: FailureSink | None = None,
        recorder: RunRecorder | None = None,
    ) -> None:
        self.registry = TaskRegistry()
        self.guard = ExecutionGuard(sink, recorder=recorder)
        self.engine = TriggerEngine(self.registry, self.guard)

    def register(
        self,
        task_id: str,
        trigger: TriggerSpec,
        body: TaskBody,
        *,
        description: str = "",
        enabled: bool = True,
    ) -> Task:
        return self.registry.register(task_id, trigger, body, description=description, enabled=enabled)

    def unregister(self, task_id: str) -> None:
        self.registry.unregister(task_id)

    def on_tick(self, now: float, idle_seconds: float) -> list[str]:
        return self.engine.on_tick(now, idle_seconds)

    def on_event(self, name: str) -> list[str]:
        return self.engine.on_event(name)


async def run_idle_loop(
        scheduler: HostListener,
        idle_source: IdleSource,
        *,
        interval_seconds: float = 1.0,
) -> None:
    """
    Sample the idle source every interval_seconds and feed scheduler.on_tick().

    A crash inside on_tick is logged and the loop keeps going.
    To stop the loop, cancel the coroutine/task.
    """
    sleep_s = max(0.05, float(interval_seconds))
    logger.info("Idle loop started (interval=%.2fs)", sleep_s)

    while True:
        now = time.time()
        try:
            scheduler.on_tick(now, idle_source.idle_seconds())
        except Exception:
            logger.exception("on_tick failed")

        await asyncio.sleep(sleep_s)
