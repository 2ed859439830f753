# src/housekeeper/tasks/task_registry.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from .task_models import IdleAfter, OnEvent, Task, TaskBody, TriggerSpec

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RegistryEntry:
    """
    A registered task plus its idle-arming bookkeeping.

    armed_at is the idle reading the task counts from. None means
    "arm at the next idle sample" (fresh registration or just re-armed).
    """

    task: Task
    armed_at: float | None = None
    fire_count: int = 0
    last_fired_at: float | None = None


class TaskRegistry:
    """
    Named housekeeping tasks, kept in registration order.

    Re-registering an id replaces the previous definition and moves it to
    the end of the order; there is never more than one entry per id.

    list_due() is a pure query. Arming state is only changed through
    observe_idle / rearm / disable / mark_fired, which the trigger engine
    calls after deciding what is due.
    """

    def __init__(self) -> None:
        self._entries: dict[str, RegistryEntry] = {}
        self._last_idle: float | None = None

    # ---- registration ----

    def register(
        self,
        task_id: str,
        trigger: TriggerSpec,
        body: TaskBody,
        *,
        description: str = "",
        enabled: bool = True,
    ) -> Task:
        task = Task(id=task_id, trigger=trigger, body=body, enabled=enabled, description=description)
        replaced = self._entries.pop(task_id, None) is not None
        self._entries[task_id] = RegistryEntry(task=task)
        logger.debug("Registered task %s (%s)%s", task_id, task.kind, " [replaced]" if replaced else "")
        return task

    def unregister(self, task_id: str) -> None:
        if self._entries.pop(task_id, None) is not None:
            logger.debug("Unregistered task %s", task_id)

    def get(self, task_id: str) -> Task | None:
        entry = self._entries.get(task_id)
        return entry.task if entry is not None else None

    def entry(self, task_id: str) -> RegistryEntry | None:
        return self._entries.get(task_id)

    def entries(self) -> list[RegistryEntry]:
        return list(self._entries.values())

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # ---- due computation ----

    def _input_seen(self, idle_seconds: float) -> bool:
        # Idle time only grows while the user is away; a smaller sample means input happened.
        return self._last_idle is not None and idle_seconds < self._last_idle

    def _baseline(self, entry: RegistryEntry, idle_seconds: float, input_seen: bool) -> float:
        if input_seen:
            return 0.0
        if entry.armed_at is None:
            return idle_seconds
        return entry.armed_at

    def list_due(self, idle_seconds: float | None = None, last_event: str | None = None) -> list[str]:
        """
        Ids whose trigger is satisfied, in registration order.

        idle_seconds=None skips idle triggers; last_event=None skips event triggers.
        Does not mutate anything.
        """
        input_seen = idle_seconds is not None and self._input_seen(idle_seconds)
        due: list[str] = []

        for task_id, entry in self._entries.items():
            task = entry.task
            if not task.enabled:
                continue

            trigger = task.trigger
            if isinstance(trigger, OnEvent):
                if last_event is not None and trigger.name == last_event:
                    due.append(task_id)
                continue

            if idle_seconds is None:
                continue
            elapsed = idle_seconds - self._baseline(entry, idle_seconds, input_seen)
            if elapsed >= trigger.seconds:
                due.append(task_id)

        return due

    # ---- arming bookkeeping (trigger engine only) ----

    def observe_idle(self, idle_seconds: float) -> None:
        """Record an idle sample: reset baselines after input, arm fresh tasks."""
        input_seen = self._input_seen(idle_seconds)
        for entry in self._entries.values():
            if not isinstance(entry.task.trigger, IdleAfter):
                continue
            entry.armed_at = self._baseline(entry, idle_seconds, input_seen)
        self._last_idle = idle_seconds

    def rearm(self, task_id: str) -> None:
        entry = self._entries.get(task_id)
        if entry is not None:
            entry.armed_at = None

    def disable(self, task_id: str) -> None:
        entry = self._entries.get(task_id)
        if entry is not None:
            entry.task.enabled = False

    def mark_fired(self, task_id: str, now: float) -> None:
        entry = self._entries.get(task_id)
        if entry is not None:
            entry.fire_count += 1
            entry.last_fired_at = now
