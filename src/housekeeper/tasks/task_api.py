# src/housekeeper/tasks/task_api.py

from __future__ import annotations

import logging

from ..core.state import AppState
from .task_models import IdleAfter, OnEvent, TaskResult
from .threshold import FOCUS_LOST_EVENT

logger = logging.getLogger(__name__)

DEFAULT_TASK_IDS = (
    "threshold-steady",
    "reclaim-focus-lost",
    "reclaim-idle",
    "autosave-idle",
    "autosave-focus-lost",
    "cleanup-stale",
    "agenda-refresh",
)


def install_default_housekeeping(state: AppState) -> list[str]:
    """
    Register the standard housekeeping tasks on state.scheduler.

    Safe to call again: every id is re-registered in place of the old one.
    Returns the registered ids in registration order.
    """
    settings = state.settings
    scheduler = state.scheduler

    state.controller.install(
        scheduler,
        idle_reclaim_seconds=float(getattr(settings, "reclaim_idle_seconds", 60.0)),
    )

    def autosave() -> None:
        state.workspace.save_modified()

    scheduler.register(
        "autosave-idle",
        IdleAfter(float(getattr(settings, "autosave_idle_seconds", 30.0)), repeating=True),
        autosave,
        description="Save modified documents while the user is idle.",
    )
    scheduler.register(
        "autosave-focus-lost",
        OnEvent(FOCUS_LOST_EVENT),
        autosave,
        description="Save modified documents when the application loses focus.",
    )

    max_age = float(getattr(settings, "stale_document_seconds", 3600.0))

    def cleanup() -> None:
        state.workspace.clean_stale(max_age)

    scheduler.register(
        "cleanup-stale",
        IdleAfter(float(getattr(settings, "cleanup_idle_seconds", 300.0)), repeating=True),
        cleanup,
        description=f"Close unmodified documents untouched for {max_age:g}s.",
    )

    def refresh_agenda() -> TaskResult:
        if state.workspace.directory.exists():
            state.agenda.refresh(state.workspace)
            return TaskResult.success()
        return TaskResult.failure(message=f"documents dir is gone: {state.workspace.directory}")

    scheduler.register(
        "agenda-refresh",
        IdleAfter(float(getattr(settings, "agenda_idle_seconds", 120.0)), repeating=True),
        refresh_agenda,
        description="Rebuild the agenda view from open documents.",
    )

    ids = [tid for tid in DEFAULT_TASK_IDS if tid in scheduler.registry]
    logger.info("Installed %d housekeeping tasks.", len(ids))
    return ids


def describe_tasks(state: AppState) -> list[str]:
    """One line per registered task, for /tasks and /status."""
    lines: list[str] = []
    for entry in state.scheduler.registry.entries():
        task = entry.task
        run_state = state.scheduler.guard.state_of(task.id).value
        flag = "" if task.enabled else " (disabled)"
        lines.append(
            f"{task.id:<20} {task.kind:<24} fired={entry.fire_count} state={run_state}{flag}"
        )
    return lines
