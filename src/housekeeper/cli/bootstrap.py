# src/housekeeper/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (journal/scheduler/controller/workspace),
- starts housekeeping and announces the end of initialization.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.idle import IdleClock
from ..core.state import AppState
from ..host.workspace import Workspace
from ..journal.run_journal import RunJournal
from ..tasks.task_api import install_default_housekeeping
from ..tasks.task_scheduler import MaintenanceScheduler
from ..tasks.threshold import (
    POST_INIT_EVENT,
    GcThresholdSink,
    ResourceThresholdController,
    ThresholdPresets,
    gc_reclaim,
)

logger = logging.getLogger(__name__)

SCRATCH_DOCUMENT = "scratch.txt"


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.documents_dir.mkdir(parents=True, exist_ok=True)
    settings.journal_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    journal = RunJournal(settings.journal_db_path)
    controller = ResourceThresholdController(
        ThresholdPresets(startup=settings.threshold_startup, steady=settings.threshold_steady),
        reclaimer=gc_reclaim,
        sink=GcThresholdSink(settings.gc_threshold_scale),
    )

    state = AppState(
        settings=settings,
        scheduler=MaintenanceScheduler(sink=journal, recorder=journal),
        controller=controller,
        idle_clock=IdleClock(),
        workspace=Workspace(settings.documents_dir),
        journal=journal,
    )
    return state


def start_housekeeping(state: AppState) -> None:
    """
    Startup sequence:
    relaxed threshold -> register tasks -> open scratch -> post-init (steady threshold).
    """
    state.controller.start()
    install_default_housekeeping(state)
    state.workspace.open(SCRATCH_DOCUMENT, special=True)
    state.scheduler.on_event(POST_INIT_EVENT)
    logger.info("Initialization finished; threshold=%d", state.controller.value)
