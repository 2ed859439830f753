# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from housekeeper.core.idle import IdleClock
from housekeeper.core.state import AppState
from housekeeper.host.workspace import Workspace
from housekeeper.journal.run_journal import RunJournal
from housekeeper.tasks.task_scheduler import MaintenanceScheduler
from housekeeper.tasks.threshold import ResourceThresholdController, ThresholdPresets

from .fakes import FakeClock, FakeReclaimer, RecordingThresholdSink


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the housekeeping helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="housekeeper-test",
        log_level="DEBUG",
        console_enabled=False,
        # Paths (tmp per test run)
        data_dir=tmp_path,
        documents_dir=tmp_path / "documents",
        journal_db_path=tmp_path / "journal.sqlite3",
        # Loop + idle delays
        tick_interval_seconds=0.01,
        autosave_idle_seconds=30.0,
        reclaim_idle_seconds=60.0,
        cleanup_idle_seconds=300.0,
        stale_document_seconds=3600.0,
        agenda_idle_seconds=120.0,
        # Threshold
        threshold_startup=64,
        threshold_steady=32,
        gc_threshold_scale=100,
    )


@pytest.fixture()
def reclaimer() -> FakeReclaimer:
    return FakeReclaimer()


@pytest.fixture()
def threshold_sink() -> RecordingThresholdSink:
    return RecordingThresholdSink()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    reclaimer: FakeReclaimer,
    threshold_sink: RecordingThresholdSink,
    clock: FakeClock,
) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: the run journal is the real SQLite one (in tmp_path); only the
    garbage collector and the clock are faked.
    """
    journal = RunJournal(settings.journal_db_path)
    return AppState(
        settings=settings,
        scheduler=MaintenanceScheduler(sink=journal, recorder=journal),
        controller=ResourceThresholdController(
            ThresholdPresets(startup=settings.threshold_startup, steady=settings.threshold_steady),
            reclaimer=reclaimer,
            sink=threshold_sink,
        ),
        idle_clock=IdleClock(clock=clock),
        workspace=Workspace(settings.documents_dir),
        journal=journal,
    )
