# tests/test_run_journal.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from housekeeper.journal.run_journal import RunJournal
from housekeeper.tasks.task_models import IdleAfter, OnEvent
from housekeeper.tasks.task_scheduler import MaintenanceScheduler


def test_record_and_query_runs(tmp_path: Path) -> None:
    journal = RunJournal(tmp_path / "journal.sqlite3")

    journal.record_run(task_id="autosave", started_at=1.0, finished_at=1.5, outcome="completed")
    journal.record_run(task_id="reclaim", started_at=2.0, finished_at=2.1, outcome="failed", error="boom")

    assert journal.count_runs() == 2
    assert journal.count_runs(outcome="failed") == 1

    recent = journal.recent_runs(limit=10)
    assert [r.task_id for r in recent] == ["reclaim", "autosave"]
    assert recent[0].error == "boom"
    assert [r.task_id for r in journal.recent_runs(task_id="autosave")] == ["autosave"]


def test_journal_keeps_only_last_rows(tmp_path: Path) -> None:
    journal = RunJournal(tmp_path / "journal.sqlite3", keep_last=3)
    for i in range(6):
        journal.record_run(task_id=f"t{i}", started_at=float(i), finished_at=float(i), outcome="completed")

    assert journal.count_runs() == 3
    assert [r.task_id for r in journal.recent_runs()] == ["t5", "t4", "t3"]


def test_journal_as_scheduler_sink(tmp_path: Path) -> None:
    journal = RunJournal(tmp_path / "journal.sqlite3")
    sched = MaintenanceScheduler(sink=journal, recorder=journal)

    def boom() -> None:
        raise RuntimeError("no space left")

    sched.register("ok", IdleAfter(1), lambda: None)
    sched.register("bad", IdleAfter(1), boom)
    sched.on_tick(0.0, 0.0)
    sched.on_tick(1.0, 1.0)

    runs = {r.task_id: r for r in journal.recent_runs()}
    assert runs["ok"].outcome == "completed"
    assert runs["bad"].outcome == "failed"
    assert runs["bad"].error == "RuntimeError: no space left"


def test_schema_survives_reopen(tmp_path: Path) -> None:
    db = tmp_path / "journal.sqlite3"
    RunJournal(db).record_run(task_id="x", started_at=0.0, finished_at=0.0, outcome="completed")

    assert RunJournal(db).count_runs() == 1


def test_journal_logs_failure_with_traceback(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    journal = RunJournal(tmp_path / "journal.sqlite3")
    sched = MaintenanceScheduler(sink=journal)

    def boom() -> None:
        raise RuntimeError("no space left")

    sched.register("bad", OnEvent("focus-lost"), boom)
    with caplog.at_level(logging.ERROR, logger="housekeeper.journal.run_journal"):
        sched.on_event("focus-lost")

    records = [r for r in caplog.records if r.name == "housekeeper.journal.run_journal"]
    assert len(records) == 1
    assert records[0].levelno == logging.ERROR
    assert records[0].exc_info is not None
    assert isinstance(records[0].exc_info[1], RuntimeError)


def test_journal_logs_failure_result_without_traceback(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    journal = RunJournal(tmp_path / "journal.sqlite3")

    with caplog.at_level(logging.ERROR, logger="housekeeper.journal.run_journal"):
        journal.report_failure("stale", None, "nothing to clean")

    (record,) = [r for r in caplog.records if r.name == "housekeeper.journal.run_journal"]
    assert record.levelno == logging.ERROR
    assert not record.exc_info
    assert "nothing to clean" in record.getMessage()
