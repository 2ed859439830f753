# src/housekeeper/journal/run_journal.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RunRecord:
    id: int
    task_id: str
    started_at: float
    finished_at: float
    outcome: str
    error: str | None


class RunJournal:
    """
    SQLite journal of housekeeping runs.

    Used as both the guard's RunRecorder (every finished dispatch) and its
    FailureSink (failures are logged here, the row itself comes from record_run).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "journal.sqlite3", *, keep_last: int = 5000) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._keep_last = max(1, int(keep_last))
        self._ensure_schema()
        try:
            total = self.count_runs()
        except Exception:
            total = -1
        logger.info("RunJournal ready db=%s total=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS runs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    task_id TEXT NOT NULL,
                    started_at REAL NOT NULL,
                    finished_at REAL NOT NULL,
                    outcome TEXT NOT NULL,
                    error TEXT
                )
                """
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_runs_task ON runs(task_id, id)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> RunRecord:
        return RunRecord(
            id=int(row["id"]),
            task_id=str(row["task_id"]),
            started_at=float(row["started_at"] or 0.0),
            finished_at=float(row["finished_at"] or 0.0),
            outcome=str(row["outcome"] or ""),
            error=row["error"],
        )

    # ---- sink / recorder API ----

    def report_failure(self, task_id: str, error: BaseException | None, message: str) -> None:
        logger.error(
            "Housekeeping task %s failed: %s",
            task_id,
            message or "(no details)",
            exc_info=error,
        )

    def record_run(
        self,
        *,
        task_id: str,
        started_at: float,
        finished_at: float,
        outcome: str,
        error: str | None = None,
    ) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "INSERT INTO runs(task_id, started_at, finished_at, outcome, error) VALUES (?, ?, ?, ?, ?)",
                (task_id, float(started_at), float(finished_at), outcome, error),
            )
            new_id = int(cur.lastrowid or 0)
            if new_id > self._keep_last:
                cur.execute("DELETE FROM runs WHERE id <= ?", (new_id - self._keep_last,))
            conn.commit()
        finally:
            conn.close()

    # ---- queries ----

    def count_runs(self, *, outcome: str | None = None) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if outcome is None:
                cur.execute("SELECT COUNT(*) FROM runs")
            else:
                cur.execute("SELECT COUNT(*) FROM runs WHERE outcome = ?", (outcome,))
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def recent_runs(self, *, limit: int = 20, task_id: str | None = None) -> list[RunRecord]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if task_id is None:
                cur.execute("SELECT * FROM runs ORDER BY id DESC LIMIT ?", (int(limit),))
            else:
                cur.execute(
                    "SELECT * FROM runs WHERE task_id = ? ORDER BY id DESC LIMIT ?",
                    (task_id, int(limit)),
                )
            return [self._row_to_record(r) for r in cur.fetchall()]
        finally:
            conn.close()
