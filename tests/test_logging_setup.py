# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from housekeeper.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("housekeeper.tasks.task_scheduler", logging.DEBUG, True),
        ("housekeeper.tasks.task_guard", logging.INFO, False),
        ("housekeeper.tasks.task_guard", logging.WARNING, True),
        ("housekeeper.tasks.task_guardian", logging.DEBUG, True),
        ("py.warnings", logging.WARNING, False),
        ("sqlite_helper", logging.WARNING, False),
        ("sqlite_helper", logging.ERROR, True),
        ("housekeeperish", logging.INFO, False),
    ],
)
def test_console_filter_levels(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)
    logging.captureWarnings(False)


def test_setup_logging_writes_debug_to_file(tmp_path: Path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")
    setup_logging(log_dir=tmp_path / "logs")

    logging.getLogger("housekeeper.tasks.task_guard").debug("dispatch detail")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file == tmp_path / "logs" / "housekeeper.log"
    assert len(logging.getLogger().handlers) == 2
    assert "dispatch detail" in log_file.read_text("utf-8")
