# src/housekeeper/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "housekeeper.log"

# Longest matching prefix wins; anything unlisted falls back to ERROR.
_CONSOLE_MIN_LEVELS: dict[str, int] = {
    "housekeeper.tasks.task_guard": logging.WARNING,
    "housekeeper": logging.NOTSET,
}


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console-only filter. The guard logs a line per dispatch, which is fine in
    the file but drowns the prompt, so it needs WARNING here. Foreign loggers
    (py.warnings included) only reach the console at ERROR.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= _console_min_level(record.name)


def _console_min_level(name: str) -> int:
    best, level = -1, logging.ERROR
    for prefix, min_level in _CONSOLE_MIN_LEVELS.items():
        if (name == prefix or name.startswith(prefix + ".")) and len(prefix) > best:
            best, level = len(prefix), min_level
    return level


def setup_logging(
    *,
    log_dir: str | Path = ".local/housekeeper",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Replace the root handlers with a filtered stderr handler and a full
    file handler writing to <log_dir>/housekeeper.log. Returns the log path.

    Meant to run once from main(); a second call rebuilds both handlers.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    to_file = logging.FileHandler(str(log_file), encoding="utf-8")
    to_file.setLevel(file_level)
    to_file.setFormatter(formatter)
    root.addHandler(to_file)

    logging.captureWarnings(True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    return log_file
