# src/housekeeper/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time; every key has a default.
- Idle delays and threshold presets are tunable without code changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "HOUSEKEEPER"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    documents_dir: Path
    journal_db_path: Path

    # ---- Host loop ----
    tick_interval_seconds: float

    # ---- Housekeeping idle delays ----
    autosave_idle_seconds: float
    reclaim_idle_seconds: float
    cleanup_idle_seconds: float
    stale_document_seconds: float
    agenda_idle_seconds: float

    # ---- Resource threshold ----
    threshold_startup: int
    threshold_steady: int
    gc_threshold_scale: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "housekeeper") or "housekeeper"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/housekeeper"))
        documents_dir = _env_path(_k("DOCUMENTS_DIR"), data_dir / "documents")
        journal_db_path = _env_path(_k("JOURNAL_DB_PATH"), data_dir / "journal.sqlite3")

        tick_interval_seconds = _env_float(_k("TICK_INTERVAL_SECONDS"), 1.0)

        autosave_idle_seconds = _env_float(_k("AUTOSAVE_IDLE_SECONDS"), 30.0)
        reclaim_idle_seconds = _env_float(_k("RECLAIM_IDLE_SECONDS"), 60.0)
        cleanup_idle_seconds = _env_float(_k("CLEANUP_IDLE_SECONDS"), 300.0)
        stale_document_seconds = _env_float(_k("STALE_DOCUMENT_SECONDS"), 3600.0)
        agenda_idle_seconds = _env_float(_k("AGENDA_IDLE_SECONDS"), 120.0)

        threshold_startup = _env_int(_k("THRESHOLD_STARTUP"), 64)
        threshold_steady = _env_int(_k("THRESHOLD_STEADY"), 32)
        gc_threshold_scale = _env_int(_k("GC_THRESHOLD_SCALE"), 100)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            documents_dir=documents_dir,
            journal_db_path=journal_db_path,
            tick_interval_seconds=tick_interval_seconds,
            autosave_idle_seconds=autosave_idle_seconds,
            reclaim_idle_seconds=reclaim_idle_seconds,
            cleanup_idle_seconds=cleanup_idle_seconds,
            stale_document_seconds=stale_document_seconds,
            agenda_idle_seconds=agenda_idle_seconds,
            threshold_startup=threshold_startup,
            threshold_steady=threshold_steady,
            gc_threshold_scale=gc_threshold_scale,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
