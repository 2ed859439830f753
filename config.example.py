# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting without reading housekeeper/config.py.
"""

ENV_VARS = {
    # App / logging
    "HOUSEKEEPER_APP_NAME": "App display name (default: housekeeper).",
    "HOUSEKEEPER_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "HOUSEKEEPER_CONSOLE_ENABLED": "Enable console connector (true/false, default: true).",
    # Paths
    "HOUSEKEEPER_DATA_DIR": "Base local data dir (default: .local/housekeeper).",
    "HOUSEKEEPER_DOCUMENTS_DIR": "Where documents are saved (default: <DATA_DIR>/documents).",
    "HOUSEKEEPER_JOURNAL_DB_PATH": "SQLite run journal (default: <DATA_DIR>/journal.sqlite3).",
    # Host loop
    "HOUSEKEEPER_TICK_INTERVAL_SECONDS": "How often idle time is sampled (default: 1.0).",
    # Housekeeping delays (seconds of user idle time)
    "HOUSEKEEPER_AUTOSAVE_IDLE_SECONDS": "Autosave modified documents (default: 30).",
    "HOUSEKEEPER_RECLAIM_IDLE_SECONDS": "Run a garbage collection pass (default: 60).",
    "HOUSEKEEPER_CLEANUP_IDLE_SECONDS": "Close stale documents (default: 300).",
    "HOUSEKEEPER_STALE_DOCUMENT_SECONDS": "Age after which an unmodified document is stale (default: 3600).",
    "HOUSEKEEPER_AGENDA_IDLE_SECONDS": "Rebuild the TODO/DONE agenda (default: 120).",
    # Resource threshold
    "HOUSEKEEPER_THRESHOLD_STARTUP": "Relaxed threshold used during startup (default: 64).",
    "HOUSEKEEPER_THRESHOLD_STEADY": "Threshold after initialization (default: 32).",
    "HOUSEKEEPER_GC_THRESHOLD_SCALE": "gc generation-0 threshold = threshold * scale (default: 100).",
}
