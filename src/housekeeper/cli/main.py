# src/housekeeper/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, starts housekeeping, then runs on one asyncio loop:
- the idle loop feeding scheduler ticks,
- the console connector (optional); without it the app idles until a signal arrives.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal

from ..cli.bootstrap import create_initial_state, start_housekeeping
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.task_scheduler import run_idle_loop

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.workspace.save_modified()
    except Exception:
        logger.exception("Failed to save modified documents.")


async def _run(state: AppState) -> None:
    settings = state.settings
    stop_main = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _handle_signal(signum: int) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on every platform (e.g. Windows event loops).
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, _handle_signal, sig)

    idle_task = asyncio.create_task(
        run_idle_loop(
            state.scheduler,
            state.idle_clock,
            interval_seconds=float(getattr(settings, "tick_interval_seconds", 1.0)),
        )
    )

    waiters = [asyncio.create_task(stop_main.wait())]
    if getattr(settings, "console_enabled", True):
        waiters.append(asyncio.create_task(run_console_loop(state)))
    else:
        logger.info("Console disabled. Running housekeeping only. Press Ctrl+C to stop.")

    try:
        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for t in [idle_task, *waiters]:
            t.cancel()
        for t in [idle_task, *waiters]:
            with contextlib.suppress(asyncio.CancelledError):
                await t


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/housekeeper")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "housekeeper"))

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)
    start_housekeeping(state)

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
