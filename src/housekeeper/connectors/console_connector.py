# src/housekeeper/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from datetime import datetime

from ..cli.bootstrap import SCRATCH_DOCUMENT
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

PRE_COMMAND_EVENT = "pre-command"


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[str | None]) -> threading.Thread:
    """
    Read stdin in a daemon thread and hand lines to the event loop.

    Only the queue crosses threads; scheduler state is touched from the loop thread alone.
    None on the queue means EOF / Ctrl+C.
    """

    def _push(item: str | None) -> None:
        # The loop may already be closed during shutdown.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(queue.put_nowait, item)

    def _reader() -> None:
        while True:
            try:
                line = input(">>> ")
            except (EOFError, KeyboardInterrupt):
                _push(None)
                return
            _push(line)

    t = threading.Thread(target=_reader, name="console-stdin", daemon=True)
    t.start()
    return t


def handle_line(state: AppState, line: str) -> str | None:
    """
    One console input line: counts as user activity, fires pre-command,
    then runs a slash command or appends plain text to the scratch document.
    """
    state.idle_clock.touch()
    state.scheduler.on_event(PRE_COMMAND_EVENT)

    try:
        cmd_response = command_registry.handle(state, line, emit=_print_ts)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."

    if cmd_response is not None:
        return cmd_response

    # Scratch stays special even if it was closed and is now reopened here.
    state.workspace.open(SCRATCH_DOCUMENT, special=True)
    state.workspace.write(SCRATCH_DOCUMENT, line)
    return None


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type text to add it to the scratch document. Use /help for commands, /exit to quit.\n")

    queue: asyncio.Queue[str | None] = asyncio.Queue()
    _start_stdin_reader(asyncio.get_running_loop(), queue)

    while True:
        raw = await queue.get()
        if raw is None:
            logger.info("Console EOF received, exiting.")
            break

        line = raw.strip()
        if not line:
            state.idle_clock.touch()
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        response = handle_line(state, line)
        if response is not None:
            _print_ts(response)

    logger.info("Console connector finished.")
