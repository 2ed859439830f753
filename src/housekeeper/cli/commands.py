# src/housekeeper/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import describe_tasks
from ..tasks.threshold import FOCUS_LOST_EVENT

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

FOCUS_IN_EVENT = "focus-in"

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _ts_local(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M:%S")


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    ctrl = state.controller
    running = state.scheduler.guard.running()
    return (
        "Status:\n"
        f"  Focus: {'IN' if state.focused else 'OUT'}\n"
        f"  Idle: {state.idle_clock.idle_seconds():.1f}s\n"
        f"  Threshold: {ctrl.value} ({ctrl.phase.value}), reclaim passes: {ctrl.reclaim_count}\n"
        f"  Tasks: {len(state.scheduler.registry)} registered, running: {', '.join(running) or '-'}\n"
        f"  Documents: {len(state.workspace.names())} open, {len(state.workspace.modified())} modified"
    )


def cmd_tasks(state: AppState, args: list[str]) -> str:
    lines = describe_tasks(state)
    if not lines:
        return "No housekeeping tasks registered."
    return "Housekeeping tasks:\n" + "\n".join(f"  {ln}" for ln in lines)


def cmd_open(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /open NAME"
    try:
        doc = state.workspace.open(args[0])
    except ValueError as e:
        return str(e)
    lines = doc.text.count("\n")
    return f"Opened {doc.name} ({lines} line(s){', modified' if doc.modified else ''})."


def cmd_write(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /write NAME TEXT..."
    try:
        doc = state.workspace.write(args[0], " ".join(args[1:]))
    except ValueError as e:
        return str(e)
    return f"{doc.name}: +1 line (unsaved)."


def cmd_save(state: AppState, args: list[str]) -> str:
    if args:
        saved = [name for name in args if state.workspace.save(name)]
    else:
        saved = state.workspace.save_modified()
    if not saved:
        return "Nothing to save."
    return "Saved: " + ", ".join(saved)


def cmd_close(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /close NAME [force]"
    force = len(args) > 1 and args[1].lower() in ("force", "!")
    try:
        closed = state.workspace.close(args[0], force=force)
    except ValueError as e:
        return f"{e}. Use /save first or /close {args[0]} force."
    return f"Closed {args[0]}." if closed else f"No open document named {args[0]}."


def cmd_agenda(state: AppState, args: list[str]) -> str:
    if args and args[0].lower() in ("refresh", "r"):
        state.agenda.refresh(state.workspace)
    return state.agenda.render()


def cmd_event(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /event NAME  -> fire a named host event (focus-lost, focus-in, ...)
    """
    if not args:
        return "Usage: /event NAME (e.g. /event focus-lost)"
    name = args[0].lower()
    if name == FOCUS_LOST_EVENT:
        state.focused = False
    elif name == FOCUS_IN_EVENT:
        state.focused = True

    if emit is not None:
        emit(f"[EVENT] {name}")
    dispatched = state.scheduler.on_event(name)
    if not dispatched:
        return f"Event {name}: no tasks ran."
    return f"Event {name}: ran {', '.join(dispatched)}."


def cmd_gc(state: AppState, args: list[str]) -> str:
    state.controller.reclaim_now()
    return f"Reclaimed (pass {state.controller.reclaim_count}); threshold stays {state.controller.value}."


def cmd_history(state: AppState, args: list[str]) -> str:
    if state.journal is None:
        return "Run journal is disabled."
    task_id = args[0] if args else None
    runs = state.journal.recent_runs(limit=15, task_id=task_id)
    if not runs:
        return "No runs recorded yet."
    lines = ["Recent runs:"]
    for r in runs:
        err = f"  ({r.error})" if r.error else ""
        lines.append(f"  {_ts_local(r.started_at)} {r.task_id:<20} {r.outcome}{err}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show focus, idle time, threshold and documents.")
registry.register("tasks", cmd_tasks, help_text="List housekeeping tasks and their state.")
registry.register("open", cmd_open, help_text="Open a document: /open NAME.")
registry.register("write", cmd_write, help_text="Append a line: /write NAME TEXT.", aliases=["w"])
registry.register("save", cmd_save, help_text="Save modified documents: /save [NAME...].")
registry.register("close", cmd_close, help_text="Close a document: /close NAME [force].")
registry.register("agenda", cmd_agenda, help_text="Show TODO/DONE items: /agenda [refresh].")
registry.register("event", cmd_event, help_text="Fire a host event: /event focus-lost | focus-in.")
registry.register("gc", cmd_gc, help_text="Reclaim resources now.")
registry.register("history", cmd_history, help_text="Recent housekeeping runs: /history [TASK].")
