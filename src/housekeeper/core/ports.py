# src/housekeeper/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the scheduler core.

The core depends on Protocols instead of concrete implementations.
The host (console app, tests) supplies idle samples, named events,
a failure sink and the reclamation primitive.
"""

from typing import Any, Protocol


class HostListener(Protocol):
    """What the host drives: one tick per loop iteration, plus named events."""

    def on_tick(self, now: float, idle_seconds: float) -> list[str]: ...
    def on_event(self, name: str) -> list[str]: ...


class IdleSource(Protocol):
    """Seconds since the last user input, as seen by the host."""

    def idle_seconds(self, now: float | None = None) -> float: ...


class FailureSink(Protocol):
    """Where the execution guard reports a failed task run."""

    def report_failure(self, task_id: str, error: BaseException | None, message: str) -> None: ...


class RunRecorder(Protocol):
    """Optional history of every finished dispatch, successful or not."""

    def record_run(
            self,
            *,
            task_id: str,
            started_at: float,
            finished_at: float,
            outcome: str,
            error: str | None = None,
    ) -> None: ...


class Reclaimer(Protocol):
    """Actually frees resources (e.g. a garbage collection pass)."""

    def __call__(self) -> Any: ...


class ThresholdSink(Protocol):
    """Pushes the controller's threshold value into the host runtime."""

    def __call__(self, value: int) -> None: ...
