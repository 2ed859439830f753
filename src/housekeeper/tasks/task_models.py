# src/housekeeper/tasks/task_models.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, StrEnum


class ExecutionState(StrEnum):
    """Per-task execution state, owned by the execution guard."""

    IDLE = "idle"
    RUNNING = "running"


class DispatchOutcome(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(slots=True, frozen=True)
class IdleAfter:
    """Due once the host has been idle for `seconds` since the task was armed."""

    seconds: float
    repeating: bool = True

    def __post_init__(self) -> None:
        if not self.seconds > 0:
            raise ValueError(f"IdleAfter.seconds must be > 0, got {self.seconds!r}")


@dataclass(slots=True, frozen=True)
class OnEvent:
    """Due synchronously when the named host event fires."""

    name: str

    def __post_init__(self) -> None:
        if not (self.name or "").strip():
            raise ValueError("OnEvent.name must be a non-empty string")


TriggerSpec = IdleAfter | OnEvent


@dataclass(slots=True, frozen=True)
class TaskResult:
    """
    Explicit result a task body may return.

    Bodies may also return None (treated as success) or raise; the guard
    turns a raised exception into TaskResult.failure(exc).
    """

    ok: bool
    error: BaseException | None = None
    message: str = ""

    @classmethod
    def success(cls) -> TaskResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, error: BaseException | None = None, message: str = "") -> TaskResult:
        if not message and error is not None:
            message = f"{type(error).__name__}: {error}"
        return cls(ok=False, error=error, message=message)


TaskBody = Callable[[], TaskResult | None]


@dataclass(slots=True)
class Task:
    id: str
    trigger: TriggerSpec
    body: TaskBody
    enabled: bool = True
    description: str = ""

    @property
    def kind(self) -> str:
        if isinstance(self.trigger, OnEvent):
            return f"on:{self.trigger.name}"
        mode = "every" if self.trigger.repeating else "once"
        return f"idle:{self.trigger.seconds:g}s:{mode}"
