# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class ReportedFailure:
    task_id: str
    error: BaseException | None
    message: str


@dataclass(slots=True)
class RecordingSink:
    """FailureSink + RunRecorder that keeps everything in lists for assertions."""

    failures: list[ReportedFailure] = field(default_factory=list)
    runs: list[tuple[str, str, str | None]] = field(default_factory=list)

    def report_failure(self, task_id: str, error: BaseException | None, message: str) -> None:
        self.failures.append(ReportedFailure(task_id, error, message))

    def record_run(
        self,
        *,
        task_id: str,
        started_at: float,
        finished_at: float,
        outcome: str,
        error: str | None = None,
    ) -> None:
        self.runs.append((task_id, outcome, error))


class FakeReclaimer:
    """Counts reclamation passes instead of running the garbage collector."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        return 0


class RecordingThresholdSink:
    def __init__(self) -> None:
        self.values: list[int] = []

    def __call__(self, value: int) -> None:
        self.values.append(value)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SteppingIdleSource:
    """Idle source whose reading grows by `step` on every call (0, step, 2*step, ...)."""

    def __init__(self, step: float = 1.0) -> None:
        self.step = step
        self.calls = 0

    def idle_seconds(self, now: float | None = None) -> float:
        value = self.calls * self.step
        self.calls += 1
        return value
