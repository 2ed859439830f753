# src/housekeeper/tasks/threshold.py

from __future__ import annotations

import gc
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from ..core.ports import Reclaimer, ThresholdSink
from .task_models import IdleAfter, OnEvent

if TYPE_CHECKING:
    from .task_scheduler import MaintenanceScheduler

logger = logging.getLogger(__name__)

POST_INIT_EVENT = "post-init"
FOCUS_LOST_EVENT = "focus-lost"


class ThresholdPhase(StrEnum):
    RELAXED = "relaxed"
    STEADY = "steady"


@dataclass(frozen=True, slots=True)
class ThresholdPresets:
    startup: int = 64
    steady: int = 32

    def __post_init__(self) -> None:
        if self.startup <= 0 or self.steady <= 0:
            raise ValueError("threshold presets must be positive")


def gc_reclaim() -> int:
    """Full collection; returns the number of unreachable objects found."""
    return gc.collect()


class GcThresholdSink:
    """Maps the abstract threshold onto the generation-0 gc threshold."""

    def __init__(self, scale: int = 100) -> None:
        self.scale = max(1, int(scale))

    def __call__(self, value: int) -> None:
        _, gen1, gen2 = gc.get_threshold()
        gc.set_threshold(value * self.scale, gen1, gen2)


class ResourceThresholdController:
    """
    Owns the shared resource threshold.

    Lifecycle: start() sets the relaxed startup preset, finish_init() drops
    to the steady preset exactly once. reclaim_now() runs the reclaimer on
    demand and never touches the threshold, so idle reclamation and
    focus-loss reclamation can both fire in any order.
    """

    def __init__(
        self,
        presets: ThresholdPresets | None = None,
        *,
        reclaimer: Reclaimer = gc_reclaim,
        sink: ThresholdSink | None = None,
    ) -> None:
        self.presets = presets or ThresholdPresets()
        self._reclaimer = reclaimer
        self._sink = sink
        self._value = self.presets.startup
        self._phase = ThresholdPhase.RELAXED
        self.reclaim_count = 0

    @property
    def value(self) -> int:
        return self._value

    @property
    def phase(self) -> ThresholdPhase:
        return self._phase

    def _apply(self, value: int) -> None:
        self._value = value
        if self._sink is not None:
            self._sink(value)

    def start(self) -> None:
        self._phase = ThresholdPhase.RELAXED
        self._apply(self.presets.startup)
        logger.info("Resource threshold set to startup preset (%d)", self._value)

    def finish_init(self) -> None:
        if self._phase is ThresholdPhase.STEADY:
            return
        self._phase = ThresholdPhase.STEADY
        self._apply(self.presets.steady)
        logger.info("Resource threshold lowered to steady preset (%d)", self._value)

    def reclaim_now(self) -> None:
        self.reclaim_count += 1
        freed = self._reclaimer()
        logger.debug("Reclaimed resources (pass=%d result=%s)", self.reclaim_count, freed)

    def install(self, scheduler: MaintenanceScheduler, *, idle_reclaim_seconds: float = 60.0) -> None:
        """Register the lifecycle transition and both reclamation triggers."""
        scheduler.register(
            "threshold-steady",
            OnEvent(POST_INIT_EVENT),
            self.finish_init,
            description="Lower the resource threshold once initialization is done.",
        )
        scheduler.register(
            "reclaim-focus-lost",
            OnEvent(FOCUS_LOST_EVENT),
            self.reclaim_now,
            description="Reclaim resources when the application loses focus.",
        )
        scheduler.register(
            "reclaim-idle",
            IdleAfter(idle_reclaim_seconds, repeating=True),
            self.reclaim_now,
            description="Reclaim resources while the user is idle.",
        )
