# src/housekeeper/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..host.agenda import AgendaView
from ..host.workspace import Workspace
from ..journal.run_journal import RunJournal
from ..tasks.task_scheduler import MaintenanceScheduler
from ..tasks.threshold import ResourceThresholdController
from .idle import IdleClock


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    scheduler: MaintenanceScheduler
    controller: ResourceThresholdController
    idle_clock: IdleClock
    workspace: Workspace
    journal: RunJournal | None = None
    agenda: AgendaView = field(default_factory=AgendaView)

    focused: bool = True
