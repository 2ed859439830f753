# src/housekeeper/host/agenda.py

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field

from .workspace import Workspace

_ITEM_RE = re.compile(r"^\s*(?:[-*]+\s+)?(TODO|DONE)\b[:\s]*(.*)$")


@dataclass(slots=True, frozen=True)
class AgendaItem:
    document: str
    line_no: int
    keyword: str
    text: str


@dataclass(slots=True)
class AgendaView:
    """Derived view of TODO/DONE lines across open documents; rebuilt on refresh()."""

    items: list[AgendaItem] = field(default_factory=list)
    refreshed_at: float | None = None
    refresh_count: int = 0

    def refresh(self, workspace: Workspace, *, now: float | None = None) -> None:
        items: list[AgendaItem] = []
        for doc in workspace.documents():
            for i, line in enumerate(doc.text.splitlines(), start=1):
                m = _ITEM_RE.match(line)
                if m:
                    items.append(AgendaItem(doc.name, i, m.group(1), m.group(2).strip()))
        self.items = items
        self.refreshed_at = time.time() if now is None else now
        self.refresh_count += 1

    def open_items(self) -> list[AgendaItem]:
        return [it for it in self.items if it.keyword == "TODO"]

    def render(self) -> str:
        if self.refreshed_at is None:
            return "Agenda not built yet."
        if not self.items:
            return "Agenda is empty."
        lines = [f"Agenda ({len(self.open_items())} open / {len(self.items)} total):"]
        for it in self.items:
            lines.append(f"  [{it.keyword}] {it.text}  ({it.document}:{it.line_no})")
        return "\n".join(lines)
