# tests/test_workspace.py

from __future__ import annotations

from pathlib import Path

import pytest

from housekeeper.host.agenda import AgendaView
from housekeeper.host.workspace import Workspace


def test_write_and_save_modified(tmp_path: Path) -> None:
    ws = Workspace(tmp_path / "docs")
    ws.write("notes.txt", "TODO call plumber")
    ws.write("notes.txt", "DONE pay rent")
    ws.open("empty.txt")

    assert [d.name for d in ws.modified()] == ["notes.txt"]
    assert ws.save_modified() == ["notes.txt"]
    assert ws.modified() == []
    assert (tmp_path / "docs" / "notes.txt").read_text("utf-8") == "TODO call plumber\nDONE pay rent\n"
    # Nothing left to do on the second pass.
    assert ws.save_modified() == []


def test_open_loads_existing_file(tmp_path: Path) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "plan.md").write_text("- TODO draft\n", "utf-8")

    ws = Workspace(docs)
    doc = ws.open("plan.md")

    assert doc.text == "- TODO draft\n"
    assert doc.modified is False


def test_invalid_names_are_rejected(tmp_path: Path) -> None:
    ws = Workspace(tmp_path)
    with pytest.raises(ValueError):
        ws.open("../escape.txt")


def test_close_refuses_unsaved_unless_forced(tmp_path: Path) -> None:
    ws = Workspace(tmp_path)
    ws.write("a.txt", "x")

    with pytest.raises(ValueError):
        ws.close("a.txt")
    assert ws.close("a.txt", force=True) is True
    assert ws.close("a.txt") is False


def test_clean_stale_keeps_modified_and_special(tmp_path: Path) -> None:
    ws = Workspace(tmp_path)
    ws.open("old.txt", now=0.0)
    ws.open("scratch.txt", special=True, now=0.0)
    ws.write("dirty.txt", "unsaved", now=0.0)
    ws.open("fresh.txt", now=900.0)

    assert ws.clean_stale(600.0, now=1000.0) == ["old.txt"]
    assert sorted(ws.names()) == ["dirty.txt", "fresh.txt", "scratch.txt"]


def test_agenda_collects_todo_and_done(tmp_path: Path) -> None:
    ws = Workspace(tmp_path)
    ws.write("a.txt", "TODO buy milk")
    ws.write("a.txt", "just a line")
    ws.write("b.txt", "* DONE: file taxes")

    agenda = AgendaView()
    assert agenda.render() == "Agenda not built yet."

    agenda.refresh(ws, now=5.0)

    assert [(i.document, i.line_no, i.keyword, i.text) for i in agenda.items] == [
        ("a.txt", 1, "TODO", "buy milk"),
        ("b.txt", 1, "DONE", "file taxes"),
    ]
    assert len(agenda.open_items()) == 1
    assert agenda.refreshed_at == 5.0
    assert "1 open / 2 total" in agenda.render()
