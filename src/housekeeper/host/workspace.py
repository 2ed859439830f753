# src/housekeeper/host/workspace.py

"""
Open documents of the interactive session.

Each document is an in-memory text with a modified flag, backed by a file
under the documents directory. Housekeeping tasks act on it:
- autosave writes every modified document,
- cleanup closes documents nobody touched for a while (never modified ones).
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass(slots=True)
class Document:
    name: str
    path: Path
    text: str = ""
    modified: bool = False
    last_touched: float = 0.0
    # Documents marked special (scratch, logs) are never closed by cleanup.
    special: bool = False


class Workspace:
    def __init__(self, documents_dir: str | Path) -> None:
        self._dir = Path(documents_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._docs: dict[str, Document] = {}

    @property
    def directory(self) -> Path:
        return self._dir

    def names(self) -> list[str]:
        return list(self._docs)

    def get(self, name: str) -> Document | None:
        return self._docs.get(name)

    def documents(self) -> list[Document]:
        return list(self._docs.values())

    def modified(self) -> list[Document]:
        return [d for d in self._docs.values() if d.modified]

    # ---- editing ----

    def open(self, name: str, *, special: bool = False, now: float | None = None) -> Document:
        """Open (or re-visit) a document; loads the file if it exists on disk."""
        now = time.time() if now is None else now
        doc = self._docs.get(name)
        if doc is not None:
            doc.last_touched = now
            doc.special = doc.special or special
            return doc

        if not _NAME_RE.match(name):
            raise ValueError(f"invalid document name: {name!r}")

        path = self._dir / name
        text = path.read_text("utf-8") if path.exists() else ""
        doc = Document(name=name, path=path, text=text, last_touched=now, special=special)
        self._docs[name] = doc
        logger.debug("Opened document %s (%d chars)", name, len(text))
        return doc

    def write(self, name: str, text: str, *, now: float | None = None) -> Document:
        """Append a line of text to the document (opening it if needed)."""
        doc = self.open(name, now=now)
        if doc.text and not doc.text.endswith("\n"):
            doc.text += "\n"
        doc.text += text.rstrip("\n") + "\n"
        doc.modified = True
        return doc

    def close(self, name: str, *, force: bool = False) -> bool:
        doc = self._docs.get(name)
        if doc is None:
            return False
        if doc.modified and not force:
            raise ValueError(f"document {name!r} has unsaved changes")
        del self._docs[name]
        logger.debug("Closed document %s", name)
        return True

    # ---- persistence ----

    def save(self, name: str) -> bool:
        doc = self._docs.get(name)
        if doc is None or not doc.modified:
            return False
        tmp = doc.path.with_name(doc.path.name + ".tmp")
        tmp.write_text(doc.text, "utf-8")
        os.replace(tmp, doc.path)
        with contextlib.suppress(Exception):
            os.chmod(doc.path, 0o600)
        doc.modified = False
        return True

    def save_modified(self) -> list[str]:
        """Save every modified document. Stops at the first write error (it propagates)."""
        saved = [d.name for d in self.modified() if self.save(d.name)]
        if saved:
            logger.info("Saved %d document(s): %s", len(saved), ", ".join(saved))
        return saved

    def clean_stale(self, max_age_seconds: float, *, now: float | None = None) -> list[str]:
        """Close unmodified, non-special documents untouched for max_age_seconds."""
        now = time.time() if now is None else now
        stale = [
            d.name
            for d in self._docs.values()
            if not d.modified and not d.special and now - d.last_touched >= max_age_seconds
        ]
        for name in stale:
            del self._docs[name]
        if stale:
            logger.info("Closed %d stale document(s): %s", len(stale), ", ".join(stale))
        return stale
