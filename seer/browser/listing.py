"""Directory listing for the browser pane."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from ..preview.pipeline import SelectedEntry

logger = logging.getLogger(__name__)


def _entry_from_dir_entry(child: os.DirEntry) -> SelectedEntry:
    info = child.stat()
    return SelectedEntry(
        path=Path(child.path),
        is_directory=stat.S_ISDIR(info.st_mode),
        size_bytes=int(info.st_size),
        modified_at=int(info.st_mtime_ns),
    )


def list_directory(directory: Path, show_hidden: bool = False) -> list[SelectedEntry]:
    """Return entries of ``directory``: directories first, then case-insensitive name order.

    Entries whose ``stat`` fails (dangling symlinks, races with deletion) are
    skipped. ``OSError`` from opening ``directory`` itself propagates.
    """
    entries: list[SelectedEntry] = []
    with os.scandir(directory) as children:
        for child in children:
            if not show_hidden and child.name.startswith("."):
                continue
            try:
                entries.append(_entry_from_dir_entry(child))
            except OSError as exc:
                logger.debug("skipping unreadable entry %s: %s", child.path, exc)
    entries.sort(key=lambda entry: (not entry.is_directory, entry.path.name.lower(), entry.path.name))
    return entries


def index_of(entries: list[SelectedEntry], path: Path | None) -> int:
    """Position of ``path`` in ``entries``, or ``0`` when absent."""
    if path is None:
        return 0
    for index, entry in enumerate(entries):
        if entry.path == path:
            return index
    return 0
