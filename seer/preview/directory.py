"""Render a flat listing of a directory's immediate children.

Unlike the browser pane this preview does not recurse and does not hide
dotfiles: it shows what is inside the selected directory at a glance.
"""

from __future__ import annotations

import os
from pathlib import Path

from .classify import DIR_CATEGORY, file_category

DIR_PREVIEW_MAX_ENTRIES = 40
DIR_PREVIEW_RULE_WIDTH = 30

_MUTED = "38;5;240"
_DIM = "38;5;238"


def _sgr(text: str, sgr: str, color: bool) -> str:
    if not color:
        return text
    return f"\033[{sgr}m{text}\033[0m"


def _scan_children(directory: Path) -> list[tuple[str, bool]]:
    """Return ``(name, is_dir)`` for every child, sorted by name.

    ``OSError`` from opening the directory propagates to the caller.
    """
    children: list[tuple[str, bool]] = []
    with os.scandir(directory) as entries:
        for child in entries:
            try:
                is_dir = child.is_dir()
            except OSError:
                is_dir = False
            children.append((child.name, is_dir))
    children.sort(key=lambda item: item[0])
    return children


def render_directory_preview(
    directory: Path,
    color: bool = True,
    max_entries: int = DIR_PREVIEW_MAX_ENTRIES,
) -> str:
    """List up to ``max_entries`` children with a count header and a "more" suffix."""
    children = _scan_children(directory)
    title = f"{DIR_CATEGORY.icon}{directory.name or str(directory)}/"
    lines = [
        _sgr(title, DIR_CATEGORY.sgr, color),
        _sgr(f"  {len(children)} items", _MUTED, color),
        _sgr("  " + "─" * DIR_PREVIEW_RULE_WIDTH, _DIM, color),
        "",
    ]

    shown = children[: max(0, max_entries)]
    for name, is_dir in shown:
        category = file_category(name, is_dir)
        suffix = "/" if is_dir else ""
        lines.append(_sgr(f"  {category.icon}{name}{suffix}", category.sgr, color))

    hidden_count = len(children) - len(shown)
    if hidden_count > 0:
        lines.append("")
        lines.append(_sgr(f"  … and {hidden_count} more", _MUTED, color))
    return "\n".join(lines).rstrip("\n")
