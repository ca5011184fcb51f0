"""Frame composition for the two-pane browser.

Builds a complete ANSI frame as a string without touching the terminal:
a header row, the entry list on the left, a divider, and the scrolled
preview on the right.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..ansi import clip_ansi_line, display_width, pad_ansi_line
from ..preview.classify import file_category
from ..preview.pipeline import PreviewState, SelectedEntry

LOADING_LABEL = "loading…"
DIVIDER = "\033[2m│\033[0m"
EMPTY_DIRECTORY_LABEL = "(empty)"


@dataclass
class ScreenContext:
    directory: Path
    entries: list[SelectedEntry]
    selected: int
    list_start: int
    preview: PreviewState
    preview_start: int
    width: int
    height: int
    left_width: int
    show_hidden: bool = False
    color: bool = True


def clamp_left_width(total_width: int, desired_left: int) -> int:
    max_possible = max(1, total_width - 2)
    min_left = max(12, min(20, total_width - 12))
    max_left = max(min_left, total_width - 12)
    max_left = min(max_left, max_possible)
    min_left = min(min_left, max_left)
    return max(min_left, min(desired_left, max_left))


def left_width_for_percent(total_width: int, percent: float) -> int:
    return clamp_left_width(total_width, int(total_width * percent / 100.0))


def body_rows(height: int) -> int:
    """Rows available below the header."""
    return max(1, height - 1)


def preview_dimensions(width: int, height: int, left_width: int) -> tuple[int, int]:
    """Width and height of the preview pane for a terminal of ``width`` x ``height``."""
    return max(1, width - left_width - 1), body_rows(height)


def clamp_offset(offset: int, total: int, visible: int) -> int:
    """Keep a scroll offset inside ``[0, total - visible]``."""
    return max(0, min(offset, max(0, total - visible)))


def list_start_for_selection(selected: int, list_start: int, visible: int) -> int:
    """Scroll the list just enough to keep ``selected`` visible."""
    if selected < list_start:
        return selected
    if selected >= list_start + visible:
        return selected - visible + 1
    return list_start


def selected_with_ansi(text: str) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text

    # Keep reverse video active even when the text contains internal resets.
    return "\033[7m" + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


def format_list_entry(entry: SelectedEntry, color: bool = True) -> str:
    name = entry.path.name
    category = file_category(name, entry.is_directory)
    label = f"{category.icon}{name}{'/' if entry.is_directory else ''}"
    if not color:
        return label
    return f"\033[{category.sgr}m{label}\033[0m"


def build_header(context: ScreenContext) -> str:
    """One reverse-video row: directory, selected name, and the loading flag."""
    parts = [str(context.directory)]
    if context.entries:
        parts.append(context.entries[context.selected].path.name)
    if context.show_hidden:
        parts.append("[hidden]")
    left = " ".join(parts)
    right = LOADING_LABEL if context.preview.loading else ""
    usable = max(1, context.width)
    right = clip_ansi_line(right, usable)
    left = clip_ansi_line(left, max(0, usable - display_width(right) - 1))
    gap = " " * max(0, usable - display_width(left) - display_width(right))
    return f"\033[7m{left}{gap}{right}\033[0m"


def preview_lines(preview: PreviewState) -> list[str]:
    return preview.content.split("\n") if preview.content else []


def compose_frame(context: ScreenContext) -> str:
    """Return the full frame; rows are separated by ``\\r\\n`` for raw mode."""
    rows = body_rows(context.height)
    right_width, _ = preview_dimensions(context.width, context.height, context.left_width)
    lines = preview_lines(context.preview)
    preview_start = clamp_offset(context.preview_start, len(lines), rows)

    out = [build_header(context)]
    for row in range(rows):
        entry_idx = context.list_start + row
        if entry_idx < len(context.entries):
            left_text = format_list_entry(context.entries[entry_idx], context.color)
            left_text = clip_ansi_line(left_text, context.left_width)
            if entry_idx == context.selected:
                left_text = selected_with_ansi(left_text)
        elif row == 0 and not context.entries:
            left_text = EMPTY_DIRECTORY_LABEL
        else:
            left_text = ""
        left_text = pad_ansi_line(left_text, context.left_width)

        text_idx = preview_start + row
        right_text = lines[text_idx] if text_idx < len(lines) else ""
        out.append(f"{left_text}{DIVIDER}{pad_ansi_line(right_text, right_width)}")
    return "\r\n".join(out)
