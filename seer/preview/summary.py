"""Short descriptive previews for content that is not shown verbatim."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def human_size(size_bytes: int) -> str:
    """Format a byte count as ``512 B`` / ``1.5 KB`` / ``3.0 MB``."""
    value = float(size_bytes)
    unit_idx = 0
    while value >= 1024 and unit_idx < len(SIZE_UNITS) - 1:
        value /= 1024
        unit_idx += 1
    if unit_idx == 0:
        return f"{size_bytes} {SIZE_UNITS[0]}"
    return f"{value:.1f} {SIZE_UNITS[unit_idx]}"


def format_modified(modified_ns: int) -> str:
    """RFC 822 style local timestamp, e.g. ``02 Jan 06 15:04 UTC``."""
    stamp = datetime.fromtimestamp(modified_ns / 1_000_000_000).astimezone()
    return stamp.strftime("%d %b %y %H:%M %Z")


def binary_summary(path: Path, size_bytes: int, modified_ns: int) -> str:
    return (
        f"binary file: {path.name}\n"
        f"size: {human_size(size_bytes)}\n"
        f"modified: {format_modified(modified_ns)}"
    )


def non_utf8_summary(path: Path, size_bytes: int) -> str:
    return f"non-utf8 text file: {path.name}\nsize: {human_size(size_bytes)}"


def image_fallback_summary(path: Path, size_bytes: int) -> str:
    return (
        f"image file: {path.name}\n"
        f"size: {human_size(size_bytes)}\n\n"
        "preview unavailable for this format"
    )
