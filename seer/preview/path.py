"""Build preview payloads for files and directories.

This module decides how a selected path should be rendered in the preview
pane and dispatches to one renderer strategy per content kind:
- directory listings
- image half-block / luminance art
- binary and non-UTF-8 placeholders
- Markdown, diagram and JSON documents
- plain or syntax-colored source text

Only stat/open/read failures escape as ``OSError``; every content problem is
turned into descriptive preview text by the strategy that met it.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ..diagram import render_diagram
from .classify import IMAGE_EXTENSIONS, ContentKind, classify, decode_sample, extension_of, read_sample
from .directory import render_directory_preview
from .image import render_image_preview, supports_true_color
from .jsonview import render_json_preview
from .markdown import render_markdown_preview
from .summary import binary_summary, non_utf8_summary
from .syntax import DEFAULT_STYLE, normalize_style, render_syntax_preview

TRUNCATION_NOTICE = "... preview truncated ..."


@dataclass(frozen=True)
class RenderedPreview:
    """Rendered preview text plus the classification that produced it."""

    text: str
    kind: ContentKind
    truncated: bool = False

    @classmethod
    def from_text(cls, text: str, kind: ContentKind, truncated: bool) -> RenderedPreview:
        """Construct a text payload, appending the truncation notice when needed."""
        if truncated:
            text = f"{text}\n\n{TRUNCATION_NOTICE}"
        return cls(text=text, kind=kind, truncated=truncated)


def render_text_kind(
    kind: ContentKind,
    text: str,
    path: Path,
    width: int,
    style: str,
    color: bool,
    true_color: bool,
) -> str:
    """Dispatch decoded text to the strategy for ``kind``."""
    if kind is ContentKind.MARKDOWN:
        return render_markdown_preview(text, width, code_theme=style, color=color)
    if kind is ContentKind.DIAGRAM:
        return render_diagram(text)
    if kind is ContentKind.JSON:
        return render_json_preview(text, color=color)
    return render_syntax_preview(text, path, style=style, color=color, true_color=true_color)


def build_preview(
    path: Path,
    width: int,
    height: int,
    *,
    style: str = DEFAULT_STYLE,
    color: bool = True,
    env: Mapping[str, str] | None = None,
) -> RenderedPreview:
    """Classify ``path`` and render it for a ``width`` x ``height`` pane.

    Resolution order:
    1. directory -> child listing
    2. image extension -> decoded image art (or a fallback description)
    3. NUL byte in the first 8 KiB -> binary summary
    4. invalid UTF-8 -> non-UTF-8 summary
    5. Markdown / diagram / JSON by extension, else syntax-highlighted text
    """
    if env is None:
        env = os.environ
    color = color and "NO_COLOR" not in env
    true_color = color and supports_true_color(env)
    info = path.stat()
    if stat.S_ISDIR(info.st_mode):
        return RenderedPreview(
            text=render_directory_preview(path, color=color),
            kind=ContentKind.DIRECTORY,
        )

    if extension_of(path) in IMAGE_EXTENSIONS:
        return RenderedPreview(
            text=render_image_preview(path, width, height, info.st_size, true_color=true_color),
            kind=ContentKind.IMAGE,
        )

    sample = read_sample(path)
    kind = classify(path, False, sample)
    if kind is ContentKind.BINARY:
        return RenderedPreview(
            text=binary_summary(path, info.st_size, info.st_mtime_ns),
            kind=kind,
        )
    if kind is ContentKind.NON_UTF8_TEXT:
        return RenderedPreview(text=non_utf8_summary(path, info.st_size), kind=kind)

    text = render_text_kind(
        kind,
        decode_sample(sample),
        path,
        width,
        normalize_style(style),
        color,
        true_color,
    )
    return RenderedPreview.from_text(text, kind, sample.truncated)

