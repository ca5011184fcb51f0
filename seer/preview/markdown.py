"""Markdown previews rendered to ANSI text with rich.

Diagram fences are swapped for pre-rendered text art before the document is
handed to the Markdown formatter, so the formatter only ever sees plain
fenced code blocks.
"""

from __future__ import annotations

import io
import logging

from rich.console import Console
from rich.markdown import Markdown

from ..diagram import EMBEDDED_DIAGRAM_WIDTH, render_embedded_diagram

logger = logging.getLogger(__name__)

FENCE = "```"
DIAGRAM_FENCE_LANGUAGE = "mermaid"
MIN_WRAP_WIDTH = 24


def replace_diagram_fences(markdown: str, diagram_width: int = EMBEDDED_DIAGRAM_WIDTH) -> str:
    """Replace each ```` ```mermaid ```` block with its rendered text art.

    An unterminated diagram fence is emitted back unchanged.
    """
    transformed: list[str] = []
    block: list[str] | None = None
    for line in markdown.split("\n"):
        stripped = line.strip()
        if block is None:
            if stripped.startswith(FENCE):
                language = stripped[len(FENCE) :].strip()
                if language.lower() == DIAGRAM_FENCE_LANGUAGE:
                    block = []
                    continue
            transformed.append(line)
            continue

        if stripped.startswith(FENCE):
            content = "\n".join(block).strip()
            if content:
                transformed.extend(["", render_embedded_diagram(content, diagram_width), ""])
            block = None
            continue
        block.append(line)

    if block is not None:
        transformed.append(f"{FENCE}{DIAGRAM_FENCE_LANGUAGE}")
        transformed.append("\n".join(block).rstrip("\n"))
    return "\n".join(transformed)


def render_markdown(markdown: str, width: int, code_theme: str, color: bool) -> str:
    """Render Markdown to a string using a detached rich console."""
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=max(MIN_WRAP_WIDTH, width - 2),
        force_terminal=color,
        color_system="truecolor" if color else None,
        emoji=True,
        highlight=False,
        soft_wrap=False,
    )
    console.print(Markdown(markdown, code_theme=code_theme))
    return buffer.getvalue()


def render_markdown_preview(
    markdown: str,
    width: int,
    code_theme: str = "nord",
    color: bool = True,
) -> str:
    prepared = replace_diagram_fences(markdown)
    try:
        return render_markdown(prepared, width, code_theme, color).rstrip("\n")
    except Exception:
        logger.warning("markdown rendering failed; showing source", exc_info=True)
        return prepared
