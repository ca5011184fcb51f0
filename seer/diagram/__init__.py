"""Mermaid-subset diagrams rendered as terminal text.

``render_diagram`` is used for whole ``.mmd`` files; ``render_embedded_diagram``
produces a Markdown fragment for diagram fences inside Markdown documents.
"""

from __future__ import annotations

from .flowchart import compute_ranks, layout_flowchart
from .model import MermaidEdge, MermaidGraph, MermaidNode, SequenceDiagram, SequenceMessage
from .parser import SEQUENCE_CHART_TYPE, chart_type, parse_flowchart, parse_sequence
from .sequence import layout_sequence

EMBEDDED_DIAGRAM_WIDTH = 80
NO_CONTENT_NOTE = "(no diagram content parsed)"
EMBEDDED_NO_CONTENT_NOTE = "_Mermaid block: no diagram content parsed._"


def diagram_art(source: str, max_width: int = 0) -> str | None:
    """Lay out ``source`` or return ``None`` when nothing drawable was parsed."""
    if chart_type(source) == SEQUENCE_CHART_TYPE:
        diagram = parse_sequence(source)
        if not diagram.messages:
            return None
        return layout_sequence(diagram, max_width)

    graph = parse_flowchart(source)
    if not graph.node_order:
        return None
    return layout_flowchart(graph, max_width)


def render_diagram(source: str) -> str:
    art = diagram_art(source)
    if art is None:
        return f"{NO_CONTENT_NOTE}\n\n{source}"
    return art


def render_embedded_diagram(source: str, width: int = EMBEDDED_DIAGRAM_WIDTH) -> str:
    art = diagram_art(source, max_width=max(1, width))
    if art is None:
        return EMBEDDED_NO_CONTENT_NOTE
    return f"```text\n{art}\n```\n"


__all__ = [
    "EMBEDDED_DIAGRAM_WIDTH",
    "MermaidEdge",
    "MermaidGraph",
    "MermaidNode",
    "SequenceDiagram",
    "SequenceMessage",
    "chart_type",
    "compute_ranks",
    "diagram_art",
    "layout_flowchart",
    "layout_sequence",
    "parse_flowchart",
    "parse_sequence",
    "render_diagram",
    "render_embedded_diagram",
]
