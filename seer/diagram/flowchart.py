"""Layered box layout for flow graphs.

Nodes are ranked by longest path from a source node, grouped into one row
of boxes per rank and centred. Only edges that connect adjacent ranks are
drawn; longer, reverse and self edges are left out of the picture.
"""

from __future__ import annotations

from collections import deque

from .grid import Grid
from .model import MermaidGraph

BOX_HEIGHT = 3
CONNECTOR_ROWS = 2
LEVEL_STEP = BOX_HEIGHT + CONNECTOR_ROWS
BOX_LABEL_MARGIN = 4
HORIZONTAL_GAP = 3
ARROW_DOWN = "▼"
EMPTY_DIAGRAM_TEXT = "(empty diagram)"


def compute_ranks(graph: MermaidGraph) -> dict[str, int]:
    """Return longest-path rank per node via Kahn-style relaxation.

    Self edges are ignored. Nodes caught in a cycle never reach zero pending
    in-degree and keep whatever rank was relaxed into them so far.
    """
    successors: dict[str, list[str]] = {node_id: [] for node_id in graph.node_order}
    pending: dict[str, int] = {node_id: 0 for node_id in graph.node_order}
    for edge in graph.edges:
        source, target = edge.source.id, edge.target.id
        if source == target:
            continue
        successors[source].append(target)
        pending[target] += 1

    rank = {node_id: 0 for node_id in graph.node_order}
    queue = deque(node_id for node_id in graph.node_order if pending[node_id] == 0)
    while queue:
        current = queue.popleft()
        for nxt in successors[current]:
            rank[nxt] = max(rank[nxt], rank[current] + 1)
            pending[nxt] -= 1
            if pending[nxt] == 0:
                queue.append(nxt)
    return rank


def group_levels(graph: MermaidGraph, rank: dict[str, int]) -> list[list[str]]:
    max_rank = max(rank.values(), default=0)
    levels: list[list[str]] = [[] for _ in range(max_rank + 1)]
    for node_id in graph.node_order:
        levels[rank[node_id]].append(node_id)
    return levels


def _draw_box(grid: Grid, x: int, y: int, width: int, label: str) -> None:
    inner = "─" * (width - 2)
    grid.write(x, y, f"┌{inner}┐")
    grid.put(x, y + 1, "│")
    grid.write(x + 2, y + 1, label)
    grid.put(x + width - 1, y + 1, "│")
    grid.write(x, y + 2, f"└{inner}┘")


def layout_flowchart(graph: MermaidGraph, max_width: int = 0) -> str:
    """Render ``graph`` as box-drawing text, clamped to ``max_width`` when positive."""
    if not graph.node_order:
        return EMPTY_DIAGRAM_TEXT

    def box_width(node_id: str) -> int:
        return len(graph.label_of(node_id)) + BOX_LABEL_MARGIN

    rank = compute_ranks(graph)
    levels = group_levels(graph, rank)

    node_x: dict[str, int] = {}
    level_widths: list[int] = []
    for level in levels:
        x = 0
        for idx, node_id in enumerate(level):
            node_x[node_id] = x
            x += box_width(node_id)
            if idx < len(level) - 1:
                x += HORIZONTAL_GAP
        level_widths.append(x)

    total_width = max([1, *level_widths])
    if max_width > 0:
        total_width = min(total_width, max_width)

    for level, level_width in zip(levels, level_widths):
        offset = max(0, (total_width - level_width) // 2)
        for node_id in level:
            node_x[node_id] += offset

    node_y = {node_id: rank[node_id] * LEVEL_STEP for node_id in graph.node_order}
    total_height = len(levels) * LEVEL_STEP - CONNECTOR_ROWS
    grid = Grid(total_width, total_height)

    for node_id in graph.node_order:
        _draw_box(grid, node_x[node_id], node_y[node_id], box_width(node_id), graph.label_of(node_id))

    for edge in graph.edges:
        source, target = edge.source.id, edge.target.id
        if source == target or rank[source] + 1 != rank[target]:
            continue
        source_center = node_x[source] + box_width(source) // 2
        target_center = node_x[target] + box_width(target) // 2
        row = node_y[source] + BOX_HEIGHT

        if source_center == target_center:
            grid.put_box(source_center, row, "│")
        elif source_center < target_center:
            grid.put_box(source_center, row, "└")
            for x in range(source_center + 1, target_center):
                grid.put_box(x, row, "─")
            grid.put_box(target_center, row, "┐")
        else:
            grid.put_box(target_center, row, "┌")
            for x in range(target_center + 1, source_center):
                grid.put_box(x, row, "─")
            grid.put_box(source_center, row, "┘")
        grid.put(target_center, row + 1, ARROW_DOWN)

    return grid.render()
