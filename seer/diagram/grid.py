"""Fixed-size character grid used by the diagram layouts.

Box-drawing characters written through :meth:`Grid.put_box` are merged with
what is already in the cell by OR-ing 4-bit connectivity masks, so crossing
or branching connectors render as proper joints instead of overwriting.
"""

from __future__ import annotations

NORTH = 8
EAST = 4
SOUTH = 2
WEST = 1

BOX_MASKS: dict[str, int] = {
    "│": NORTH | SOUTH,
    "─": EAST | WEST,
    "┌": EAST | SOUTH,
    "┐": WEST | SOUTH,
    "└": NORTH | EAST,
    "┘": NORTH | WEST,
    "├": NORTH | EAST | SOUTH,
    "┤": NORTH | WEST | SOUTH,
    "┬": EAST | WEST | SOUTH,
    "┴": NORTH | EAST | WEST,
    "┼": NORTH | EAST | SOUTH | WEST,
}

MASK_BOXES: dict[int, str] = {mask: ch for ch, mask in BOX_MASKS.items()}
MASK_BOXES.update({EAST: "╶", WEST: "╴", NORTH: "╵", SOUTH: "╷"})


def merge_box_chars(existing: str, incoming: str) -> str:
    """Return the joint glyph for two overlapping box characters.

    Non-box characters are not merged: ``incoming`` wins.
    """
    existing_mask = BOX_MASKS.get(existing)
    incoming_mask = BOX_MASKS.get(incoming)
    if existing_mask is None or incoming_mask is None:
        return incoming
    return MASK_BOXES.get(existing_mask | incoming_mask, incoming)


class Grid:
    """Rectangular buffer of single-cell characters; out-of-range writes are ignored."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._rows = [[" "] * self.width for _ in range(self.height)]

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> str:
        if not self._inside(x, y):
            return " "
        return self._rows[y][x]

    def put(self, x: int, y: int, ch: str) -> None:
        if self._inside(x, y):
            self._rows[y][x] = ch

    def put_box(self, x: int, y: int, ch: str) -> None:
        if not self._inside(x, y):
            return
        existing = self._rows[y][x]
        if existing == " ":
            self._rows[y][x] = ch
            return
        self._rows[y][x] = merge_box_chars(existing, ch)

    def write(self, x: int, y: int, text: str) -> None:
        for offset, ch in enumerate(text):
            self.put(x + offset, y, ch)

    def render(self) -> str:
        """Emit rows with trailing blanks trimmed and trailing blank rows dropped."""
        lines = ["".join(row).rstrip(" ") for row in self._rows]
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines)
