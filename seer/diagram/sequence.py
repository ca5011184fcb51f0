"""Column layout for sequence diagrams.

Every participant owns an equal-width column with a lifeline at its centre.
Each message becomes one arrow row followed by a plain lifeline row.
"""

from __future__ import annotations

from .model import SequenceDiagram, SequenceMessage

MIN_COLUMN_WIDTH = 14
COLUMN_NAME_MARGIN = 4
LIFELINE = "│"
SOLID_RUN = "─"
DASHED_RUN = "╌"
ARROW_RIGHT = "►"
ARROW_LEFT = "◄"
SELF_MESSAGE_GLYPH = "↩"
NO_PARTICIPANTS_TEXT = "(no participants)"


def column_width(participants: list[str]) -> int:
    width = max([MIN_COLUMN_WIDTH, *(len(name) + COLUMN_NAME_MARGIN for name in participants)])
    if width % 2:
        width += 1
    return width


class _SequenceCanvas:
    def __init__(self, participant_count: int, col_width: int, total_width: int) -> None:
        self.col_width = col_width
        self.total_width = total_width
        self.centers = [idx * col_width + col_width // 2 for idx in range(participant_count)]

    def lifeline_row(self) -> list[str]:
        row = [" "] * self.total_width
        for center in self.centers:
            if center < self.total_width:
                row[center] = LIFELINE
        return row

    def put(self, row: list[str], x: int, ch: str) -> None:
        if 0 <= x < self.total_width:
            row[x] = ch

    def message_row(self, message: SequenceMessage, source_idx: int, target_idx: int) -> list[str]:
        row = self.lifeline_row()
        source_center = self.centers[source_idx]
        if message.is_self:
            text = SELF_MESSAGE_GLYPH + (f" {message.label}" if message.label else "")
            for offset, ch in enumerate(text):
                self.put(row, source_center + 1 + offset, ch)
            return row

        target_center = self.centers[target_idx]
        left, right = sorted((source_center, target_center))
        run = DASHED_RUN if message.dashed else SOLID_RUN
        for x in range(left + 1, right):
            self.put(row, x, run)
        if source_center < target_center:
            self.put(row, right, ARROW_RIGHT)
        else:
            self.put(row, left, ARROW_LEFT)

        if message.label:
            label = f" {message.label} "
            start = max(left + 1, left + (right - left - len(label)) // 2 + 1)
            for offset, ch in enumerate(label):
                x = start + offset
                if left < x < right:
                    self.put(row, x, ch)
        return row


def _header_row(participants: list[str], col_width: int) -> str:
    cells: list[str] = []
    for name in participants:
        name = name[: col_width - 2]
        pad = (col_width - len(name)) // 2
        cells.append(" " * pad + name + " " * (col_width - pad - len(name)))
    return "".join(cells)


def layout_sequence(diagram: SequenceDiagram, max_width: int = 0) -> str:
    """Render ``diagram`` as text, clamping the lifeline area to ``max_width`` when positive."""
    participants = diagram.participants
    if not participants:
        return NO_PARTICIPANTS_TEXT

    col_width = column_width(participants)
    total_width = len(participants) * col_width
    if max_width > 0:
        total_width = min(total_width, max_width)
    canvas = _SequenceCanvas(len(participants), col_width, total_width)
    index_of = {name: idx for idx, name in enumerate(participants)}

    lifeline = "".join(canvas.lifeline_row()).rstrip(" ")
    lines = [_header_row(participants, col_width).rstrip(" "), lifeline]
    for message in diagram.messages:
        source_idx = index_of.get(message.source)
        target_idx = index_of.get(message.target)
        if source_idx is None or target_idx is None:
            continue
        lines.append("".join(canvas.message_row(message, source_idx, target_idx)).rstrip(" "))
        lines.append(lifeline)
    return "\n".join(lines)
