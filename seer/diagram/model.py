"""Value types produced by the diagram parser and consumed by the layouts.

Everything here is created fresh per render call and discarded afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MermaidNode:
    """One flowchart node reference: normalized id plus display label."""

    id: str
    label: str


@dataclass(frozen=True)
class MermaidEdge:
    """Directed edge between two node references with optional inline label."""

    source: MermaidNode
    target: MermaidNode
    label: str = ""


@dataclass
class MermaidGraph:
    """Parsed flow graph.

    ``nodes`` is only used for lookup; ``node_order`` is the authoritative
    first-seen ordering used by every layout step.
    """

    chart_type: str = "diagram"
    node_order: list[str] = field(default_factory=list)
    nodes: dict[str, str] = field(default_factory=dict)
    edges: list[MermaidEdge] = field(default_factory=list)

    def register(self, node: MermaidNode) -> None:
        """Add ``node`` once; a repeated id keeps its first label."""
        if not node.id or node.id in self.nodes:
            return
        self.nodes[node.id] = node.label
        self.node_order.append(node.id)

    def label_of(self, node_id: str) -> str:
        return self.nodes.get(node_id) or node_id


@dataclass(frozen=True)
class SequenceMessage:
    source: str
    target: str
    label: str = ""
    dashed: bool = False

    @property
    def is_self(self) -> bool:
        return self.source == self.target


@dataclass
class SequenceDiagram:
    """Participants in first-seen order plus messages in source order."""

    participants: list[str] = field(default_factory=list)
    messages: list[SequenceMessage] = field(default_factory=list)

    def add_participant(self, name: str) -> None:
        if name and name not in self.participants:
            self.participants.append(name)
