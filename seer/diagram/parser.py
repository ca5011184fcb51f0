"""Parse the supported Mermaid subset into graph or message-sequence models.

Only a pragmatic subset is understood: flowchart edges written with
``-->``, ``==>`` or ``-.->`` and sequence-diagram participants/messages.
Anything else is skipped silently; parsing never raises.
"""

from __future__ import annotations

from collections.abc import Iterator

from .model import MermaidEdge, MermaidGraph, MermaidNode, SequenceDiagram, SequenceMessage

COMMENT_PREFIX = "%%"
DEFAULT_CHART_TYPE = "diagram"
SEQUENCE_CHART_TYPE = "sequenceDiagram"

FLOW_EDGE_OPERATORS = ("-->", "==>", "-.->")
NODE_LABEL_BRACKETS = (("[", "]"), ("(", ")"), ("{", "}"))
CLASS_TAG_SEPARATOR = ":::"

# Longest form of each family first so "-->>" is not read as "-->".
SEQUENCE_ARROWS: tuple[tuple[str, bool], ...] = (
    ("-->>", True),
    ("-->", True),
    ("->>", False),
    ("->", False),
    ("--x", True),
    ("-x", False),
    ("--)", True),
    ("-)", False),
)

_LABEL_TRANSLATION = str.maketrans({'"': None, "'": None, "`": None, "|": " "})


def significant_lines(source: str) -> Iterator[str]:
    """Yield stripped lines that are neither blank nor ``%%`` comments."""
    for line in source.split("\n"):
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue
        yield stripped


def chart_type(source: str) -> str:
    """Return the leading keyword of the first significant line."""
    for line in significant_lines(source):
        return line.split()[0]
    return DEFAULT_CHART_TYPE


def clean_label(text: str) -> str:
    """Strip quotes/backticks, turn pipes into spaces, collapse whitespace."""
    return " ".join(text.strip().translate(_LABEL_TRANSLATION).split())


def clean_id(text: str) -> str:
    text = text.strip()
    text = text.removeprefix("(").removeprefix("[").removeprefix("{")
    text = text.removesuffix(")").removesuffix("]").removesuffix("}").removesuffix(";")
    fields = text.split()
    if not fields:
        return ""
    return fields[0].strip().strip('"')


def parse_node(raw: str) -> MermaidNode | None:
    """Parse one edge endpoint such as ``A[Start here]`` or ``db[(Store)]:::cls``."""
    raw = raw.strip().removesuffix(";").strip()
    if not raw:
        return None
    raw = raw.split(CLASS_TAG_SEPARATOR, 1)[0]

    for opener, closer in NODE_LABEL_BRACKETS:
        open_idx = raw.find(opener)
        if open_idx <= 0:
            continue
        close_idx = raw.rfind(closer)
        if close_idx <= open_idx:
            continue
        node_id = raw[:open_idx].strip()
        label = clean_label(raw[open_idx + 1 : close_idx]) or clean_label(node_id)
        return MermaidNode(id=clean_id(node_id), label=label)

    node_id = clean_id(raw)
    if not node_id:
        return None
    return MermaidNode(id=node_id, label=clean_label(node_id))


def _find_flow_operator(line: str) -> tuple[int, str] | None:
    """Return ``(index, operator)`` of the leftmost edge operator in ``line``."""
    best: tuple[int, str] | None = None
    for operator in FLOW_EDGE_OPERATORS:
        idx = line.find(operator)
        if idx < 0:
            continue
        if best is None or idx < best[0]:
            best = (idx, operator)
    return best


def parse_edge(line: str) -> MermaidEdge | None:
    found = _find_flow_operator(line)
    if found is None:
        return None
    idx, operator = found
    left = line[:idx].strip()
    right = line[idx + len(operator) :].strip()

    edge_label = ""
    if right.startswith("|"):
        end = right.find("|", 1)
        if end >= 0:
            edge_label = right[1:end].strip()
            right = right[end + 1 :].strip()

    source = parse_node(left)
    target = parse_node(right)
    if source is None or target is None or not source.id or not target.id:
        return None
    return MermaidEdge(source=source, target=target, label=edge_label)


def parse_flowchart(source: str) -> MermaidGraph:
    """Parse every edge line of a flow graph, registering nodes in first-seen order."""
    graph = MermaidGraph()
    chart_type_seen = False
    for line in significant_lines(source):
        if not chart_type_seen:
            graph.chart_type = line.split()[0]
            chart_type_seen = True
        edge = parse_edge(line)
        if edge is None:
            continue
        graph.edges.append(edge)
        graph.register(edge.source)
        graph.register(edge.target)
    return graph


def _participant_declaration(line: str) -> tuple[str, str] | None:
    """Return ``(alias, display_name)`` for ``participant``/``actor`` lines."""
    fields = line.split()
    if len(fields) < 2 or fields[0].lower() not in {"participant", "actor"}:
        return None
    alias = fields[1]
    for idx, token in enumerate(fields):
        if token.lower() == "as" and idx + 1 < len(fields):
            return alias, " ".join(fields[idx + 1 :])
    return alias, alias


def _parse_message(line: str) -> SequenceMessage | None:
    for arrow, dashed in SEQUENCE_ARROWS:
        idx = line.find(arrow)
        if idx < 0:
            continue
        source = line[:idx].strip()
        rest = line[idx + len(arrow) :].strip()
        target, label = rest, ""
        colon = rest.find(":")
        if colon >= 0:
            target = rest[:colon].strip()
            label = rest[colon + 1 :].strip()
        if not source or not target:
            return None
        return SequenceMessage(source=source, target=target, label=label, dashed=dashed)
    return None


def parse_sequence(source: str) -> SequenceDiagram:
    """Parse participants and messages of a ``sequenceDiagram`` source."""
    diagram = SequenceDiagram()
    aliases: dict[str, str] = {}
    for line in significant_lines(source):
        declaration = _participant_declaration(line)
        if declaration is not None:
            alias, display = declaration
            aliases[alias] = display
            diagram.add_participant(display)
            continue

        message = _parse_message(line)
        if message is None:
            continue
        resolved = SequenceMessage(
            source=aliases.get(message.source, message.source),
            target=aliases.get(message.target, message.target),
            label=message.label,
            dashed=message.dashed,
        )
        diagram.add_participant(resolved.source)
        diagram.add_participant(resolved.target)
        diagram.messages.append(resolved)
    return diagram
