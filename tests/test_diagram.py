"""Mermaid-subset parsing and text layout tests.

Covers chart-type detection, node/edge parsing, rank assignment, the
adjacent-rank edge rule, sequence columns, and box-drawing joint merges.
"""

from __future__ import annotations

import unittest

from seer.diagram import (
    render_diagram,
    render_embedded_diagram,
)
from seer.diagram.flowchart import compute_ranks, layout_flowchart
from seer.diagram.grid import Grid, merge_box_chars
from seer.diagram.parser import chart_type, clean_label, parse_edge, parse_flowchart, parse_sequence
from seer.diagram.sequence import column_width, layout_sequence


class DiagramParserTests(unittest.TestCase):
    def test_chart_type_skips_comments_and_blank_lines(self) -> None:
        source = "%% generated\n\n   graph TD\nA-->B\n"
        self.assertEqual(chart_type(source), "graph")
        self.assertEqual(chart_type("%% only a comment\n\n"), "diagram")

    def test_parse_edge_reads_bracket_labels_and_pipe_label(self) -> None:
        edge = parse_edge('A[Start "here"] -->|yes| B(Done);')

        self.assertIsNotNone(edge)
        self.assertEqual(edge.source.id, "A")
        self.assertEqual(edge.source.label, "Start here")
        self.assertEqual(edge.target.id, "B")
        self.assertEqual(edge.target.label, "Done")
        self.assertEqual(edge.label, "yes")

    def test_parse_edge_uses_leftmost_operator_and_strips_class_tags(self) -> None:
        edge = parse_edge("db:::store ==> api")

        self.assertEqual((edge.source.id, edge.target.id), ("db", "api"))
        self.assertIsNone(parse_edge("graph TD"))
        self.assertIsNone(parse_edge("--> B"))

    def test_first_label_wins_for_repeated_node(self) -> None:
        graph = parse_flowchart("graph TD\nA[First]-->B\nA[Second]-->C\n")

        self.assertEqual(graph.chart_type, "graph")
        self.assertEqual(graph.node_order, ["A", "B", "C"])
        self.assertEqual(graph.label_of("A"), "First")
        self.assertEqual(len(graph.edges), 2)

    def test_clean_label_collapses_whitespace_and_pipes(self) -> None:
        self.assertEqual(clean_label("  `a |  b`  "), "a b")

    def test_sequence_parse_scenario(self) -> None:
        diagram = parse_sequence("sequenceDiagram\nAlice->>Bob: Hello\nBob-->>Alice: Hi\n")

        self.assertEqual(diagram.participants, ["Alice", "Bob"])
        self.assertEqual(len(diagram.messages), 2)
        first, second = diagram.messages
        self.assertEqual((first.source, first.target, first.label), ("Alice", "Bob", "Hello"))
        self.assertFalse(first.dashed)
        self.assertEqual((second.source, second.target, second.label), ("Bob", "Alice", "Hi"))
        self.assertTrue(second.dashed)

    def test_every_arrow_form_sets_endpoints_and_line_style(self) -> None:
        cases = [
            ("A->>B: msg", False),
            ("A-->>B: msg", True),
            ("A->B: msg", False),
            ("A-->B: msg", True),
            ("A-xB: msg", False),
            ("A--xB: msg", True),
            ("A-)B: msg", False),
            ("A--)B: msg", True),
        ]
        for line, dashed in cases:
            with self.subTest(line=line):
                diagram = parse_sequence(f"sequenceDiagram\n{line}\n")

                self.assertEqual(len(diagram.messages), 1)
                message = diagram.messages[0]
                self.assertEqual((message.source, message.target, message.label), ("A", "B", "msg"))
                self.assertEqual(message.dashed, dashed)

    def test_participant_alias_resolves_in_messages(self) -> None:
        diagram = parse_sequence("sequenceDiagram\nparticipant A as Alice\nactor B\nA->>B: hi\n")

        self.assertEqual(diagram.participants, ["Alice", "B"])
        self.assertEqual(diagram.messages[0].source, "Alice")


class FlowchartLayoutTests(unittest.TestCase):
    def test_ranks_follow_longest_path(self) -> None:
        graph = parse_flowchart("graph TD\nA-->B\nB-->C\nA-->C\n")

        self.assertEqual(compute_ranks(graph), {"A": 0, "B": 1, "C": 2})

    def test_edge_spanning_two_ranks_is_not_drawn(self) -> None:
        with_skip = layout_flowchart(parse_flowchart("graph TD\nA-->B\nB-->C\nA-->C\n"))
        without_skip = layout_flowchart(parse_flowchart("graph TD\nA-->B\nB-->C\n"))

        self.assertEqual(with_skip, without_skip)
        self.assertEqual(
            with_skip.split("\n"),
            [
                "┌───┐",
                "│ A │",
                "└───┘",
                "  │",
                "  ▼",
                "┌───┐",
                "│ B │",
                "└───┘",
                "  │",
                "  ▼",
                "┌───┐",
                "│ C │",
                "└───┘",
            ],
        )

    def test_branching_edges_share_a_merged_joint(self) -> None:
        lines = layout_flowchart(parse_flowchart("graph TD\nA-->B\nA-->C\n")).split("\n")

        self.assertEqual(lines[0], "    ┌───┐")
        self.assertEqual(lines[3], "  ┌───┴───┐")
        self.assertEqual(lines[4], "  ▼       ▼")

    def test_cycle_does_not_raise(self) -> None:
        graph = parse_flowchart("graph TD\nA-->B\nB-->A\nA-->A\n")

        self.assertEqual(compute_ranks(graph), {"A": 0, "B": 0})
        rendered = layout_flowchart(graph)
        self.assertIn("│ A │", rendered)
        self.assertNotIn("▼", rendered)

    def test_max_width_clamps_grid(self) -> None:
        rendered = layout_flowchart(parse_flowchart("graph LR\nalpha-->beta\nalpha-->gamma\n"), max_width=10)

        self.assertTrue(all(len(line) <= 10 for line in rendered.split("\n")))


class SequenceLayoutTests(unittest.TestCase):
    def test_column_width_is_even_and_at_least_fourteen(self) -> None:
        self.assertEqual(column_width(["A"]), 14)
        self.assertEqual(column_width(["Participant_X"]), 18)
        self.assertEqual(column_width(["Participant_XY"]), 18)

    def test_two_messages_render_distinct_connector_rows(self) -> None:
        diagram = parse_sequence("sequenceDiagram\nAlice->>Bob: Hello\nBob-->>Alice: Hi\n")
        lines = layout_sequence(diagram).split("\n")

        self.assertLess(lines[0].index("Alice"), lines[0].index("Bob"))
        self.assertEqual(lines[1], "       │             │")
        forward, backward = lines[2], lines[4]
        self.assertNotEqual(forward, backward)
        self.assertIn("Hello", forward)
        self.assertIn("─", forward)
        self.assertEqual(forward.rstrip()[-1], "►")
        self.assertIn("Hi", backward)
        self.assertIn("╌", backward)
        self.assertEqual(backward.index("◄"), 7)

    def test_self_message_is_annotated_beside_lifeline(self) -> None:
        rendered = layout_sequence(parse_sequence("sequenceDiagram\nA->>A: think\n"))

        self.assertIn("│↩ think", rendered)

    def test_empty_diagram_reports_no_participants(self) -> None:
        self.assertEqual(layout_sequence(parse_sequence("sequenceDiagram\n")), "(no participants)")


class DiagramEntryPointTests(unittest.TestCase):
    def test_render_diagram_explains_unparsed_source(self) -> None:
        source = "graph TD\nthis is not an edge\n"

        self.assertEqual(render_diagram(source), f"(no diagram content parsed)\n\n{source}")

    def test_embedded_diagram_is_wrapped_in_text_fence(self) -> None:
        rendered = render_embedded_diagram("sequenceDiagram\nA->>B: x\n")

        self.assertTrue(rendered.startswith("```text\n"))
        self.assertTrue(rendered.endswith("\n```\n"))
        self.assertIn("►", rendered)

    def test_embedded_diagram_without_content_is_a_note(self) -> None:
        self.assertEqual(render_embedded_diagram("graph TD\n"), "_Mermaid block: no diagram content parsed._")


class GridTests(unittest.TestCase):
    def test_merge_box_chars_combines_masks(self) -> None:
        self.assertEqual(merge_box_chars("│", "─"), "┼")
        self.assertEqual(merge_box_chars("┘", "└"), "┴")
        self.assertEqual(merge_box_chars("│", "x"), "x")

    def test_put_box_merges_and_render_trims(self) -> None:
        grid = Grid(4, 3)
        grid.put_box(1, 0, "─")
        grid.put_box(1, 0, "│")
        grid.put(9, 9, "x")

        self.assertEqual(grid.get(1, 0), "┼")
        self.assertEqual(grid.render(), " ┼")


if __name__ == "__main__":
    unittest.main()
