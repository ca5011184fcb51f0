"""JSON, Markdown and image preview strategy tests."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from PIL import Image

from seer.preview.image import output_dimensions, render_image_preview, supports_true_color
from seer.preview.jsonview import format_number, render_json_preview
from seer.preview.markdown import render_markdown_preview, replace_diagram_fences
from seer.preview.path import build_preview


class JsonPreviewTests(unittest.TestCase):
    def test_key_order_does_not_change_output(self) -> None:
        first = render_json_preview('{"b": 1, "a": [true, null, "x"]}', color=False)
        second = render_json_preview('{"a": [true, null, "x"], "b": 1}', color=False)

        self.assertEqual(first, second)
        self.assertEqual(first, '{\n  "a": [\n    true,\n    null,\n    "x"\n  ],\n  "b": 1\n}')

    def test_colored_output_is_also_deterministic(self) -> None:
        self.assertEqual(
            render_json_preview('{"y": {"q": 2, "p": 1}, "x": 0}'),
            render_json_preview('{"x": 0, "y": {"p": 1, "q": 2}}'),
        )

    def test_arrays_are_capped_at_one_hundred_items(self) -> None:
        lines = render_json_preview(str(list(range(105))), color=False).split("\n")

        self.assertIn("  99,", lines)
        self.assertNotIn("  100,", lines)
        self.assertEqual(lines[-2], "  … 5 more items")
        self.assertEqual(lines[-1], "]")

    def test_invalid_json_shows_error_then_raw_text(self) -> None:
        rendered = render_json_preview("{oops", color=False)

        self.assertTrue(rendered.startswith("  invalid JSON: "))
        self.assertTrue(rendered.endswith("\n\n{oops"))

    def test_number_formatting(self) -> None:
        self.assertEqual(format_number(1.0), "1")
        self.assertEqual(format_number(1.5), "1.5")
        self.assertEqual(format_number(-7), "-7")
        self.assertEqual(render_json_preview('"ünï"', color=False), '"ünï"')


class MarkdownPreviewTests(unittest.TestCase):
    def test_diagram_fence_is_replaced_with_text_art(self) -> None:
        prepared = replace_diagram_fences("# Title\n\n```mermaid\ngraph TD\nA-->B\n```\n\nafter")

        self.assertNotIn("```mermaid", prepared)
        self.assertIn("```text\n┌───┐", prepared)
        self.assertTrue(prepared.endswith("after"))

    def test_other_fences_are_untouched(self) -> None:
        source = "```python\nprint(1)\n```"

        self.assertEqual(replace_diagram_fences(source), source)

    def test_unterminated_diagram_fence_is_kept(self) -> None:
        prepared = replace_diagram_fences("intro\n```mermaid\ngraph TD\nA-->B")

        self.assertEqual(prepared, "intro\n```mermaid\ngraph TD\nA-->B")

    def test_empty_diagram_fence_is_dropped(self) -> None:
        self.assertEqual(replace_diagram_fences("a\n```mermaid\n\n```\nb"), "a\nb")

    def test_render_markdown_without_color(self) -> None:
        rendered = render_markdown_preview(
            "# Heading\n\nSome *prose* here.\n\n```mermaid\ngraph TD\nA-->B\n```\n",
            60,
            color=False,
        )

        self.assertIn("Heading", rendered)
        self.assertIn("prose", rendered)
        self.assertIn("▼", rendered)
        self.assertNotIn("\x1b[", rendered)
        self.assertFalse(rendered.endswith("\n"))

    def test_markdown_file_dispatch(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "README.md"
            target.write_text("# Hello\n\nworld\n", encoding="utf-8")

            preview = build_preview(target, 50, 20, color=False, env={})

        self.assertIn("Hello", preview.text)
        self.assertIn("world", preview.text)


class ImagePreviewTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.png = self.root / "red.png"
        Image.new("RGB", (6, 4), (255, 0, 0)).save(self.png)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_true_color_capability_rules(self) -> None:
        self.assertTrue(supports_true_color({"COLORTERM": "truecolor"}))
        self.assertTrue(supports_true_color({"COLORTERM": "24bit"}))
        self.assertTrue(supports_true_color({"TERM": "xterm-kitty"}))
        self.assertTrue(supports_true_color({"TERM": "wezterm"}))
        self.assertFalse(supports_true_color({"TERM": "xterm-256color"}))
        self.assertFalse(supports_true_color({"NO_COLOR": "1", "COLORTERM": "truecolor"}))

    def test_output_dimensions_have_minimums(self) -> None:
        self.assertEqual(output_dimensions(40, 20), (38, 17))
        self.assertEqual(output_dimensions(5, 5), (16, 8))

    def test_half_blocks_with_true_color(self) -> None:
        rendered = render_image_preview(self.png, 40, 20, self.png.stat().st_size, true_color=True)
        rows = rendered.split("\n")

        self.assertEqual(len(rows), 17)
        self.assertIn("\x1b[38;2;255;0;0m\x1b[48;2;255;0;0m", rows[0])
        self.assertEqual(rows[0].count("▀"), 38)
        self.assertTrue(rows[0].endswith("\x1b[0m"))

    def test_luminance_ramp_without_true_color(self) -> None:
        preview = build_preview(self.png, 40, 20, env={"TERM": "xterm-256color"})
        rows = preview.text.split("\n")

        self.assertEqual(len(rows), 17)
        self.assertEqual(set(preview.text) - {"\n"}, {":"})
        self.assertEqual(len(rows[0]), 38)

    def test_no_color_env_forces_luminance(self) -> None:
        preview = build_preview(self.png, 40, 20, env={"NO_COLOR": "1", "COLORTERM": "truecolor"})

        self.assertNotIn("\x1b[", preview.text)

    def test_undecodable_image_falls_back_to_summary(self) -> None:
        broken = self.root / "broken.png"
        broken.write_bytes(b"definitely not a png")

        preview = build_preview(broken, 40, 20, env={})

        self.assertEqual(
            preview.text,
            "image file: broken.png\nsize: 20 B\n\npreview unavailable for this format",
        )


if __name__ == "__main__":
    unittest.main()
