"""ANSI-aware width and clipping helpers."""

from __future__ import annotations

import unittest

from seer.ansi import clip_ansi_line, display_width, pad_ansi_line, strip_ansi


class AnsiHelperTests(unittest.TestCase):
    def test_clip_preserves_escape_sequences(self) -> None:
        self.assertEqual(clip_ansi_line("\x1b[31mhello\x1b[0m", 3), "\x1b[31mhel")
        self.assertEqual(clip_ansi_line("ab\x1b[0m", 2), "ab\x1b[0m")
        self.assertEqual(clip_ansi_line("anything", 0), "")

    def test_wide_characters_are_not_split(self) -> None:
        self.assertEqual(clip_ansi_line("日本語", 3), "日")
        self.assertEqual(display_width("日本"), 4)

    def test_tabs_expand_to_next_stop(self) -> None:
        self.assertEqual(display_width("\tx"), 9)
        self.assertEqual(clip_ansi_line("a\tb", 4), "a")
        self.assertEqual(clip_ansi_line("a\tb", 10), "a" + " " * 7 + "b")

    def test_pad_reaches_exact_width_and_resets_style(self) -> None:
        padded = pad_ansi_line("\x1b[32mok\x1b[0m", 5)

        self.assertEqual(strip_ansi(padded), "ok   ")
        self.assertIn("\x1b[0m   ", padded)
        self.assertEqual(pad_ansi_line("toolong", 4), "tool")


if __name__ == "__main__":
    unittest.main()
