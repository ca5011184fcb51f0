"""CLI argument and default-path behavior tests.

Verifies how ``seer.cli.main`` renders one-shot previews and chooses the
directory and selection for the interactive browser.
"""

from __future__ import annotations

import io
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from seer import cli


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.addCleanup(self._tmp.cleanup)
        patcher = mock.patch("seer.config.CONFIG_PATH", self.root / "config" / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)


class CliRenderTests(CliTestCase):
    def test_render_prints_preview_and_exits(self) -> None:
        target = self.root / "data.json"
        target.write_text('{"b": [1, 2], "a": null}', encoding="utf-8")
        argv = ["seer", "--render", str(target), "--no-color", "--width", "50", "--height", "10"]

        with mock.patch.object(sys, "argv", argv), mock.patch("sys.stdout", new_callable=io.StringIO) as stdout:
            cli.main()

        self.assertEqual(stdout.getvalue(), '{\n  "a": null,\n  "b": [\n    1,\n    2\n  ]\n}\n')

    def test_render_missing_path_exits(self) -> None:
        with mock.patch.object(sys, "argv", ["seer", "--render", str(self.root / "absent")]):
            with self.assertRaises(SystemExit) as raised:
                cli.main()

        self.assertIn("Path not found", str(raised.exception))

    def test_render_cannot_combine_with_positional_path(self) -> None:
        target = self.root / "a.txt"
        target.write_text("a", encoding="utf-8")

        with mock.patch.object(sys, "argv", ["seer", str(self.root), "--render", str(target)]):
            with self.assertRaises(SystemExit):
                cli.main()

    def test_log_file_configures_logging(self) -> None:
        target = self.root / "a.txt"
        target.write_text("a", encoding="utf-8")
        log_file = str(self.root / "seer.log")
        argv = ["seer", "--render", str(target), "--no-color", "--log-file", log_file]

        with mock.patch.object(sys, "argv", argv), mock.patch("sys.stdout", new_callable=io.StringIO), mock.patch(
            "seer.cli.logging.basicConfig"
        ) as basic_config:
            cli.main()

        basic_config.assert_called_once()
        self.assertEqual(basic_config.call_args.kwargs["filename"], log_file)


class CliBrowserTests(CliTestCase):
    def test_main_defaults_to_current_working_directory(self) -> None:
        previous_cwd = Path.cwd()
        try:
            os.chdir(self.root)
            with mock.patch.object(sys, "argv", ["seer"]), mock.patch("seer.cli.PreviewPipeline"), mock.patch(
                "seer.cli.Browser"
            ) as browser_cls, mock.patch("seer.cli.run_browser") as run_browser:
                cli.main()
        finally:
            os.chdir(previous_cwd)

        run_browser.assert_called_once_with(browser_cls.return_value)
        directory = browser_cls.call_args.args[0]
        self.assertEqual(directory, self.root)
        self.assertIsNone(browser_cls.call_args.kwargs["select"])

    def test_file_argument_opens_parent_with_file_selected(self) -> None:
        target = self.root / "notes.md"
        target.write_text("# hi\n", encoding="utf-8")

        with mock.patch.object(sys, "argv", ["seer", str(target), "--no-color", "--style", "monokai"]), mock.patch(
            "seer.cli.PreviewPipeline"
        ) as pipeline_cls, mock.patch("seer.cli.Browser") as browser_cls, mock.patch("seer.cli.run_browser"):
            cli.main()

        pipeline_cls.assert_called_once_with(style="monokai", color=False)
        self.assertEqual(browser_cls.call_args.args[0], self.root)
        self.assertEqual(browser_cls.call_args.kwargs["select"], target)
        self.assertFalse(browser_cls.call_args.kwargs["color"])

    def test_missing_path_exits(self) -> None:
        with mock.patch.object(sys, "argv", ["seer", str(self.root / "nope")]):
            with self.assertRaises(SystemExit):
                cli.main()


if __name__ == "__main__":
    unittest.main()
