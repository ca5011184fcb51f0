"""Command-line front door for seer.

Parses CLI options, resolves the target path and settings, then either
renders one preview to stdout or starts the interactive browser.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import config
from .browser.app import Browser, run_browser
from .browser.terminal import terminal_size
from .preview.pipeline import PreviewPipeline, SelectedEntry

LOG_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def configure_logging(log_file: str | None) -> None:
    """Send debug logs to ``log_file``; without one, logging stays unconfigured."""
    if not log_file:
        return
    logging.basicConfig(filename=log_file, level=logging.DEBUG, format=LOG_FORMAT)


def render_once(path: Path, width: int, height: int, style: str, color: bool) -> str:
    """Render ``path`` through the preview pipeline and block for the result."""
    pipeline = PreviewPipeline(style=style, color=color)
    try:
        future = pipeline.request_preview(SelectedEntry.from_path(path), width, height)
        if future is not None:
            pipeline.wait_for_result()
        return pipeline.state.content
    finally:
        pipeline.shutdown()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seer",
        description="Browse a directory with rendered previews of the selected file.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory or file to open. Defaults to current directory.")
    parser.add_argument("--style", default=None, help="Pygments style name (default: SEER_STYLE, config, then nord).")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--render", metavar="PATH", help="Print the preview of PATH and exit.")
    parser.add_argument("--width", type=_positive_int, default=None, help="Preview width for --render (default: terminal width).")
    parser.add_argument("--height", type=_positive_int, default=None, help="Preview height for --render (default: terminal height).")
    parser.add_argument("--show-hidden", action="store_true", help="List dotfiles on startup.")
    parser.add_argument("--log-file", metavar="FILE", default=None, help="Write debug logs to FILE.")
    return parser


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and launch seer on a file or directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used. A file argument opens its directory with the file
    selected.
    """
    args = build_parser().parse_args()
    configure_logging(args.log_file)

    style = args.style or config.load_style()
    color = not args.no_color and config.color_enabled()

    if args.render is not None:
        if args.path is not None:
            raise SystemExit("Cannot combine positional path with --render.")
        render_path = Path(args.render)
        if not render_path.exists():
            raise SystemExit(f"Path not found: {render_path}")
        columns, rows = terminal_size()
        width = args.width if args.width is not None else columns
        height = args.height if args.height is not None else rows
        content = render_once(render_path, width, height, style, color)
        sys.stdout.write(content)
        if not content.endswith("\n"):
            sys.stdout.write("\n")
        return

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path or default_path).resolve()
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")

    directory, select = (path, None) if path.is_dir() else (path.parent, path)
    browser = Browser(
        directory,
        PreviewPipeline(style=style, color=color),
        show_hidden=args.show_hidden or config.load_show_hidden(),
        left_pane_percent=config.load_left_pane_percent(),
        color=color,
        select=select,
    )
    run_browser(browser)


if __name__ == "__main__":
    main()
