"""Interactive browser: selection state plus the single control loop.

``Browser`` holds everything the loop mutates and applies key actions to it;
``run_browser`` wires it to the terminal. The preview pipeline is only ever
touched from the loop thread.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from pathlib import Path

from .. import config
from ..preview.pipeline import PreviewPipeline, SelectedEntry
from .keys import action_for_key, read_key
from .listing import index_of, list_directory
from .screen import (
    ScreenContext,
    body_rows,
    clamp_offset,
    compose_frame,
    left_width_for_percent,
    list_start_for_selection,
    preview_dimensions,
    preview_lines,
)
from .terminal import TerminalController, terminal_size

logger = logging.getLogger(__name__)

INPUT_POLL_MS = 50


class Browser:
    """Directory/selection/scroll state for one browsing session."""

    def __init__(
        self,
        directory: Path,
        pipeline: PreviewPipeline,
        *,
        show_hidden: bool = False,
        left_pane_percent: float = config.DEFAULT_LEFT_PANE_PERCENT,
        color: bool = True,
        select: Path | None = None,
        get_size: Callable[[], tuple[int, int]] = terminal_size,
        persist_show_hidden: Callable[[bool], None] = config.save_show_hidden,
    ) -> None:
        self.pipeline = pipeline
        self.show_hidden = show_hidden
        self.left_pane_percent = left_pane_percent
        self.color = color
        self._get_size = get_size
        self._persist_show_hidden = persist_show_hidden
        self.width, self.height = get_size()
        self.directory = directory
        self.entries: list[SelectedEntry] = []
        self.selected = 0
        self.list_start = 0
        self.preview_start = 0
        self._requested: tuple[SelectedEntry | None, int, int] | None = None
        self.load_directory(directory, select=select)

    @property
    def left_width(self) -> int:
        return left_width_for_percent(self.width, self.left_pane_percent)

    @property
    def current_entry(self) -> SelectedEntry | None:
        if not self.entries:
            return None
        return self.entries[self.selected]

    def load_directory(self, directory: Path, select: Path | None = None) -> None:
        """Switch to ``directory``; an unreadable directory leaves the view unchanged."""
        try:
            entries = list_directory(directory, self.show_hidden)
        except OSError as exc:
            logger.warning("cannot list %s: %s", directory, exc)
            return
        self.directory = directory
        self.entries = entries
        self.selected = index_of(entries, select)
        self.list_start = 0
        self._keep_selection_visible()
        self.preview_start = 0
        self.request_preview()

    def request_preview(self, force: bool = False) -> None:
        """Ask the pipeline for the current selection when it or the pane size changed.

        A failed preview is requested again even when nothing changed.
        """
        width, height = preview_dimensions(self.width, self.height, self.left_width)
        key = (self.current_entry, width, height)
        if key == self._requested and not force and self.pipeline.state.error is None:
            return
        self._requested = key
        self.pipeline.request_preview(self.current_entry, width, height)

    def _keep_selection_visible(self) -> None:
        self.list_start = list_start_for_selection(self.selected, self.list_start, body_rows(self.height))

    def move_selection(self, index: int) -> None:
        if not self.entries:
            return
        index = max(0, min(index, len(self.entries) - 1))
        if index == self.selected:
            return
        self.selected = index
        self._keep_selection_visible()
        self.preview_start = 0
        self.request_preview()

    def scroll_preview(self, delta: int) -> None:
        total = len(preview_lines(self.pipeline.state))
        self.preview_start = clamp_offset(self.preview_start + delta, total, body_rows(self.height))

    def resize(self) -> bool:
        """Re-read the terminal size; return whether it changed."""
        size = self._get_size()
        if size == (self.width, self.height):
            return False
        self.width, self.height = size
        self._keep_selection_visible()
        self.request_preview()
        return True

    def handle_action(self, action: str) -> bool:
        """Apply one browser action; return ``False`` when the session should end."""
        page = max(1, body_rows(self.height) - 1)
        if action == "quit":
            return False
        if action == "down":
            self.move_selection(self.selected + 1)
        elif action == "up":
            self.move_selection(self.selected - 1)
        elif action == "top":
            self.move_selection(0)
        elif action == "bottom":
            self.move_selection(len(self.entries) - 1)
        elif action == "enter":
            entry = self.current_entry
            if entry is not None and entry.is_directory:
                self.load_directory(entry.path)
            else:
                self.request_preview()
        elif action == "parent":
            parent = self.directory.parent
            if parent != self.directory:
                self.load_directory(parent, select=self.directory)
        elif action == "scroll_down":
            self.scroll_preview(page)
        elif action == "scroll_up":
            self.scroll_preview(-page)
        elif action == "toggle_hidden":
            self.show_hidden = not self.show_hidden
            self._persist_show_hidden(self.show_hidden)
            current = self.current_entry
            self.load_directory(self.directory, select=current.path if current else None)
        return True

    def screen_context(self) -> ScreenContext:
        return ScreenContext(
            directory=self.directory,
            entries=self.entries,
            selected=self.selected,
            list_start=self.list_start,
            preview=self.pipeline.state,
            preview_start=self.preview_start,
            width=self.width,
            height=self.height,
            left_width=self.left_width,
            show_hidden=self.show_hidden,
            color=self.color,
        )


def run_browser(browser: Browser, stdin_fd: int | None = None, stdout_fd: int | None = None) -> None:
    """Run the control loop until the user quits."""
    if stdin_fd is None:
        stdin_fd = sys.stdin.fileno()
    if stdout_fd is None:
        stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    try:
        with terminal.raw_mode():
            dirty = True
            while True:
                if browser.resize():
                    dirty = True
                if browser.pipeline.drain_results():
                    browser.scroll_preview(0)
                    dirty = True
                if dirty:
                    terminal.write_frame(compose_frame(browser.screen_context()))
                    dirty = False

                key = read_key(stdin_fd, timeout_ms=INPUT_POLL_MS)
                if not key:
                    continue
                action = action_for_key(key)
                if action is None:
                    continue
                if not browser.handle_action(action):
                    break
                dirty = True
    finally:
        browser.pipeline.shutdown()
