"""Asynchronous preview requests tied to a rapidly changing selection.

The pipeline is owned by the single control loop. Cache hits are answered
synchronously; misses are rendered on a worker thread that only receives
immutable inputs and reports back through a queue. The control loop drains
that queue and applies a result only if its request id is still the latest
one issued and no cache hit or cleared selection has replaced it since;
anything else is dropped without side effects.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from queue import Empty, Queue

from .cache import BoundedPreviewCache
from .path import build_preview
from .syntax import DEFAULT_STYLE

logger = logging.getLogger(__name__)

MIN_RENDER_WIDTH = 40
MIN_RENDER_HEIGHT = 8
PREVIEW_WORKERS = 2
PREVIEW_ERROR_PREFIX = "preview error: "

RenderFn = Callable[[Path, int, int], str]


@dataclass(frozen=True)
class SelectedEntry:
    """The browser's current selection as seen by the preview core."""

    path: Path
    is_directory: bool
    size_bytes: int
    modified_at: int

    @classmethod
    def from_path(cls, path: Path) -> SelectedEntry:
        """Build an entry from ``os.stat``; ``OSError`` propagates."""
        info = path.stat()
        return cls(
            path=path,
            is_directory=path.is_dir(),
            size_bytes=int(info.st_size),
            modified_at=int(info.st_mtime_ns),
        )


def preview_fingerprint(entry: SelectedEntry, width: int, height: int) -> str:
    """Cache key combining file identity with the render constraints."""
    return f"{entry.path}|{entry.modified_at}|{entry.size_bytes}|{width}|{height}"


@dataclass(frozen=True)
class PreviewResult:
    """Outcome of one background render, tagged with its request id."""

    request_id: int
    fingerprint: str
    content: str = ""
    error: str | None = None


@dataclass(frozen=True)
class PreviewState:
    """What the presentation layer draws verbatim."""

    content: str = ""
    loading: bool = False
    error: str | None = None


def render_preview_text(
    path: Path,
    width: int,
    height: int,
    *,
    style: str = DEFAULT_STYLE,
    color: bool = True,
) -> str:
    return build_preview(path, width, height, style=style, color=color).text


class PreviewPipeline:
    """Request-id guarded preview scheduler with a bounded result cache.

    Every method must be called from the control loop thread; only the
    render function runs elsewhere.
    """

    def __init__(
        self,
        render: RenderFn | None = None,
        *,
        style: str = DEFAULT_STYLE,
        color: bool = True,
        executor: Executor | None = None,
        cache: BoundedPreviewCache | None = None,
        min_width: int = MIN_RENDER_WIDTH,
        min_height: int = MIN_RENDER_HEIGHT,
    ) -> None:
        if render is None:
            render = partial(render_preview_text, style=style, color=color)
        self._render = render
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=PREVIEW_WORKERS,
            thread_name_prefix="seer-preview",
        )
        self.cache = cache if cache is not None else BoundedPreviewCache()
        self.min_width = max(1, min_width)
        self.min_height = max(1, min_height)
        self.request_id = 0
        self._superseded_through = 0
        self.state = PreviewState()
        self._results: Queue[PreviewResult] = Queue()

    @property
    def loading(self) -> bool:
        return self.state.loading

    def _compute(self, request_id: int, fingerprint: str, path: Path, width: int, height: int) -> None:
        """Worker-side body: render and post exactly one result."""
        try:
            content = self._render(path, width, height)
        except Exception as exc:
            logger.debug("preview render failed for %s", path, exc_info=True)
            result = PreviewResult(
                request_id=request_id,
                fingerprint=fingerprint,
                error=str(exc) or exc.__class__.__name__,
            )
        else:
            result = PreviewResult(request_id=request_id, fingerprint=fingerprint, content=content)
        self._results.put(result)

    def request_preview(self, entry: SelectedEntry | None, width: int, height: int) -> Future | None:
        """Show ``entry`` for a ``width`` x ``height`` pane.

        Returns the background future on a cache miss, else ``None``.
        """
        if entry is None:
            self._superseded_through = self.request_id
            self.state = PreviewState()
            return None

        fingerprint = preview_fingerprint(entry, width, height)
        cached = self.cache.get(fingerprint)
        if cached is not None:
            self._superseded_through = self.request_id
            self.state = PreviewState(content=cached)
            return None

        self.request_id += 1
        request_id = self.request_id
        self.state = PreviewState(content=self.state.content, loading=True)
        render_width = max(self.min_width, width)
        render_height = max(self.min_height, height)
        return self._executor.submit(
            self._compute,
            request_id,
            fingerprint,
            entry.path,
            render_width,
            render_height,
        )

    def deliver(self, result: PreviewResult) -> bool:
        """Apply ``result`` if it is current; return whether it was applied."""
        if result.request_id != self.request_id or result.request_id <= self._superseded_through:
            logger.debug("dropping stale preview result %d (current %d)", result.request_id, self.request_id)
            return False
        if result.error is not None:
            self.state = PreviewState(
                content=PREVIEW_ERROR_PREFIX + result.error,
                error=result.error,
            )
            return True
        self.cache.put(result.fingerprint, result.content)
        self.state = PreviewState(content=result.content)
        return True

    def drain_results(self) -> int:
        """Deliver every queued result without blocking; return how many were current."""
        applied = 0
        while True:
            try:
                result = self._results.get_nowait()
            except Empty:
                break
            if self.deliver(result):
                applied += 1
        return applied

    def wait_for_result(self, timeout: float | None = None) -> bool | None:
        """Block for one queued result and deliver it.

        Returns ``None`` on timeout, otherwise whether the result was current.
        """
        try:
            result = self._results.get(timeout=timeout)
        except Empty:
            return None
        return self.deliver(result)

    def shutdown(self) -> None:
        """Stop accepting work; superseded renders are not waited for."""
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
