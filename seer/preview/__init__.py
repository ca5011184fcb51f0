"""Public preview API.

Implementation lives in small focused modules: classification, one module
per renderer strategy, the dispatcher in ``path``, and the cache/pipeline
pair that schedules renders off the control loop.
"""

from __future__ import annotations

from .cache import PREVIEW_CACHE_MAX, BoundedPreviewCache
from .classify import (
    BINARY_PROBE_BYTES,
    PREVIEW_CAP_BYTES,
    ContentKind,
    FileSample,
    classify,
    file_category,
    read_sample,
)
from .path import TRUNCATION_NOTICE, RenderedPreview, build_preview
from .pipeline import (
    PreviewPipeline,
    PreviewResult,
    PreviewState,
    SelectedEntry,
    preview_fingerprint,
)

__all__ = [
    "BINARY_PROBE_BYTES",
    "PREVIEW_CACHE_MAX",
    "PREVIEW_CAP_BYTES",
    "TRUNCATION_NOTICE",
    "BoundedPreviewCache",
    "ContentKind",
    "FileSample",
    "PreviewPipeline",
    "PreviewResult",
    "PreviewState",
    "RenderedPreview",
    "SelectedEntry",
    "build_preview",
    "classify",
    "file_category",
    "preview_fingerprint",
    "read_sample",
]
