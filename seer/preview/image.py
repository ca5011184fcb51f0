"""Draw raster images with text cells.

With a true-color terminal each cell is a ``▀`` half block carrying two
source rows (foreground = upper, background = lower). Otherwise each cell
is a character picked from a luminance ramp. Sampling is nearest-pixel on
integer-scaled coordinates.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .summary import image_fallback_summary

logger = logging.getLogger(__name__)

LUMINANCE_RAMP = " .:-=+*#%@"
HALF_BLOCK = "▀"
RESET = "\x1b[0m"
MIN_IMAGE_COLUMNS = 16
MIN_IMAGE_ROWS = 8

RGB = tuple[int, int, int]


def supports_true_color(env: Mapping[str, str] | None = None) -> bool:
    """Return whether terminal environment strings advertise 24-bit color."""
    if env is None:
        env = os.environ
    if "NO_COLOR" in env:
        return False
    color_term = env.get("COLORTERM", "").lower()
    if "truecolor" in color_term or "24bit" in color_term:
        return True
    term = env.get("TERM", "").lower()
    return "kitty" in term or "wezterm" in term


def luminance(pixel: RGB) -> float:
    red, green, blue = pixel
    return red * 0.299 + green * 0.587 + blue * 0.114


def _scaled(index: int, source_extent: int, target_extent: int) -> int:
    return index * (source_extent - 1) // max(1, target_extent - 1)


def output_dimensions(width: int, height: int) -> tuple[int, int]:
    """Cell grid used for a ``width`` x ``height`` preview pane."""
    return max(MIN_IMAGE_COLUMNS, width - 2), max(MIN_IMAGE_ROWS, height - 3)


def render_true_color(image: Image.Image, out_w: int, out_h: int) -> str:
    src_w, src_h = image.size
    pixels = image.load()
    scaled_h = out_h * 2
    rows: list[str] = []
    for row in range(out_h):
        upper_y = _scaled(row * 2, src_h, scaled_h)
        lower_y = _scaled(row * 2 + 1, src_h, scaled_h)
        out: list[str] = []
        last: tuple[RGB, RGB] | None = None
        for x in range(out_w):
            sx = _scaled(x, src_w, out_w)
            colors = (pixels[sx, upper_y], pixels[sx, lower_y])
            if colors != last:
                (fg_r, fg_g, fg_b), (bg_r, bg_g, bg_b) = colors
                out.append(f"\x1b[38;2;{fg_r};{fg_g};{fg_b}m\x1b[48;2;{bg_r};{bg_g};{bg_b}m")
                last = colors
            out.append(HALF_BLOCK)
        out.append(RESET)
        rows.append("".join(out))
    return "\n".join(rows)


def render_luminance(image: Image.Image, out_w: int, out_h: int) -> str:
    src_w, src_h = image.size
    pixels = image.load()
    top = len(LUMINANCE_RAMP) - 1
    rows: list[str] = []
    for y in range(out_h):
        sy = _scaled(y, src_h, out_h)
        out: list[str] = []
        for x in range(out_w):
            idx = int(luminance(pixels[_scaled(x, src_w, out_w), sy]) * top / 255.0)
            out.append(LUMINANCE_RAMP[min(top, max(0, idx))])
        rows.append("".join(out))
    return "\n".join(rows)


def render_image(image: Image.Image, width: int, height: int, true_color: bool) -> str:
    """Render an already-decoded image; returns ``""`` for zero-area images."""
    if image.width <= 0 or image.height <= 0:
        return ""
    rgb = image.convert("RGB")
    out_w, out_h = output_dimensions(width, height)
    if true_color:
        return render_true_color(rgb, out_w, out_h)
    return render_luminance(rgb, out_w, out_h)


def render_image_preview(
    path: Path,
    width: int,
    height: int,
    size_bytes: int,
    true_color: bool | None = None,
    env: Mapping[str, str] | None = None,
) -> str:
    """Decode and draw ``path``; decode failures produce descriptive text instead.

    ``true_color`` defaults to what the terminal environment advertises.
    """
    if true_color is None:
        true_color = supports_true_color(env)
    try:
        with Image.open(path) as image:
            rendered = render_image(image, width, height, true_color)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        logger.debug("image decode failed for %s: %s", path, exc)
        return image_fallback_summary(path, size_bytes)
    if not rendered:
        return image_fallback_summary(path, size_bytes)
    return rendered
