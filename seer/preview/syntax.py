"""Source sanitization and syntax highlighting.

Highlighting walks an ordered chain of lexer providers: Pygments lookup by
filename, then Pygments content analysis. The first provider yielding styled
output wins; if none does the sanitized text is returned unstyled.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter, TerminalTrueColorFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_for_filename, guess_lexer
from pygments.lexers.special import TextLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "nord"
FALLBACK_STYLE = "monokai"
GUESS_LEXER_SAMPLE_CHARS = 16 * 1024

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_FORMATTERS: dict[tuple[str, bool], object] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()

LexerProvider = Callable[[str, Path], "Lexer | None"]


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def normalize_style(style: str) -> str:
    """Validate/canonicalize requested style name with cache-backed checks."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return FALLBACK_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return FALLBACK_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str, true_color: bool):
    """Return cached terminal formatter for ``(style, true_color)``."""
    key = (style, true_color)
    formatter = _FORMATTERS.get(key)
    if formatter is not None:
        return formatter
    formatter_cls = TerminalTrueColorFormatter if true_color else Terminal256Formatter
    formatter = formatter_cls(style=style)
    _FORMATTERS[key] = formatter
    return formatter


def lexer_by_filename(source: str, path: Path) -> Lexer | None:
    try:
        return get_lexer_for_filename(path.name, source[:GUESS_LEXER_SAMPLE_CHARS])
    except ClassNotFound:
        return None


def lexer_by_analysis(source: str, path: Path) -> Lexer | None:
    try:
        lexer = guess_lexer(source[:GUESS_LEXER_SAMPLE_CHARS])
    except ClassNotFound:
        return None
    # Plain text "wins" analysis for anything unrecognised; that is not a match.
    if isinstance(lexer, TextLexer):
        return None
    return lexer


LEXER_PROVIDERS: tuple[LexerProvider, ...] = (lexer_by_filename, lexer_by_analysis)


def highlight_source(
    source: str,
    path: Path,
    style: str = DEFAULT_STYLE,
    true_color: bool = True,
    providers: tuple[LexerProvider, ...] = LEXER_PROVIDERS,
) -> str | None:
    """Highlight with the first provider that yields styled output, else ``None``."""
    formatter = _formatter_for_style(normalize_style(style), true_color)
    for provider in providers:
        try:
            lexer = provider(source, path)
            if lexer is None:
                continue
            rendered = pygments_highlight(source, lexer, formatter)
        except Exception:
            continue
        if rendered and "\x1b[" in rendered:
            return rendered
    return None


def render_syntax_preview(
    source: str,
    path: Path,
    style: str = DEFAULT_STYLE,
    color: bool = True,
    true_color: bool = True,
) -> str:
    """Sanitize ``source`` and colorize it when possible.

    Never fails: without color, or when no lexer matches, the sanitized text
    comes back unstyled.
    """
    source = sanitize_terminal_text(source)
    if not color:
        return source
    rendered = highlight_source(source, path, style, true_color)
    if rendered is None:
        return source
    # Pygments always terminates output with a newline; keep the source's own ending.
    if not source.endswith("\n") and rendered.endswith("\n"):
        rendered = rendered[:-1]
    return rendered
