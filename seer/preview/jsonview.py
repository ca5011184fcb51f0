"""Pretty-print JSON documents with deterministic key order and color tokens.

Values are whatever :func:`json.loads` produces; rendering dispatches on
their type with booleans checked before numbers (``bool`` is an ``int``).
"""

from __future__ import annotations

import json

JSON_ARRAY_PREVIEW_MAX = 100
INDENT = "  "

_KEY = "38;5;147"
_STRING = "38;5;114"
_NUMBER = "38;5;222"
_BOOL = "1;38;5;215"
_NULL = "1;38;5;240"
_BRACKET = "38;5;244"
_MUTED = "38;5;240"
_ERROR = "38;5;203"

_INT64_LIMIT = 2**63


class _JsonWriter:
    def __init__(self, color: bool) -> None:
        self.color = color
        self.parts: list[str] = []

    def styled(self, text: str, sgr: str) -> None:
        if self.color:
            self.parts.append(f"\033[{sgr}m{text}\033[0m")
        else:
            self.parts.append(text)

    def plain(self, text: str) -> None:
        self.parts.append(text)

    def value(self, value: object, depth: int) -> None:
        if isinstance(value, dict):
            self.object(value, depth)
        elif isinstance(value, list):
            self.array(value, depth)
        elif isinstance(value, str):
            self.styled(json.dumps(value, ensure_ascii=False), _STRING)
        elif isinstance(value, bool):
            self.styled("true" if value else "false", _BOOL)
        elif isinstance(value, (int, float)):
            self.styled(format_number(value), _NUMBER)
        elif value is None:
            self.styled("null", _NULL)
        else:
            raise TypeError(f"not a JSON value: {type(value).__name__}")

    def object(self, value: dict[str, object], depth: int) -> None:
        if not value:
            self.styled("{}", _BRACKET)
            return
        child_indent = INDENT * (depth + 1)
        keys = sorted(value)
        self.styled("{", _BRACKET)
        self.plain("\n")
        for idx, key in enumerate(keys):
            self.plain(child_indent)
            self.styled(json.dumps(key, ensure_ascii=False), _KEY)
            self.styled(": ", _MUTED)
            self.value(value[key], depth + 1)
            if idx < len(keys) - 1:
                self.styled(",", _MUTED)
            self.plain("\n")
        self.plain(INDENT * depth)
        self.styled("}", _BRACKET)

    def array(self, value: list[object], depth: int) -> None:
        if not value:
            self.styled("[]", _BRACKET)
            return
        child_indent = INDENT * (depth + 1)
        shown = value[:JSON_ARRAY_PREVIEW_MAX]
        self.styled("[", _BRACKET)
        self.plain("\n")
        for idx, item in enumerate(shown):
            self.plain(child_indent)
            self.value(item, depth + 1)
            if idx < len(value) - 1:
                self.styled(",", _MUTED)
            self.plain("\n")
        remaining = len(value) - len(shown)
        if remaining > 0:
            self.plain(child_indent)
            self.styled(f"… {remaining} more items", _MUTED)
            self.plain("\n")
        self.plain(INDENT * depth)
        self.styled("]", _BRACKET)


def format_number(value: int | float) -> str:
    """Integral values print without a decimal point; other floats use ``repr``."""
    if isinstance(value, int):
        return str(value)
    if value.is_integer() and abs(value) < _INT64_LIMIT:
        return str(int(value))
    return repr(value)


def format_json_value(value: object, color: bool = True) -> str:
    writer = _JsonWriter(color)
    writer.value(value, 0)
    return "".join(writer.parts)


def render_json_preview(text: str, color: bool = True) -> str:
    """Pretty-print ``text``; invalid JSON shows the parse error above the raw text."""
    try:
        value = json.loads(text.strip())
    except (json.JSONDecodeError, RecursionError) as exc:
        message = f"  invalid JSON: {exc}"
        if color:
            message = f"\033[{_ERROR}m{message}\033[0m"
        return f"{message}\n\n{text}"
    try:
        return format_json_value(value, color)
    except RecursionError:
        return f"  JSON nested too deeply to render\n\n{text}"
