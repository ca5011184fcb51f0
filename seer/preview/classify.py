"""Decide which renderer strategy applies to a selected path.

Classification looks at the directory flag, the extension and a bounded
byte sample. Reading the sample is the only I/O done here and its errors
propagate to the caller.
"""

from __future__ import annotations

import codecs
import enum
from dataclasses import dataclass
from pathlib import Path

PREVIEW_CAP_BYTES = 256 * 1024
BINARY_PROBE_BYTES = 8 * 1024

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp", ".tiff"})
MARKDOWN_EXTENSIONS = frozenset({".md", ".markdown", ".mdx"})
DIAGRAM_EXTENSIONS = frozenset({".mmd", ".mermaid"})
JSON_EXTENSIONS = frozenset({".json"})


class ContentKind(enum.Enum):
    DIRECTORY = "directory"
    IMAGE = "image"
    BINARY = "binary"
    NON_UTF8_TEXT = "non-utf8-text"
    MARKDOWN = "markdown"
    DIAGRAM = "diagram"
    JSON = "json"
    SYNTAX_TEXT = "syntax-text"


@dataclass(frozen=True)
class FileSample:
    """Leading bytes of a file, capped at the preview cap."""

    data: bytes
    truncated: bool

    @classmethod
    def from_bytes(cls, data: bytes, cap: int = PREVIEW_CAP_BYTES) -> FileSample:
        data = data[:cap]
        return cls(data=data, truncated=len(data) == cap)


def read_sample(path: Path, cap: int = PREVIEW_CAP_BYTES) -> FileSample:
    """Read at most ``cap`` bytes from ``path``; ``OSError`` propagates."""
    with path.open("rb") as handle:
        data = handle.read(cap)
    return FileSample.from_bytes(data, cap)


def extension_of(path: Path) -> str:
    return path.suffix.lower()


def is_likely_binary(data: bytes) -> bool:
    return b"\x00" in data[:BINARY_PROBE_BYTES]


def _decode_utf8(sample: FileSample) -> str | None:
    """Decode the sample, tolerating a multi-byte character cut off by the cap."""
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        return decoder.decode(sample.data, final=not sample.truncated)
    except UnicodeDecodeError:
        return None


def decode_sample(sample: FileSample) -> str:
    """Return sample text with CRLF and lone CR normalised to LF.

    Only call this for samples that ``classify`` accepted as text.
    """
    text = _decode_utf8(sample)
    if text is None:
        text = sample.data.decode("utf-8", errors="replace")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def classify_extension(path: Path) -> ContentKind:
    """Text strategy chosen purely from the extension."""
    ext = extension_of(path)
    if ext in MARKDOWN_EXTENSIONS:
        return ContentKind.MARKDOWN
    if ext in DIAGRAM_EXTENSIONS:
        return ContentKind.DIAGRAM
    if ext in JSON_EXTENSIONS:
        return ContentKind.JSON
    return ContentKind.SYNTAX_TEXT


def classify(path: Path, is_directory: bool, sample: FileSample | None = None) -> ContentKind:
    """Classify a path in priority order.

    ``sample`` is only consulted for regular non-image files; passing
    ``None`` there treats the file as empty.
    """
    if is_directory:
        return ContentKind.DIRECTORY
    if extension_of(path) in IMAGE_EXTENSIONS:
        return ContentKind.IMAGE
    if sample is None:
        sample = FileSample(data=b"", truncated=False)
    if is_likely_binary(sample.data):
        return ContentKind.BINARY
    if _decode_utf8(sample) is None:
        return ContentKind.NON_UTF8_TEXT
    return classify_extension(path)


@dataclass(frozen=True)
class FileCategory:
    """Broad file family used for list/directory colouring."""

    name: str
    icon: str
    sgr: str


DIR_CATEGORY = FileCategory("dir", "▸ ", "1;38;5;75")
_CATEGORIES = {
    "image": FileCategory("image", "⬡ ", "38;5;215"),
    "doc": FileCategory("doc", "≡ ", "38;5;189"),
    "code": FileCategory("code", "⟨⟩ ", "38;5;231"),
    "config": FileCategory("config", "⚙ ", "38;5;222"),
    "exec": FileCategory("exec", "⚡ ", "38;5;114"),
}
OTHER_CATEGORY = FileCategory("other", "· ", "38;5;252")

_CATEGORY_BY_EXTENSION: dict[str, str] = {}
for _category, _extensions in (
    ("image", IMAGE_EXTENSIONS),
    ("doc", (".md", ".markdown", ".mdx", ".rst", ".txt")),
    ("exec", (".sh", ".bash", ".zsh", ".fish", ".ps1", ".bat", ".cmd")),
    (
        "code",
        (
            ".go", ".js", ".ts", ".jsx", ".tsx", ".py", ".rb", ".rs", ".c", ".cpp", ".h",
            ".java", ".cs", ".php", ".swift", ".kt", ".lua", ".ex", ".exs", ".hs", ".ml",
            ".mli", ".clj", ".scala", ".vim", ".mmd", ".mermaid",
        ),
    ),
    (
        "config",
        (
            ".json", ".yaml", ".yml", ".toml", ".ini", ".env", ".conf", ".config", ".xml",
            ".dockerignore", ".gitignore", ".editorconfig", ".eslintrc", ".prettierrc",
            ".babelrc", ".nvmrc",
        ),
    ),
):
    for _ext in _extensions:
        _CATEGORY_BY_EXTENSION[_ext] = _category


def file_category(name: str, is_dir: bool) -> FileCategory:
    """Return the display category for a listing entry."""
    if is_dir:
        return DIR_CATEGORY
    ext = Path(name).suffix.lower()
    if not ext and name.startswith("."):
        # Dotfiles such as ".gitignore" have no suffix of their own.
        ext = name.lower()
    category = _CATEGORY_BY_EXTENSION.get(ext)
    if category is None:
        return OTHER_CATEGORY
    return _CATEGORIES[category]
