"""Fixed-capacity preview cache with first-in, first-out eviction.

Eviction follows insertion order only: reading an entry does not refresh
it and storing an existing key again keeps its original position.
"""

from __future__ import annotations

from collections import OrderedDict

PREVIEW_CACHE_MAX = 50


class BoundedPreviewCache:
    """Map preview fingerprints to rendered text, holding at most ``capacity`` entries."""

    def __init__(self, capacity: int = PREVIEW_CACHE_MAX) -> None:
        self.capacity = max(1, capacity)
        self._entries: OrderedDict[str, str] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def put(self, key: str, value: str) -> None:
        self._entries[key] = value
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def keys(self) -> list[str]:
        """Keys from oldest to newest insertion."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()
