#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/storage/memory.py
"""In-memory key-value store, the equivalent of browser session storage."""

from __future__ import annotations

from cleanstate.exceptions import StorageError
from cleanstate.storage.base import KeyValueStore


class MemoryStore(KeyValueStore):
    """Dictionary-backed store that lives as long as the process.

    Parameters
    ----------
    quota_bytes : int or None, default = None
        Maximum total UTF-8 size of keys plus values. Writes that would
        exceed it raise StorageError. Unlimited when None.

    Examples
    --------
    >>> store = MemoryStore()
    >>> store.set("k", "v")
    >>> store.get("k")
    'v'

    """

    def __init__(self, quota_bytes: int | None = None) -> None:
        """Initialize an empty store."""
        self.quota_bytes = quota_bytes
        self._data: dict[str, str] = {}

    def _size_without(self, key: str) -> int:
        return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in self._data.items() if k != key)

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            needed = self._size_without(key) + len(key.encode("utf-8")) + len(value.encode("utf-8"))
            if needed > self.quota_bytes:
                raise StorageError(
                    f"Storage quota exceeded: {needed} bytes needed, {self.quota_bytes} allowed",
                    key=key,
                    operation="set",
                )
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        """Return the stored keys in insertion order."""
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)


__all__ = ["MemoryStore"]
