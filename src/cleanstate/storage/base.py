#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/storage/base.py
"""Abstract key-value store interface.

Stores hold UTF-8 strings under string keys. Every backend raises
:class:`~cleanstate.exceptions.StorageError` for failures of the underlying
medium and :class:`~cleanstate.exceptions.DeserializationError` when a
stored value cannot be decoded. A missing key is not a failure:
:meth:`KeyValueStore.get` returns None and :meth:`KeyValueStore.delete`
does nothing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Base class for persistence backends."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None when absent.

        Raises
        ------
        StorageError
            If the store cannot be read
        DeserializationError
            If the stored value cannot be decoded as UTF-8

        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises
        ------
        StorageError
            If the store cannot be written (unavailable, quota exceeded)

        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; removing an absent key is not an error.

        Raises
        ------
        StorageError
            If the store cannot be modified

        """

    def contains(self, key: str) -> bool:
        """Return True when a value is stored under ``key``."""
        return self.get(key) is not None

    def copy(self, src: str, dst: str) -> None:
        """Copy the value under ``src`` to ``dst``; does nothing when ``src`` is absent.

        Backends that can copy without decoding the value override this so
        that unreadable values are preserved exactly.

        Raises
        ------
        StorageError
            If either key cannot be accessed
        DeserializationError
            If the value under ``src`` cannot be decoded

        """
        value = self.get(src)
        if value is not None:
            self.set(dst, value)


__all__ = ["KeyValueStore"]
