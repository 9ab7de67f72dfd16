#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/storage/__init__.py
"""Key-value stores used to persist the canonical document."""

from cleanstate.storage.base import KeyValueStore
from cleanstate.storage.file import FileStore
from cleanstate.storage.memory import MemoryStore

__all__ = ["KeyValueStore", "MemoryStore", "FileStore"]
