#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/persistence/controller.py
"""Debounced persistence of the canonical document.

The :class:`PersistenceController` owns one persisted slot in a key-value
store and moves through these states::

    EMPTY --load()--> LOADED --on_change()--> DIRTY --save()--> SAVED
                         ^                      ^                 |
                         |                      +---on_change()---+
                         +------------- clear() -> EMPTY

Changes are debounced on the trailing edge: each change restarts the quiet
period, and only the last snapshot received before the period elapses is
saved. Storage and parse failures are logged and recovered here; they never
reach the editing surface.

Examples
--------
    >>> controller = PersistenceController(MemoryStore(), scheduler=ManualScheduler())
    >>> root = controller.load() or prepopulated_document()
    >>> controller.on_change(root)
    >>> controller.scheduler.advance(1.0)
    >>> controller.state
    <PersistenceState.SAVED: 'saved'>

"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from cleanstate.ast.nodes import Root
from cleanstate.ast.serialization import json_to_document
from cleanstate.constants import CORRUPT_BACKUP_SUFFIX, DEFAULT_DEBOUNCE_SECONDS, DEFAULT_STORAGE_KEY
from cleanstate.content import fallback_document
from cleanstate.exceptions import DeserializationError, StorageError, ValidationError
from cleanstate.persistence.scheduler import AsyncioScheduler, Cancellable, Scheduler
from cleanstate.storage.base import KeyValueStore
from cleanstate.transforms.pipeline import CanonicalizationPipeline

if TYPE_CHECKING:
    from cleanstate.config import SessionConfig

logger = logging.getLogger(__name__)

SavedCallback = Callable[[str], None]


class PersistenceState(Enum):
    """Lifecycle state of the persisted slot."""

    EMPTY = "empty"
    LOADED = "loaded"
    DIRTY = "dirty"
    SAVED = "saved"


class PersistenceController:
    """Load, debounce-save and clear the canonical document.

    Parameters
    ----------
    store : KeyValueStore
        Backend holding the persisted slot
    scheduler : Scheduler or None, default = None
        Scheduler used for the debounce timer. When None, an AsyncioScheduler
        bound to the running event loop, so construction outside a loop
        raises ValidationError
    key : str, default = "lexical-editor-state"
        Storage key of the slot
    debounce_seconds : float, default = 1.0
        Quiet period after the most recent change before saving
    pipeline : CanonicalizationPipeline or None, default = None
        Pipeline producing the stored form
    strict_deserialization : bool, default = True
        Treat unknown node types in stored JSON as corruption
    backup_corrupt : bool, default = True
        Copy an unparseable payload to ``<key>.corrupt`` before falling back
    on_saved : callable or None, default = None
        Called with the stored JSON after every successful save

    Attributes
    ----------
    state : PersistenceState
        Current lifecycle state
    last_error : Exception or None
        Most recent recovered storage or deserialization error
    last_saved : str or None
        JSON written by the most recent successful save

    """

    def __init__(
        self,
        store: KeyValueStore,
        scheduler: Optional[Scheduler] = None,
        key: str = DEFAULT_STORAGE_KEY,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        pipeline: Optional[CanonicalizationPipeline] = None,
        strict_deserialization: bool = True,
        backup_corrupt: bool = True,
        on_saved: Optional[SavedCallback] = None,
    ) -> None:
        """Initialize the controller in the EMPTY state."""
        if debounce_seconds < 0:
            raise ValidationError(
                "debounce_seconds must not be negative",
                parameter_name="debounce_seconds",
                parameter_value=debounce_seconds,
            )
        if not key:
            raise ValidationError("Storage key must not be empty", parameter_name="key", parameter_value=key)

        self.store = store
        self.scheduler = scheduler or AsyncioScheduler()
        self.key = key
        self.debounce_seconds = debounce_seconds
        self.pipeline = pipeline or CanonicalizationPipeline()
        self.strict_deserialization = strict_deserialization
        self.backup_corrupt = backup_corrupt
        self.on_saved = on_saved

        self.state = PersistenceState.EMPTY
        self.last_error: Optional[Exception] = None
        self.last_saved: Optional[str] = None

        self._pending: Optional[Cancellable] = None
        self._pending_snapshot: Optional[Root] = None

    @classmethod
    def from_config(
        cls,
        config: SessionConfig,
        store: KeyValueStore,
        scheduler: Optional[Scheduler] = None,
        on_saved: Optional[SavedCallback] = None,
    ) -> PersistenceController:
        """Create a controller from a :class:`~cleanstate.config.SessionConfig`."""
        return cls(
            store,
            scheduler=scheduler,
            key=config.storage_key,
            debounce_seconds=config.debounce_seconds,
            strict_deserialization=config.strict_deserialization,
            backup_corrupt=config.backup_corrupt,
            on_saved=on_saved,
        )

    @property
    def has_pending_save(self) -> bool:
        """True while a debounced save is scheduled."""
        return self._pending is not None

    def load(self) -> Optional[Root]:
        """Load the persisted document.

        Returns
        -------
        Root or None
            The stored document; a single empty paragraph if the stored payload
            is corrupt; None when nothing is stored or the store is unreadable

        """
        try:
            raw = self.store.get(self.key)
        except DeserializationError as e:
            return self._fall_back(e)
        except StorageError as e:
            logger.error(f"Error loading editor state: {e}")
            self.last_error = e
            return None

        if raw is None:
            logger.debug(f"Nothing persisted under '{self.key}'")
            return None

        try:
            root = json_to_document(raw, strict_mode=self.strict_deserialization)
        except DeserializationError as e:
            return self._fall_back(e)

        logger.info(f"Editor state loaded from storage key '{self.key}'")
        self.state = PersistenceState.LOADED
        return root

    def _fall_back(self, error: DeserializationError) -> Root:
        logger.warning(f"Error deserializing editor state, falling back to an empty document: {error}")
        self.last_error = error
        self._backup_corrupt_payload()
        self.state = PersistenceState.LOADED
        return fallback_document()

    def _backup_corrupt_payload(self) -> None:
        if not self.backup_corrupt:
            return
        backup_key = f"{self.key}{CORRUPT_BACKUP_SUFFIX}"
        try:
            self.store.copy(self.key, backup_key)
            logger.warning(f"Corrupt editor state preserved under '{backup_key}'")
        except (StorageError, DeserializationError) as e:
            logger.error(f"Could not preserve corrupt editor state: {e}")

    def on_change(self, snapshot: Root) -> None:
        """Schedule a save of ``snapshot`` after the quiet period.

        A change arriving before the period elapses cancels the pending save
        and restarts the timer with the newer snapshot.

        Parameters
        ----------
        snapshot : Root
            Immutable snapshot of the document at the time of the change

        """
        handle = self.scheduler.call_later(self.debounce_seconds, self._run_pending_save)
        if self._pending is not None:
            self._pending.cancel()
        self._pending = handle
        self._pending_snapshot = snapshot
        self.state = PersistenceState.DIRTY

    def _run_pending_save(self) -> None:
        snapshot = self._pending_snapshot
        self._pending = None
        self._pending_snapshot = None
        if snapshot is not None:
            self.save(snapshot)

    def save(self, snapshot: Root) -> bool:
        """Canonicalize ``snapshot`` and write it to the store.

        Parameters
        ----------
        snapshot : Root
            Document to persist

        Returns
        -------
        bool
            True on success, False if the write failed (the failure is logged
            and not retried)

        Raises
        ------
        TransformError
            If ``snapshot`` is not a well-formed document tree

        """
        payload = self.pipeline.to_json(snapshot)

        try:
            self.store.set(self.key, payload)
        except StorageError as e:
            logger.error(f"Error saving editor state: {e}")
            self.last_error = e
            return False

        self.last_saved = payload
        self.state = PersistenceState.SAVED
        stats = self.pipeline.last_stats
        logger.debug(
            f"Editor state saved to '{self.key}' ({len(payload)} characters, "
            f"{stats.wrappers_removed} wrapper(s) stripped, {stats.leaves_merged} leaf/leaves merged)"
        )

        if self.on_saved is not None:
            self.on_saved(payload)
        return True

    def flush(self) -> bool:
        """Run a pending save immediately.

        Returns
        -------
        bool
            Result of the save, or False when nothing was pending

        """
        if self._pending is None:
            return False
        self._pending.cancel()
        snapshot = self._pending_snapshot
        self._pending = None
        self._pending_snapshot = None
        return self.save(snapshot) if snapshot is not None else False

    def cancel_pending(self) -> None:
        """Drop a pending save without running it."""
        if self._pending is not None:
            self._pending.cancel()
            logger.debug("Cancelled pending save")
        self._pending = None
        self._pending_snapshot = None

    def clear(self) -> bool:
        """Remove the persisted slot.

        Idempotent: clearing an absent slot succeeds. A pending save is
        cancelled so that it cannot recreate the slot.

        Returns
        -------
        bool
            True if the slot is gone, False if the store failed

        """
        self.cancel_pending()
        try:
            self.store.delete(self.key)
        except StorageError as e:
            logger.error(f"Error clearing editor state: {e}")
            self.last_error = e
            return False

        self.state = PersistenceState.EMPTY
        self.last_saved = None
        logger.info(f"Cleared storage key '{self.key}'")
        return True


__all__ = ["PersistenceController", "PersistenceState"]
