#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/editor.py
"""Editing-surface contract and an in-memory reference implementation.

The real editing surface (input handling, undo history, rendering) lives
outside this package. The session only needs the narrow
:class:`EditorSurface` protocol. :class:`InMemoryEditor` implements it
without any UI and is used by the CLI and the test suite.
"""

from __future__ import annotations

import copy
import logging
from typing import Callable, Optional, Protocol

from cleanstate.ast.nodes import CommentWrapper, ElementNode, Root
from cleanstate.constants import HISTORY_MERGE_TAG
from cleanstate.exceptions import ValidationError

logger = logging.getLogger(__name__)

UpdateListener = Callable[[Root], None]
Unregister = Callable[[], None]


class EditorSurface(Protocol):
    """What the session consumes from the editing surface."""

    def get_snapshot(self) -> Root:
        """Return an immutable snapshot of the current document."""
        ...

    def set_snapshot(self, root: Root, tag: Optional[str] = None) -> bool:
        """Replace the document; a no-op when ``root`` equals the current one."""
        ...

    def register_update_listener(self, listener: UpdateListener) -> Unregister:
        """Call ``listener`` once per committed edit with the new snapshot."""
        ...

    def add_comment(self, annotation_id: str, block_index: int = 0, start: int = 0, end: Optional[int] = None) -> None:
        """Wrap a range of content in a comment wrapper."""
        ...


class InMemoryEditor:
    """Minimal editing surface holding a document tree in memory.

    Snapshots handed out (to callers and listeners) are deep copies, so
    later edits never mutate a snapshot that is being canonicalized.

    Parameters
    ----------
    root : Root or None, default = None
        Initial document; an empty root when None

    """

    def __init__(self, root: Optional[Root] = None) -> None:
        """Initialize the editor."""
        self._root = copy.deepcopy(root) if root is not None else Root()
        self._history: list[Root] = []
        self._listeners: list[UpdateListener] = []

    @property
    def history_size(self) -> int:
        """Number of undo entries."""
        return len(self._history)

    def get_snapshot(self) -> Root:
        return copy.deepcopy(self._root)

    def set_snapshot(self, root: Root, tag: Optional[str] = None) -> bool:
        if root == self._root:
            logger.debug("Snapshot identical to current document, skipping update")
            return False
        self._commit(copy.deepcopy(root), tag)
        return True

    def update(self, fn: Callable[[Root], Optional[Root]], tag: Optional[str] = None) -> bool:
        """Apply an edit function to a draft of the document.

        ``fn`` may mutate the draft in place or return a replacement root.
        The edit is committed only if it changed the document.

        Returns
        -------
        bool
            True if an edit was committed

        """
        draft = copy.deepcopy(self._root)
        result = fn(draft)
        new_root = result if result is not None else draft
        if new_root == self._root:
            return False
        self._commit(new_root, tag)
        return True

    def _commit(self, new_root: Root, tag: Optional[str]) -> None:
        if tag != HISTORY_MERGE_TAG:
            self._history.append(self._root)
        self._root = new_root
        for listener in list(self._listeners):
            listener(copy.deepcopy(self._root))

    def register_update_listener(self, listener: UpdateListener) -> Unregister:
        self._listeners.append(listener)

        def unregister() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unregister

    def undo(self) -> bool:
        """Restore the previous document; False when there is nothing to undo."""
        if not self._history:
            return False
        self._root = self._history.pop()
        for listener in list(self._listeners):
            listener(copy.deepcopy(self._root))
        return True

    def add_comment(self, annotation_id: str, block_index: int = 0, start: int = 0, end: Optional[int] = None) -> None:
        """Wrap children ``start:end`` of top-level block ``block_index`` in a comment.

        Raises
        ------
        ValidationError
            If the block does not exist, is not an element, or the range is empty

        """

        def wrap(draft: Root) -> None:
            if not 0 <= block_index < len(draft.children):
                raise ValidationError(
                    f"No block at index {block_index}", parameter_name="block_index", parameter_value=block_index
                )
            block = draft.children[block_index]
            if not isinstance(block, ElementNode):
                raise ValidationError(
                    f"Block at index {block_index} cannot hold a comment",
                    parameter_name="block_index",
                    parameter_value=block_index,
                )
            stop = len(block.children) if end is None else end
            selected = block.children[start:stop]
            if not selected:
                raise ValidationError(f"Empty range {start}:{stop}", parameter_name="end", parameter_value=end)
            block.children[start:stop] = [CommentWrapper(children=selected, annotation_id=annotation_id)]

        self.update(wrap)


__all__ = ["EditorSurface", "InMemoryEditor", "UpdateListener", "Unregister"]
