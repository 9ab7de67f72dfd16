#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/session.py
"""Editing session wiring.

:class:`EditorSession` connects an editing surface, a persistence controller
and an annotation channel:

1. On :meth:`EditorSession.start` the persisted document is loaded. If
   nothing is stored, the initial content is applied once, without an undo
   entry.
2. Every committed edit is forwarded to the controller, which debounces and
   saves the canonical form.
3. Annotation lists published on the channel are handed, together with the
   current tree, to the overlay render hook supplied by the annotation UI.

Examples
--------
    >>> session = create_session(load_config(), store=MemoryStore(), scheduler=ManualScheduler())
    >>> session.start()
    False
    >>> session.clear_storage()
    'Storage cleared!'

"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

from cleanstate.ast.nodes import Root
from cleanstate.config import SessionConfig
from cleanstate.constants import COMMENT_ANNOTATIONS_KEY, HISTORY_MERGE_TAG, STORAGE_CLEARED_MESSAGE
from cleanstate.content import prepopulated_document
from cleanstate.editor import EditorSurface, InMemoryEditor, Unregister
from cleanstate.overlay.channel import Annotation, AnnotationChannel
from cleanstate.persistence.controller import PersistenceController
from cleanstate.persistence.scheduler import Scheduler
from cleanstate.storage.base import KeyValueStore
from cleanstate.storage.file import FileStore

logger = logging.getLogger(__name__)

STORAGE_CLEAR_FAILED_MESSAGE = "Storage could not be cleared."


class RenderOverlay(Protocol):
    """Render hook of the annotation UI."""

    def __call__(self, *, tree: Root, annotations: list[Annotation]) -> Any:
        """Paint ``annotations`` over the rendered ``tree``."""
        ...


class EditorSession:
    """Wire an editing surface to persistence and the annotation overlay.

    Parameters
    ----------
    editor : EditorSurface
        The editing surface
    controller : PersistenceController
        Controller owning the persisted slot
    channel : AnnotationChannel or None, default = None
        Overlay channel; a new one is created when None
    render_overlay : callable or None, default = None
        Hook called as ``render_overlay(tree=..., annotations=...)``
    initial_content : callable, default = prepopulated_document
        Produces the document used when nothing is persisted

    """

    def __init__(
        self,
        editor: EditorSurface,
        controller: PersistenceController,
        channel: Optional[AnnotationChannel] = None,
        render_overlay: Optional[RenderOverlay] = None,
        initial_content: Callable[[], Root] = prepopulated_document,
    ) -> None:
        """Initialize the session without touching storage."""
        self.editor = editor
        self.controller = controller
        self.channel = channel if channel is not None else AnnotationChannel()
        self.render_overlay = render_overlay
        self.initial_content = initial_content
        self._unregister: Optional[Unregister] = None
        self._started = False

    @property
    def started(self) -> bool:
        """True between :meth:`start` and :meth:`close`."""
        return self._started

    def start(self) -> bool:
        """Load the persisted document and start listening.

        Returns
        -------
        bool
            True if a persisted document (or its fallback) was loaded, False
            if the initial content was applied

        """
        if self._started:
            raise RuntimeError("Session already started")

        loaded = self.controller.load()
        if loaded is not None:
            self.editor.set_snapshot(loaded, tag=HISTORY_MERGE_TAG)
        else:
            self.editor.set_snapshot(self.initial_content(), tag=HISTORY_MERGE_TAG)
            logger.debug("Applied initial content")

        self._unregister = self.editor.register_update_listener(self.controller.on_change)
        self.channel.subscribe(COMMENT_ANNOTATIONS_KEY, self._on_annotations)
        self._started = True
        logger.info("Editor session started")
        return loaded is not None

    def _on_annotations(self, annotations: list[Annotation]) -> None:
        logger.debug(f"Received {len(annotations)} annotation(s)")
        if self.render_overlay is not None:
            self.render_overlay(tree=self.editor.get_snapshot(), annotations=annotations)

    def add_comment(self, annotation_id: str, block_index: int = 0, start: int = 0, end: Optional[int] = None) -> None:
        """Delegate the "add comment" action to the editing surface."""
        self.editor.add_comment(annotation_id, block_index=block_index, start=start, end=end)

    def clear_storage(self) -> str:
        """Clear the persisted slot and return the confirmation message."""
        if self.controller.clear():
            return STORAGE_CLEARED_MESSAGE
        return STORAGE_CLEAR_FAILED_MESSAGE

    def close(self) -> None:
        """Stop listening and write any pending change."""
        if self._unregister is not None:
            self._unregister()
            self._unregister = None
        self.channel.unsubscribe(COMMENT_ANNOTATIONS_KEY)
        self.controller.flush()
        self._started = False

    def __enter__(self) -> EditorSession:
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def create_session(
    config: SessionConfig,
    store: Optional[KeyValueStore] = None,
    scheduler: Optional[Scheduler] = None,
    editor: Optional[EditorSurface] = None,
    channel: Optional[AnnotationChannel] = None,
    render_overlay: Optional[RenderOverlay] = None,
) -> EditorSession:
    """Build a session from configuration.

    Parameters
    ----------
    config : SessionConfig
        Session settings
    store : KeyValueStore or None, default = None
        Store to use; a FileStore under ``config.storage_dir`` when None
    scheduler : Scheduler or None, default = None
        Debounce scheduler. When None, an AsyncioScheduler bound to the running
        event loop; outside a loop this raises ValidationError
    editor : EditorSurface or None, default = None
        Editing surface; an InMemoryEditor when None
    channel : AnnotationChannel or None, default = None
        Overlay channel shared with the annotation UI
    render_overlay : callable or None, default = None
        Overlay render hook

    """
    controller = PersistenceController.from_config(
        config,
        store if store is not None else FileStore(config.storage_dir),
        scheduler=scheduler,
    )
    return EditorSession(
        editor if editor is not None else InMemoryEditor(),
        controller,
        channel=channel,
        render_overlay=render_overlay,
    )


__all__ = ["EditorSession", "RenderOverlay", "create_session", "STORAGE_CLEAR_FAILED_MESSAGE"]
