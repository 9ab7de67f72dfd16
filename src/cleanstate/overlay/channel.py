#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/overlay/channel.py
"""Publish/subscribe channel for the annotation overlay.

The annotation service maintains the list of comment annotations outside the
document. Whenever that list changes, the channel pushes a full copy of it to
every registered consumer, typically the comment UI that repaints overlays on
the rendered tree. The channel is independent of persistence: annotations are
never written with the document.

Examples
--------
    >>> channel = AnnotationChannel()
    >>> channel.subscribe("commentAnnotations", lambda annotations: print(len(annotations)))
    >>> channel.publish([{"annotationId": "a1"}])
    1

Notes
-----
- Callbacks run synchronously, in registration order.
- Each callback receives its own deep copy of the list.
- A callback that raises is logged and skipped; the others still run.
- Subscribing does not replay the last published list.
- The channel is not thread-safe; use it from the session's event loop.

"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Optional, Protocol

from cleanstate.exceptions import SubscriberError

logger = logging.getLogger(__name__)

Annotation = dict[str, Any]
AnnotationCallback = Callable[[list[Annotation]], None]


class AnnotationSource(Protocol):
    """Anything that pushes the full annotation list on every change.

    ``subscribe`` may deliver ``None`` when the source has no data yet.
    """

    def subscribe(self, callback: Callable[[Optional[list[Annotation]]], None]) -> Any:
        """Register ``callback`` for annotation list updates."""
        ...


class AnnotationChannel:
    """Registry of named annotation subscribers.

    Created once per editing session and passed to collaborators by
    reference.

    """

    def __init__(self) -> None:
        """Initialize an empty channel."""
        self._subscriptions: dict[str, AnnotationCallback] = {}

    @property
    def subscribers(self) -> list[str]:
        """Registered keys in delivery order."""
        return list(self._subscriptions)

    def subscribe(self, key: str, callback: AnnotationCallback) -> None:
        """Register ``callback`` under ``key``.

        A callback already registered under ``key`` is replaced; the key keeps
        its original position in the delivery order.

        Parameters
        ----------
        key : str
            Subscriber name
        callback : callable
            Function receiving the annotation list

        """
        if key in self._subscriptions:
            logger.debug(f"Replacing annotation subscriber '{key}'")
        self._subscriptions[key] = callback

    def unsubscribe(self, key: str) -> bool:
        """Remove the subscriber registered under ``key``.

        Returns
        -------
        bool
            True if a subscriber was removed, False if none was registered

        """
        return self._subscriptions.pop(key, None) is not None

    def publish(self, annotations: Optional[list[Annotation]]) -> int:
        """Deliver ``annotations`` to every subscriber.

        Parameters
        ----------
        annotations : list of dict or None
            Full current annotation list; None is delivered as an empty list

        Returns
        -------
        int
            Number of callbacks that completed without raising

        """
        source = annotations if annotations is not None else []
        delivered = 0

        # Snapshot so callbacks may (un)subscribe during delivery
        for key, callback in list(self._subscriptions.items()):
            try:
                callback(copy.deepcopy(source))
            except Exception as e:
                error = SubscriberError(f"Annotation subscriber '{key}' failed: {e}", subscriber_key=key, original_error=e)
                logger.error(error.message, exc_info=True)
                continue
            delivered += 1

        logger.debug(f"Published {len(source)} annotation(s) to {delivered} subscriber(s)")
        return delivered

    def connect(self, source: AnnotationSource) -> Any:
        """Publish every list delivered by ``source``.

        Returns
        -------
        Any
            Whatever ``source.subscribe`` returns (typically an unsubscribe
            handle)

        """
        return source.subscribe(self.publish)

    def clear(self) -> None:
        """Remove all subscribers."""
        self._subscriptions.clear()

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __contains__(self, key: object) -> bool:
        return key in self._subscriptions


__all__ = ["Annotation", "AnnotationCallback", "AnnotationChannel", "AnnotationSource"]
