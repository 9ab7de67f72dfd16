#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/overlay/source.py
"""In-process annotation source.

:class:`AnnotationFeed` stands in for the external annotation service: it
holds the current annotation list and pushes the full list to its listeners
every time it is replaced. It satisfies
:class:`~cleanstate.overlay.channel.AnnotationSource`.
"""

from __future__ import annotations

import copy
from typing import Callable, Optional

from cleanstate.overlay.channel import Annotation

FeedListener = Callable[[Optional[list[Annotation]]], None]


class AnnotationFeed:
    """Hold the current annotation list and notify listeners on change.

    Parameters
    ----------
    annotations : list of dict or None, default = None
        Initial list; None means the service has not delivered data yet

    """

    def __init__(self, annotations: Optional[list[Annotation]] = None) -> None:
        """Initialize the feed."""
        self._annotations = copy.deepcopy(annotations)
        self._listeners: list[FeedListener] = []

    @property
    def annotations(self) -> Optional[list[Annotation]]:
        """A copy of the current list."""
        return copy.deepcopy(self._annotations)

    def subscribe(self, callback: FeedListener) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it.

        The current list is delivered immediately when one is available,
        the way a service subscription reports its current value.
        """
        self._listeners.append(callback)
        if self._annotations is not None:
            callback(copy.deepcopy(self._annotations))

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def set_annotations(self, annotations: Optional[list[Annotation]]) -> None:
        """Replace the list and push it to every listener."""
        self._annotations = copy.deepcopy(annotations)
        for listener in list(self._listeners):
            listener(copy.deepcopy(self._annotations))

    def add_annotation(self, annotation: Annotation) -> None:
        """Append one annotation and push the full list."""
        current = self._annotations or []
        self.set_annotations([*current, annotation])


__all__ = ["AnnotationFeed"]
