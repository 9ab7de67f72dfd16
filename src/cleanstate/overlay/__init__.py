#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/overlay/__init__.py
"""Annotation overlay delivery, kept apart from the persisted document."""

from cleanstate.overlay.channel import Annotation, AnnotationCallback, AnnotationChannel, AnnotationSource
from cleanstate.overlay.source import AnnotationFeed

__all__ = ["Annotation", "AnnotationCallback", "AnnotationChannel", "AnnotationSource", "AnnotationFeed"]
