#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/constants.py
"""Constants shared across the cleanstate package.

This module collects the defaults used by the persistence layer, the names
of the serialized node types and the text formatting bitmask understood by
the editing surface.
"""

from __future__ import annotations

from enum import IntFlag
from typing import Literal

# =============================================================================
# Persistence defaults
# =============================================================================

DEFAULT_STORAGE_KEY = "lexical-editor-state"
"""Key under which the canonical document is persisted."""

DEFAULT_DEBOUNCE_SECONDS = 1.0
"""Quiet period after the last change before a save runs."""

CORRUPT_BACKUP_SUFFIX = ".corrupt"
"""Suffix of the key that receives an unparseable payload before fallback."""

DEFAULT_STORAGE_DIRNAME = ".cleanstate"

# =============================================================================
# Overlay channel
# =============================================================================

COMMENT_ANNOTATIONS_KEY = "commentAnnotations"
"""Subscriber key used by the session to repaint comment overlays."""

STORAGE_CLEARED_MESSAGE = "Storage cleared!"

# =============================================================================
# Editor tags
# =============================================================================

HISTORY_MERGE_TAG = "history-merge"
"""Update tag telling the editing surface not to record an undo entry."""

# =============================================================================
# Node serialization
# =============================================================================

NODE_VERSION = 1

NodeTypeName = Literal["root", "paragraph", "heading", "quote", "comment", "text", "linebreak"]

TextMode = Literal["normal", "token", "segmented"]
TEXT_MODES: tuple[str, ...] = ("normal", "token", "segmented")

Direction = Literal["ltr", "rtl"]

HEADING_TAGS: tuple[str, ...] = ("h1", "h2", "h3", "h4", "h5", "h6")


class TextFormat(IntFlag):
    """Bitmask of inline text formats.

    Values match the bit layout used by the editing surface so that persisted
    documents stay interchangeable with its own export.
    """

    NONE = 0
    BOLD = 1
    ITALIC = 1 << 1
    STRIKETHROUGH = 1 << 2
    UNDERLINE = 1 << 3
    CODE = 1 << 4
    SUBSCRIPT = 1 << 5
    SUPERSCRIPT = 1 << 6
    HIGHLIGHT = 1 << 7


TEXT_FORMAT_NAMES: dict[str, TextFormat] = {
    "bold": TextFormat.BOLD,
    "italic": TextFormat.ITALIC,
    "strikethrough": TextFormat.STRIKETHROUGH,
    "underline": TextFormat.UNDERLINE,
    "code": TextFormat.CODE,
    "subscript": TextFormat.SUBSCRIPT,
    "superscript": TextFormat.SUPERSCRIPT,
    "highlight": TextFormat.HIGHLIGHT,
}

# =============================================================================
# Configuration discovery
# =============================================================================

CONFIG_FILENAMES: tuple[str, ...] = (
    ".cleanstate.toml",
    ".cleanstate.yaml",
    ".cleanstate.yml",
    ".cleanstate.json",
)

ENV_PREFIX = "CLEANSTATE_"
