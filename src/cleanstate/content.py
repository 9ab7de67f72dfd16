#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/content.py
"""Built-in document content.

- :func:`prepopulated_document` is the initial content shown when nothing has
  been persisted yet.
- :func:`fallback_document` replaces a persisted document that could not be
  parsed.
"""

from __future__ import annotations

from cleanstate.ast.nodes import Paragraph, Root, Text
from cleanstate.constants import TextFormat

_INTRO = (
    "Lexical is comprised of editor instances that each attach to a single content editable element. "
)
_STATES = "A set of editor states represent the current and pending states of the editor at any given time. "
_OUTRO = (
    "Lexical is comprised of editor instances that each attach to a single content editable element. "
    "A set of editor states represent the current and pending states of the editor at any given time."
)


def prepopulated_document() -> Root:
    """Return the initial document: one paragraph of plain, bold and plain text."""
    return Root(
        children=[
            Paragraph(
                children=[
                    Text(text=_INTRO),
                    Text(text=_STATES).toggle_format(TextFormat.BOLD),
                    Text(text=_OUTRO),
                ]
            )
        ]
    )


def fallback_document() -> Root:
    """Return a document holding a single empty paragraph."""
    return Root(children=[Paragraph()])


__all__ = ["prepopulated_document", "fallback_document"]
