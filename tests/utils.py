"""Test utilities for the cleanstate test suite.

This module provides document builders, tree inspection helpers and the
Hypothesis strategies used by the property-based tests.
"""

from hypothesis import strategies as st

from cleanstate.ast import (
    CommentWrapper,
    ElementNode,
    Heading,
    LineBreak,
    Node,
    Paragraph,
    Quote,
    Root,
    Text,
    collect_leaves,
    is_format_equal,
)
from cleanstate.constants import HEADING_TAGS, TextFormat


def commented_document() -> Root:
    """Build a document with nested, adjacent and empty comment wrappers.

    Its canonical form is ``Heading["Title"]`` followed by
    ``Paragraph["abcd", LineBreak]``.
    """
    return Root(
        children=[
            Heading(tag="h2", children=[Text(text="Title")]),
            Paragraph(
                children=[
                    Text(text="a"),
                    CommentWrapper(
                        annotation_id="a1",
                        children=[
                            Text(text="b"),
                            CommentWrapper(annotation_id="a2", children=[Text(text="c")]),
                        ],
                    ),
                    Text(text="d"),
                    LineBreak(),
                    CommentWrapper(annotation_id="a3"),
                ]
            ),
        ]
    )


def bold(text: str) -> Text:
    """Create a bold text leaf."""
    return Text(text=text, format=int(TextFormat.BOLD))


def char_formats(node: Node) -> list[tuple]:
    """Expand the leaves under ``node`` to one entry per character.

    Line breaks contribute a single marker entry. Two trees with the same
    expansion render the same characters with the same formatting.
    """
    result: list[tuple] = []
    for leaf in collect_leaves(node):
        if isinstance(leaf, Text):
            result.extend((ch, leaf.format, leaf.style, leaf.mode, leaf.detail) for ch in leaf.text)
        else:
            result.append(("<br>",))
    return result


def has_mergeable_siblings(node: Node) -> bool:
    """Return True if any sibling sequence holds two adjacent format-equal text leaves."""
    if not isinstance(node, ElementNode):
        return False
    for left, right in zip(node.children, node.children[1:]):
        if isinstance(left, Text) and isinstance(right, Text) and is_format_equal(left, right):
            return True
    return any(has_mergeable_siblings(child) for child in node.children)


# ============================================================================
# Hypothesis strategies
# ============================================================================

_text_payloads = st.text(alphabet=st.characters(exclude_categories=("Cs",)), max_size=6)

text_leaves = st.builds(
    Text,
    text=_text_payloads,
    format=st.sampled_from([0, int(TextFormat.BOLD), int(TextFormat.ITALIC), int(TextFormat.BOLD | TextFormat.CODE)]),
    style=st.sampled_from(["", "color: red"]),
)

leaves = st.one_of(text_leaves, text_leaves, st.builds(LineBreak))


def _elements(children: st.SearchStrategy) -> st.SearchStrategy:
    child_lists = st.lists(children, max_size=4)
    return st.one_of(
        st.builds(Paragraph, children=child_lists),
        st.builds(Quote, children=child_lists),
        st.builds(Heading, children=child_lists, tag=st.sampled_from(HEADING_TAGS)),
        st.builds(
            CommentWrapper,
            children=child_lists,
            annotation_id=st.one_of(st.none(), st.text(alphabet="abc123", min_size=1, max_size=4)),
        ),
    )


nodes = st.recursive(leaves, _elements, max_leaves=24)

documents = st.builds(Root, children=st.lists(nodes, max_size=4))
