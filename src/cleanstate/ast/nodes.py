#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/ast/nodes.py
"""Node classes for rich-text document trees.

This module defines the node hierarchy used to represent the document held by
the editing surface. Every node is a dataclass and supports the visitor
pattern, so the rewriting passes dispatch on an explicit node kind instead of
inspecting attributes.

Node Hierarchy
--------------
All nodes inherit from the abstract Node class.

Element nodes own an ordered list of children:
    - Root, Paragraph, Heading, Quote
    - CommentWrapper (marks a commented range, carries no content of its own)

Leaf nodes have no children:
    - Text (string payload plus formatting attributes)
    - LineBreak

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Optional

from cleanstate.constants import NODE_VERSION, TextFormat


class Node(ABC):
    """Base class for all document nodes.

    Subclasses declare ``node_type``, the discriminant written to the
    serialized form, and implement :meth:`accept`.

    """

    node_type: ClassVar[str]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Element Nodes
# ============================================================================


@dataclass
class ElementNode(Node):
    """Common base for nodes that own an ordered list of children.

    Parameters
    ----------
    children : list of Node, default = empty list
        Child nodes in document order
    direction : str or None, default = "ltr"
        Text direction of the block, ``None`` when undetermined
    format : str, default = ""
        Block alignment (``"left"``, ``"center"``, ...), empty for default
    indent : int, default = 0
        Indentation level
    version : int, default = 1
        Node schema version as reported by the editing surface

    """

    children: list[Node] = field(default_factory=list)
    direction: Optional[str] = "ltr"
    format: str = ""
    indent: int = 0
    version: int = NODE_VERSION


@dataclass
class Root(ElementNode):
    """Root node of a document.

    Examples
    --------
    >>> doc = Root(children=[Paragraph(children=[Text(text="Hello")])])
    >>> len(doc.children)
    1

    """

    node_type: ClassVar[str] = "root"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_root``."""
        return visitor.visit_root(self)


@dataclass
class Paragraph(ElementNode):
    """Paragraph node containing inline content.

    Parameters
    ----------
    text_format : int, default = 0
        Format bitmask applied to text typed at the end of the paragraph
    text_style : str, default = ""
        Inline style applied to text typed at the end of the paragraph

    """

    node_type: ClassVar[str] = "paragraph"

    text_format: int = 0
    text_style: str = ""

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_paragraph``."""
        return visitor.visit_paragraph(self)


@dataclass
class Heading(ElementNode):
    """Heading node.

    Parameters
    ----------
    tag : str, default = "h1"
        Heading tag, one of ``h1`` through ``h6``

    """

    node_type: ClassVar[str] = "heading"

    tag: str = "h1"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_heading``."""
        return visitor.visit_heading(self)

    @property
    def level(self) -> int:
        """Numeric heading level derived from the tag."""
        return int(self.tag[1:])


@dataclass
class Quote(ElementNode):
    """Block quote node."""

    node_type: ClassVar[str] = "quote"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_quote``."""
        return visitor.visit_quote(self)


@dataclass
class CommentWrapper(ElementNode):
    """Wrapper marking a range of content as commented.

    The wrapper exists only for the annotation layer. Its children are the
    commented content; it has no content of its own and never appears in the
    canonical (persisted) form of a document.

    Parameters
    ----------
    annotation_id : str or None, default = None
        Identifier of the annotation this wrapper belongs to

    Examples
    --------
    >>> wrapper = CommentWrapper(children=[Text(text="note this")], annotation_id="a1")
    >>> wrapper.children[0].text
    'note this'

    """

    node_type: ClassVar[str] = "comment"

    annotation_id: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_comment_wrapper``."""
        return visitor.visit_comment_wrapper(self)


# ============================================================================
# Leaf Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Text leaf.

    Parameters
    ----------
    text : str
        Text payload
    format : int, default = 0
        Bitmask of :class:`~cleanstate.constants.TextFormat` flags
    style : str, default = ""
        Inline CSS style string
    mode : str, default = "normal"
        Editing mode (``"normal"``, ``"token"`` or ``"segmented"``)
    detail : int, default = 0
        Detail flags (directionless, unmergeable)
    version : int, default = 1
        Node schema version

    """

    node_type: ClassVar[str] = "text"

    text: str
    format: int = 0
    style: str = ""
    mode: str = "normal"
    detail: int = 0
    version: int = NODE_VERSION

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_text``."""
        return visitor.visit_text(self)

    def has_format(self, flag: TextFormat | int) -> bool:
        """Return True if every bit of ``flag`` is set on this leaf."""
        return (self.format & int(flag)) == int(flag)

    def toggle_format(self, flag: TextFormat | int) -> Text:
        """Return a copy of this leaf with ``flag`` toggled.

        Examples
        --------
        >>> Text(text="x").toggle_format(TextFormat.BOLD).format
        1

        """
        return replace(self, format=self.format ^ int(flag))


@dataclass
class LineBreak(Node):
    """Line break leaf inside a block."""

    node_type: ClassVar[str] = "linebreak"

    version: int = NODE_VERSION

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_line_break``."""
        return visitor.visit_line_break(self)


ELEMENT_TYPES: tuple[type[ElementNode], ...] = (Root, Paragraph, Heading, Quote, CommentWrapper)
LEAF_TYPES: tuple[type[Node], ...] = (Text, LineBreak)


def is_format_equal(left: Text, right: Text) -> bool:
    """Check whether two text leaves share identical formatting.

    Two leaves are format-equal when their format bitmask, style, mode and
    detail all compare equal. The text payload and version are ignored.

    Parameters
    ----------
    left : Text
        First leaf
    right : Text
        Second leaf

    Returns
    -------
    bool
        True if the leaves can be merged into one run

    """
    return (
        left.format == right.format
        and left.style == right.style
        and left.mode == right.mode
        and left.detail == right.detail
    )


def get_node_children(node: Node) -> list[Node]:
    """Get the child nodes of a node.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        A new list of child nodes (empty for leaves)

    """
    if isinstance(node, ElementNode):
        return list(node.children)
    return []


def replace_node_children(node: Node, new_children: list[Node]) -> Node:
    """Create a copy of an element with replaced children.

    Parameters
    ----------
    node : Node
        The node to copy and modify
    new_children : list of Node
        New children to use in the copy

    Returns
    -------
    Node
        New node with replaced children

    Raises
    ------
    ValueError
        If ``node`` is a leaf and ``new_children`` is not empty

    """
    if isinstance(node, ElementNode):
        return replace(node, children=list(new_children))
    if new_children:
        raise ValueError(f"{type(node).__name__} is a leaf node and cannot hold children")
    return node


__all__ = [
    "Node",
    "ElementNode",
    "Root",
    "Paragraph",
    "Heading",
    "Quote",
    "CommentWrapper",
    "Text",
    "LineBreak",
    "ELEMENT_TYPES",
    "LEAF_TYPES",
    "is_format_equal",
    "get_node_children",
    "replace_node_children",
]
