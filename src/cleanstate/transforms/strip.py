#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/transforms/strip.py
"""Comment-wrapper stripping pass.

Removes every :class:`~cleanstate.ast.nodes.CommentWrapper` from a tree and
splices the wrapper's (recursively stripped) children into the parent's child
sequence at the wrapper's position. A wrapper with no children contributes
nothing. All other nodes are kept, in the same order.

The pass works on sibling sequences rather than single nodes, because one
wrapper expands into zero, one or many siblings.

Examples
--------
    >>> para = Paragraph(children=[
    ...     Text(text="a"),
    ...     CommentWrapper(children=[Text(text="b"), Text(text="c")]),
    ... ])
    >>> [leaf.text for leaf in strip_comments(para).children]
    ['a', 'b', 'c']

"""

from __future__ import annotations

import logging

from cleanstate.ast.nodes import CommentWrapper, Node, Root
from cleanstate.ast.transforms import NodeTransformer, transform_nodes

logger = logging.getLogger(__name__)


class CommentStripper(NodeTransformer):
    """Transformer that dissolves comment wrappers into their children.

    Attributes
    ----------
    removed : int
        Number of wrappers removed since the stripper was created

    """

    def __init__(self) -> None:
        """Initialize the stripper with a zero removal count."""
        self.removed = 0

    def visit_comment_wrapper(self, node: CommentWrapper) -> list[Node]:
        self.removed += 1
        return self._transform_children(node.children)


def strip_comments(node: Node) -> Node | list[Node]:
    """Remove all comment wrappers from a tree.

    Parameters
    ----------
    node : Node
        Root of the subtree to strip

    Returns
    -------
    Node or list of Node
        The stripped node. If ``node`` is itself a wrapper, the list of nodes
        it expands to (possibly empty).

    """
    return CommentStripper().transform(node)  # type: ignore[return-value]


def strip_comment_sequence(nodes: list[Node]) -> list[Node]:
    """Remove all comment wrappers from a sequence of sibling nodes."""
    return CommentStripper().transform_sequence(nodes)


def strip_document(root: Root) -> Root:
    """Remove all comment wrappers from a document.

    Parameters
    ----------
    root : Root
        Document to strip

    Returns
    -------
    Root
        New document without wrappers; ``root`` is left untouched

    """
    stripper = CommentStripper()
    result = transform_nodes(root, stripper)
    if stripper.removed:
        logger.debug(f"Removed {stripper.removed} comment wrapper(s)")
    return result


__all__ = ["CommentStripper", "strip_comments", "strip_comment_sequence", "strip_document"]
