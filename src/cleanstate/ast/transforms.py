#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/ast/transforms.py
"""Tree transformation utilities.

This module provides the :class:`NodeTransformer` base class used by the
rewriting passes, together with a few helpers for cloning and applying
transformers.

A transformer's ``visit_*`` methods return one of three things:

- a single :class:`Node`, which replaces the visited node,
- a ``list`` of nodes, which is spliced into the parent's child sequence at
  the visited node's position (possibly empty),
- ``None``, which removes the node.

Transformers never mutate their input. Element nodes are rebuilt with
``dataclasses.replace`` and leaves are copied, so the output shares no
mutable state with the tree it was computed from.

Examples
--------
Uppercase every text leaf:

    >>> class Upper(NodeTransformer):
    ...     def visit_text(self, node):
    ...         return replace(node, text=node.text.upper())
    >>> new_root = transform_nodes(root, Upper())

"""

from __future__ import annotations

import copy
from typing import Union

from cleanstate.ast.nodes import (
    CommentWrapper,
    ElementNode,
    Heading,
    LineBreak,
    Node,
    Paragraph,
    Quote,
    Root,
    Text,
    replace_node_children,
)
from cleanstate.ast.visitors import NodeVisitor
from cleanstate.exceptions import TransformError

TransformResult = Union[Node, list[Node], None]


class NodeTransformer(NodeVisitor):
    """Base class for transforming document trees.

    The default behaviour of every ``visit_*`` method is an identity copy:
    elements are rebuilt with transformed children, leaves are copied.

    """

    def transform(self, node: Node) -> TransformResult:
        """Transform a node.

        Parameters
        ----------
        node : Node
            Node to transform

        Returns
        -------
        Node, list of Node, or None
            Replacement node, spliced replacement sequence, or None to remove

        Raises
        ------
        TransformError
            If ``node`` is not a Node instance

        """
        if not isinstance(node, Node):
            raise TransformError(
                f"Expected a Node, got {type(node).__name__}",
                transform_name=type(self).__name__,
            )
        return node.accept(self)

    def transform_sequence(self, nodes: list[Node]) -> list[Node]:
        """Transform a sibling sequence, flattening spliced results.

        Parameters
        ----------
        nodes : list of Node
            Sibling nodes in document order

        Returns
        -------
        list of Node
            Transformed siblings; removed nodes are dropped and list results
            are concatenated in place

        """
        result: list[Node] = []
        for child in nodes:
            transformed = self.transform(child)
            if transformed is None:
                continue
            if isinstance(transformed, list):
                result.extend(transformed)
            else:
                result.append(transformed)
        return result

    def _transform_children(self, children: list[Node]) -> list[Node]:
        return self.transform_sequence(children)

    def _generic_transform(self, node: Node) -> Node:
        """Rebuild an element with transformed children, or copy a leaf."""
        if isinstance(node, ElementNode):
            return replace_node_children(node, self._transform_children(node.children))
        return copy.copy(node)

    def visit_root(self, node: Root) -> TransformResult:
        """Transform a Root node."""
        return self._generic_transform(node)

    def visit_paragraph(self, node: Paragraph) -> TransformResult:
        """Transform a Paragraph node."""
        return self._generic_transform(node)

    def visit_heading(self, node: Heading) -> TransformResult:
        """Transform a Heading node."""
        return self._generic_transform(node)

    def visit_quote(self, node: Quote) -> TransformResult:
        """Transform a Quote node."""
        return self._generic_transform(node)

    def visit_comment_wrapper(self, node: CommentWrapper) -> TransformResult:
        """Transform a CommentWrapper node."""
        return self._generic_transform(node)

    def visit_text(self, node: Text) -> TransformResult:
        """Transform a Text leaf."""
        return self._generic_transform(node)

    def visit_line_break(self, node: LineBreak) -> TransformResult:
        """Transform a LineBreak leaf."""
        return self._generic_transform(node)


def clone_node(node: Node) -> Node:
    """Create a deep copy of a node.

    Examples
    --------
    >>> cloned = clone_node(root)
    >>> cloned is root
    False
    >>> cloned == root
    True

    """
    return copy.deepcopy(node)


def transform_nodes(root: Root, transformer: NodeTransformer) -> Root:
    """Apply a transformer to a document root.

    Parameters
    ----------
    root : Root
        Document to transform
    transformer : NodeTransformer
        Transformer to apply

    Returns
    -------
    Root
        Transformed document

    Raises
    ------
    TransformError
        If the transformer does not return a single Root

    """
    result = transformer.transform(root)
    if not isinstance(result, Root):
        raise TransformError(
            f"Transformer must return a Root for a document, got {type(result).__name__}",
            transform_name=type(transformer).__name__,
        )
    return result


__all__ = ["NodeTransformer", "TransformResult", "clone_node", "transform_nodes"]
