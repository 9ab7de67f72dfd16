#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/ast/visitors.py
"""Visitor pattern implementation for document tree traversal.

Visitors separate algorithms (serialization, rewriting passes, collection)
from the node classes themselves. Every node kind has a ``visit_*`` method;
the defaults delegate to :meth:`NodeVisitor.generic_visit`, which raises for
node classes it does not know. Adding a node kind therefore fails loudly in
every visitor that has not been reviewed for it.

"""

from __future__ import annotations

from abc import ABC
from typing import Any, Callable

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
)


class NodeVisitor(ABC):
    """Abstract base class for node visitors.

    Examples
    --------
    Count text leaves:

        >>> class TextCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...     def generic_visit(self, node):
        ...         if isinstance(node, Text):
        ...             self.count += 1
        ...         for child in getattr(node, "children", []):
        ...             child.accept(self)

    """

    def visit_root(self, node: Root) -> Any:
        """Visit a Root node."""
        return self.generic_visit(node)

    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""
        return self.generic_visit(node)

    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""
        return self.generic_visit(node)

    def visit_quote(self, node: Quote) -> Any:
        """Visit a Quote node."""
        return self.generic_visit(node)

    def visit_comment_wrapper(self, node: CommentWrapper) -> Any:
        """Visit a CommentWrapper node."""
        return self.generic_visit(node)

    def visit_text(self, node: Text) -> Any:
        """Visit a Text leaf."""
        return self.generic_visit(node)

    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak leaf."""
        return self.generic_visit(node)

    def generic_visit(self, node: Node) -> Any:
        """Fallback for node kinds without a dedicated handler.

        Parameters
        ----------
        node : Node
            Node being visited

        Raises
        ------
        NotImplementedError
            Always; subclasses override this or the specific visit_* methods

        """
        raise NotImplementedError(f"{type(self).__name__} has no handler for {type(node).__name__}")


class NodeCollector(NodeVisitor):
    """Collect nodes in document order (pre-order, left to right).

    Parameters
    ----------
    predicate : callable or None, default = None
        Function deciding whether a node is collected; all nodes when None

    Examples
    --------
    >>> collector = NodeCollector(lambda n: isinstance(n, Text))
    >>> doc.accept(collector)
    >>> [leaf.text for leaf in collector.collected]

    """

    def __init__(self, predicate: Callable[[Node], bool] | None = None):
        """Initialize the collector with an optional predicate."""
        self.predicate = predicate or (lambda n: True)
        self.collected: list[Node] = []

    def generic_visit(self, node: Node) -> None:
        if self.predicate(node):
            self.collected.append(node)
        if isinstance(node, ElementNode):
            for child in node.children:
                child.accept(self)


def collect_leaves(node: Node) -> list[Node]:
    """Return the leaves under ``node`` in in-order sequence.

    Parameters
    ----------
    node : Node
        Subtree to traverse

    Returns
    -------
    list of Node
        Text and LineBreak leaves in document order

    """
    collector = NodeCollector(lambda n: isinstance(n, (Text, LineBreak)))
    node.accept(collector)
    return collector.collected


def count_nodes(node: Node, node_class: type[Node]) -> int:
    """Count nodes of ``node_class`` in a subtree, including ``node`` itself."""
    collector = NodeCollector(lambda n: isinstance(n, node_class))
    node.accept(collector)
    return len(collector.collected)


__all__ = ["NodeVisitor", "NodeCollector", "collect_leaves", "count_nodes"]
