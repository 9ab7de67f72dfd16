#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/transforms/normalize.py
"""Text-run normalization pass.

Merges maximal runs of adjacent, format-equal :class:`~cleanstate.ast.nodes.Text`
siblings into a single leaf, inside every sibling sequence of a tree. Payloads
are concatenated in document order; the merged leaf takes its attributes from
the first leaf of the run. Merging never crosses an element boundary.

The pass is idempotent: normalizing a normalized tree returns an equal tree.

Examples
--------
    >>> para = Paragraph(children=[
    ...     Text(text="foo", format=TextFormat.BOLD),
    ...     Text(text="bar", format=TextFormat.BOLD),
    ...     Text(text="baz", format=TextFormat.ITALIC),
    ... ])
    >>> [leaf.text for leaf in normalize_text_runs(para).children]
    ['foobar', 'baz']

"""

from __future__ import annotations

import logging
from dataclasses import replace

from cleanstate.ast.nodes import Node, Root, Text, is_format_equal
from cleanstate.ast.transforms import NodeTransformer, transform_nodes

logger = logging.getLogger(__name__)


class TextRunNormalizer(NodeTransformer):
    """Transformer that merges adjacent format-equal text leaves.

    Children are normalized before their sibling sequence is scanned, so
    every depth is handled in a single traversal.

    Attributes
    ----------
    merged : int
        Number of leaves folded into a preceding leaf so far

    """

    def __init__(self) -> None:
        """Initialize the normalizer with a zero merge count."""
        self.merged = 0

    def _transform_children(self, children: list[Node]) -> list[Node]:
        return self.merge_text_runs(super()._transform_children(children))

    def merge_text_runs(self, nodes: list[Node]) -> list[Node]:
        """Merge adjacent format-equal text leaves within one sibling sequence.

        Parameters
        ----------
        nodes : list of Node
            Sibling nodes in document order

        Returns
        -------
        list of Node
            New sequence with every maximal run collapsed into one leaf

        """
        if len(nodes) <= 1:
            return list(nodes)

        result: list[Node] = []
        run_head: Text | None = None
        run_parts: list[str] = []

        def flush() -> None:
            if run_head is None:
                return
            if len(run_parts) == 1:
                result.append(run_head)
            else:
                result.append(replace(run_head, text="".join(run_parts)))

        for node in nodes:
            if isinstance(node, Text):
                if run_head is not None and is_format_equal(run_head, node):
                    run_parts.append(node.text)
                    self.merged += 1
                    continue
                flush()
                run_head = node
                run_parts = [node.text]
            else:
                flush()
                run_head = None
                run_parts = []
                result.append(node)

        flush()
        return result


def normalize_text_runs(node: Node) -> Node:
    """Merge adjacent format-equal text leaves throughout a tree.

    Parameters
    ----------
    node : Node
        Root of the subtree to normalize

    Returns
    -------
    Node
        New, normalized subtree; ``node`` is left untouched

    """
    return TextRunNormalizer().transform(node)  # type: ignore[return-value]


def normalize_sequence(nodes: list[Node]) -> list[Node]:
    """Normalize a top-level sequence of sibling nodes."""
    normalizer = TextRunNormalizer()
    return normalizer.merge_text_runs(normalizer.transform_sequence(nodes))


def normalize_document(root: Root) -> Root:
    """Normalize a document, logging how many leaves were merged."""
    normalizer = TextRunNormalizer()
    result = transform_nodes(root, normalizer)
    if normalizer.merged:
        logger.debug(f"Merged {normalizer.merged} text leaf/leaves into preceding runs")
    return result


__all__ = ["TextRunNormalizer", "normalize_text_runs", "normalize_sequence", "normalize_document"]
