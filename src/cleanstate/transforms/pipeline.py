#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/transforms/pipeline.py
"""Canonicalization pipeline.

Produces the canonical form of a document: the wrapper-free, merge-maximal
tree that is persisted. The pipeline runs, in this fixed order:

1. :class:`~cleanstate.transforms.strip.CommentStripper`
2. :class:`~cleanstate.transforms.normalize.TextRunNormalizer`

Stripping must come first. Removing a wrapper can put two format-equal text
leaves next to each other that were separated before, and only a
normalization pass that runs afterwards can merge them.

Examples
--------
    >>> canonical = canonicalize(editor.get_snapshot())
    >>> json_str = canonical_json(editor.get_snapshot())

"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cleanstate.ast.nodes import CommentWrapper, Node, Root
from cleanstate.ast.serialization import ast_to_json
from cleanstate.ast.transforms import transform_nodes
from cleanstate.ast.visitors import count_nodes
from cleanstate.exceptions import TransformError
from cleanstate.transforms.normalize import TextRunNormalizer
from cleanstate.transforms.strip import CommentStripper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CanonicalizationStats:
    """Counters from one pipeline run.

    Parameters
    ----------
    wrappers_removed : int
        Comment wrappers dissolved by the stripping pass
    leaves_merged : int
        Text leaves folded into a preceding run by the normalization pass

    """

    wrappers_removed: int = 0
    leaves_merged: int = 0


class CanonicalizationPipeline:
    """Compose the stripping and normalization passes in their fixed order.

    Parameters
    ----------
    indent : int or None, default = None
        Indentation used by :meth:`to_json`; compact output when None
    verify : bool, default = False
        When True, raise TransformError if the output still holds wrapper
        nodes. Intended for tests and debugging.

    Attributes
    ----------
    last_stats : CanonicalizationStats
        Counters from the most recent run

    """

    def __init__(self, indent: int | None = None, verify: bool = False) -> None:
        """Initialize the pipeline."""
        self.indent = indent
        self.verify = verify
        self.last_stats = CanonicalizationStats()

    def canonicalize(self, root: Root) -> Root:
        """Return the canonical form of a document.

        Parameters
        ----------
        root : Root
            Document snapshot; not modified

        Returns
        -------
        Root
            Wrapper-free document with maximally merged text runs

        Raises
        ------
        TransformError
            If the input is not a well-formed document tree

        """
        if not isinstance(root, Root):
            raise TransformError(
                f"Canonicalization expects a Root, got {type(root).__name__}", transform_name="canonicalize"
            )

        stripper = CommentStripper()
        normalizer = TextRunNormalizer()
        stripped = transform_nodes(root, stripper)
        canonical = transform_nodes(stripped, normalizer)

        self.last_stats = CanonicalizationStats(
            wrappers_removed=stripper.removed,
            leaves_merged=normalizer.merged,
        )
        logger.debug(
            f"Canonicalized document: removed {stripper.removed} wrapper(s), merged {normalizer.merged} leaf/leaves"
        )

        if self.verify:
            remaining = count_nodes(canonical, CommentWrapper)
            if remaining:
                raise TransformError(
                    f"{remaining} comment wrapper(s) survived stripping", transform_name="canonicalize"
                )

        return canonical

    def canonicalize_sequence(self, nodes: list[Node]) -> list[Node]:
        """Canonicalize a top-level sequence of sibling nodes."""
        stripper = CommentStripper()
        normalizer = TextRunNormalizer()
        stripped = stripper.transform_sequence(nodes)
        canonical = normalizer.merge_text_runs(normalizer.transform_sequence(stripped))
        self.last_stats = CanonicalizationStats(stripper.removed, normalizer.merged)
        return canonical

    def to_json(self, root: Root) -> str:
        """Canonicalize a document and serialize it for storage."""
        return ast_to_json(self.canonicalize(root), indent=self.indent)


_default_pipeline = CanonicalizationPipeline()


def canonicalize(root: Root) -> Root:
    """Return the canonical form of ``root`` using the default pipeline."""
    return _default_pipeline.canonicalize(root)


def canonical_json(root: Root, indent: int | None = None) -> str:
    """Return the canonical JSON serialization of ``root``."""
    return ast_to_json(canonicalize(root), indent=indent)


__all__ = ["CanonicalizationPipeline", "CanonicalizationStats", "canonicalize", "canonical_json"]
