#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/transforms/__init__.py
"""Tree rewriting passes and the canonicalization pipeline.

- strip: removes comment wrappers, splicing their children in place
- normalize: merges adjacent format-equal text leaves
- pipeline: strip then normalize, producing the persisted canonical form

"""

from cleanstate.transforms.normalize import (
    TextRunNormalizer,
    normalize_document,
    normalize_sequence,
    normalize_text_runs,
)
from cleanstate.transforms.pipeline import (
    CanonicalizationPipeline,
    CanonicalizationStats,
    canonical_json,
    canonicalize,
)
from cleanstate.transforms.strip import CommentStripper, strip_comment_sequence, strip_comments, strip_document

__all__ = [
    "CommentStripper",
    "strip_comments",
    "strip_comment_sequence",
    "strip_document",
    "TextRunNormalizer",
    "normalize_text_runs",
    "normalize_sequence",
    "normalize_document",
    "CanonicalizationPipeline",
    "CanonicalizationStats",
    "canonicalize",
    "canonical_json",
]
