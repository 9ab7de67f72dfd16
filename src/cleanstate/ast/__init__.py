#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/ast/__init__.py
"""Document tree module.

The module consists of several components:

- nodes: node classes representing the rich-text document structure
- visitors: visitor pattern implementation for tree traversal
- transforms: base transformer and helpers for rewriting trees
- serialization: editor-state JSON serialization and deserialization

Examples
--------
    >>> from cleanstate.ast import CommentWrapper, Paragraph, Root, Text
    >>> doc = Root(children=[
    ...     Paragraph(children=[
    ...         Text(text="Hello "),
    ...         CommentWrapper(children=[Text(text="world")], annotation_id="a1"),
    ...     ])
    ... ])

"""

from __future__ import annotations

from cleanstate.ast.nodes import (
    ELEMENT_TYPES,
    LEAF_TYPES,
    CommentWrapper,
    ElementNode,
    Heading,
    LineBreak,
    Node,
    Paragraph,
    Quote,
    Root,
    Text,
    get_node_children,
    is_format_equal,
    replace_node_children,
)
from cleanstate.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast, json_to_document
from cleanstate.ast.transforms import NodeTransformer, clone_node, transform_nodes
from cleanstate.ast.visitors import NodeCollector, NodeVisitor, collect_leaves, count_nodes

__all__ = [
    # Nodes
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
    # Visitors
    "NodeVisitor",
    "NodeCollector",
    "collect_leaves",
    "count_nodes",
    # Transforms
    "NodeTransformer",
    "clone_node",
    "transform_nodes",
    # Serialization
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
    "json_to_document",
]
