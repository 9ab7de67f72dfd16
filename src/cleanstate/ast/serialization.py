#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/ast/serialization.py
"""JSON serialization and deserialization for document trees.

This module converts node trees to and from the editor-state JSON layout used
by the editing surface, so that persisted documents can be handed back to it
unchanged:

    {"root": {"type": "root", "children": [...], "direction": "ltr",
              "format": "", "indent": 0, "version": 1}}

Every node dictionary carries a ``type`` discriminant. Round-tripping a tree
through :func:`ast_to_json` and :func:`json_to_ast` produces an equal tree.

Examples
--------
Serialize a document:

    >>> from cleanstate.ast import Paragraph, Root, Text
    >>> doc = Root(children=[Paragraph(children=[Text(text="Hello")])])
    >>> json_str = ast_to_json(doc)

Deserialize it again:

    >>> json_to_ast(json_str) == doc
    True

"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

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
from cleanstate.constants import HEADING_TAGS, NODE_VERSION
from cleanstate.exceptions import DeserializationError

logger = logging.getLogger(__name__)

_EXCERPT_LENGTH = 80


# ============================================================================
# Serialization
# ============================================================================


def _serialize_element(node: ElementNode) -> dict[str, Any]:
    """Serialize the fields shared by all element nodes."""
    return {
        "children": [ast_to_dict(child) for child in node.children],
        "direction": node.direction,
        "format": node.format,
        "indent": node.indent,
        "type": node.node_type,
        "version": node.version,
    }


def _serialize_paragraph(node: Paragraph) -> dict[str, Any]:
    result = _serialize_element(node)
    result["textFormat"] = node.text_format
    result["textStyle"] = node.text_style
    return result


def _serialize_heading(node: Heading) -> dict[str, Any]:
    result = _serialize_element(node)
    result["tag"] = node.tag
    return result


def _serialize_comment_wrapper(node: CommentWrapper) -> dict[str, Any]:
    result = _serialize_element(node)
    if node.annotation_id is not None:
        result["annotationId"] = node.annotation_id
    return result


def _serialize_text(node: Text) -> dict[str, Any]:
    return {
        "detail": node.detail,
        "format": node.format,
        "mode": node.mode,
        "style": node.style,
        "text": node.text,
        "type": node.node_type,
        "version": node.version,
    }


def _serialize_line_break(node: LineBreak) -> dict[str, Any]:
    return {"type": node.node_type, "version": node.version}


_SERIALIZATION_DISPATCH: dict[type, Callable[[Any], dict[str, Any]]] = {
    Root: _serialize_element,
    Paragraph: _serialize_paragraph,
    Heading: _serialize_heading,
    Quote: _serialize_element,
    CommentWrapper: _serialize_comment_wrapper,
    Text: _serialize_text,
    LineBreak: _serialize_line_break,
}


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert a node to its dictionary representation.

    Parameters
    ----------
    node : Node
        The node to convert

    Returns
    -------
    dict
        Dictionary representation of the node

    Raises
    ------
    ValueError
        If the node class has no serializer

    Examples
    --------
    >>> ast_to_dict(Text(text="Hello"))
    {'detail': 0, 'format': 0, 'mode': 'normal', 'style': '', 'text': 'Hello', 'type': 'text', 'version': 1}

    """
    serializer = _SERIALIZATION_DISPATCH.get(type(node))
    if serializer:
        return serializer(node)

    raise ValueError(f"Unknown node type for serialization: {type(node).__name__}")


# ============================================================================
# Deserialization
# ============================================================================


def _require(data: dict[str, Any], key: str, expected: type | tuple[type, ...], node_type: str) -> Any:
    """Fetch a required field and check its type."""
    if key not in data:
        raise DeserializationError(f"'{node_type}' node is missing required field '{key}'")
    value = data[key]
    if not isinstance(value, expected) or (isinstance(value, bool) and expected is int):
        raise DeserializationError(
            f"Field '{key}' of '{node_type}' node has type {type(value).__name__}, "
            f"expected {getattr(expected, '__name__', expected)}"
        )
    return value


def _optional(data: dict[str, Any], key: str, expected: type, default: Any, node_type: str) -> Any:
    """Fetch an optional field, checking its type when present."""
    if key not in data:
        return default
    return _require(data, key, expected, node_type)


def _deserialize_children(data: dict[str, Any], node_type: str, strict_mode: bool) -> list[Node]:
    children_data = _optional(data, "children", list, [], node_type)
    children: list[Node] = []
    for child_data in children_data:
        child = dict_to_ast(child_data, strict_mode=strict_mode)
        if child is not None:
            children.append(child)
    return children


def _element_kwargs(data: dict[str, Any], node_type: str, strict_mode: bool) -> dict[str, Any]:
    direction = data.get("direction", "ltr")
    if direction is not None and not isinstance(direction, str):
        raise DeserializationError(f"Field 'direction' of '{node_type}' node must be a string or null")
    return {
        "children": _deserialize_children(data, node_type, strict_mode),
        "direction": direction,
        "format": _optional(data, "format", str, "", node_type),
        "indent": _optional(data, "indent", int, 0, node_type),
        "version": _optional(data, "version", int, NODE_VERSION, node_type),
    }


def _deserialize_root(data: dict[str, Any], strict_mode: bool) -> Root:
    return Root(**_element_kwargs(data, "root", strict_mode))


def _deserialize_paragraph(data: dict[str, Any], strict_mode: bool) -> Paragraph:
    return Paragraph(
        **_element_kwargs(data, "paragraph", strict_mode),
        text_format=_optional(data, "textFormat", int, 0, "paragraph"),
        text_style=_optional(data, "textStyle", str, "", "paragraph"),
    )


def _deserialize_heading(data: dict[str, Any], strict_mode: bool) -> Heading:
    tag = _require(data, "tag", str, "heading")
    if tag not in HEADING_TAGS:
        raise DeserializationError(f"Unsupported heading tag: {tag!r}")
    return Heading(**_element_kwargs(data, "heading", strict_mode), tag=tag)


def _deserialize_quote(data: dict[str, Any], strict_mode: bool) -> Quote:
    return Quote(**_element_kwargs(data, "quote", strict_mode))


def _deserialize_comment_wrapper(data: dict[str, Any], strict_mode: bool) -> CommentWrapper:
    return CommentWrapper(
        **_element_kwargs(data, "comment", strict_mode),
        annotation_id=_optional(data, "annotationId", str, None, "comment"),
    )


def _deserialize_text(data: dict[str, Any], strict_mode: bool) -> Text:
    return Text(
        text=_require(data, "text", str, "text"),
        format=_optional(data, "format", int, 0, "text"),
        style=_optional(data, "style", str, "", "text"),
        mode=_optional(data, "mode", str, "normal", "text"),
        detail=_optional(data, "detail", int, 0, "text"),
        version=_optional(data, "version", int, NODE_VERSION, "text"),
    )


def _deserialize_line_break(data: dict[str, Any], strict_mode: bool) -> LineBreak:
    return LineBreak(version=_optional(data, "version", int, NODE_VERSION, "linebreak"))


# Dispatch table mapping type discriminants to deserializer functions
_DESERIALIZATION_DISPATCH: dict[str, Callable[[dict[str, Any], bool], Node]] = {
    "root": _deserialize_root,
    "paragraph": _deserialize_paragraph,
    "heading": _deserialize_heading,
    "quote": _deserialize_quote,
    "comment": _deserialize_comment_wrapper,
    "text": _deserialize_text,
    "linebreak": _deserialize_line_break,
}


def dict_to_ast(data: dict[str, Any], strict_mode: bool = True) -> Optional[Node]:
    """Convert a dictionary representation back to a node.

    Parameters
    ----------
    data : dict
        Dictionary representation of a node
    strict_mode : bool, default True
        If True, raise on unknown node types.
        If False, log a warning and return None so the caller drops the node.

    Returns
    -------
    Node or None
        Reconstructed node, or None for a skipped unknown node

    Raises
    ------
    DeserializationError
        If the dictionary does not describe a valid node

    """
    if not isinstance(data, dict):
        raise DeserializationError(f"Expected a node object, got {type(data).__name__}")

    node_type = data.get("type")
    if not isinstance(node_type, str) or not node_type:
        raise DeserializationError("Node object must contain a string 'type' field")

    deserializer = _DESERIALIZATION_DISPATCH.get(node_type)
    if not deserializer:
        if strict_mode:
            raise DeserializationError(f"Unknown node type: {node_type}")
        logger.warning(f"Unknown node type '{node_type}', skipping")
        return None

    return deserializer(data, strict_mode)


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize a node to a JSON string.

    A :class:`Root` is wrapped in the ``{"root": ...}`` editor-state envelope;
    other nodes are written bare. Unicode characters are preserved without
    escape sequences.

    Parameters
    ----------
    node : Node
        The node to serialize
    indent : int or None, default = None
        Number of spaces for indentation (None for compact format)

    Returns
    -------
    str
        JSON string representation

    """
    node_dict = ast_to_dict(node)
    payload = {"root": node_dict} if isinstance(node, Root) else node_dict
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str | bytes, strict_mode: bool = True) -> Node:
    """Deserialize a JSON string to a node.

    Accepts either the ``{"root": ...}`` editor-state envelope or a bare node
    object.

    Parameters
    ----------
    json_str : str or bytes
        JSON text; bytes are decoded as UTF-8
    strict_mode : bool, default True
        If False, unknown node types are skipped with a warning

    Returns
    -------
    Node
        Reconstructed node

    Raises
    ------
    DeserializationError
        If the text is not valid JSON or does not match the node schema

    """
    if isinstance(json_str, bytes):
        try:
            json_str = json_str.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DeserializationError("Payload is not valid UTF-8", original_error=e) from e

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise DeserializationError(
            f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
            payload_excerpt=json_str[:_EXCERPT_LENGTH],
            original_error=e,
        ) from e
    except (RecursionError, ValueError) as e:
        raise DeserializationError(
            f"Invalid JSON: {e}", payload_excerpt=json_str[:_EXCERPT_LENGTH], original_error=e
        ) from e

    if isinstance(data, dict) and "root" in data and "type" not in data:
        data = data["root"]

    try:
        node = dict_to_ast(data, strict_mode=strict_mode)
    except RecursionError as e:
        raise DeserializationError(
            "Document is nested too deeply", payload_excerpt=json_str[:_EXCERPT_LENGTH], original_error=e
        ) from e
    if node is None:
        raise DeserializationError(
            "Top-level node has an unknown type", payload_excerpt=json_str[:_EXCERPT_LENGTH]
        )
    return node


def json_to_document(json_str: str | bytes, strict_mode: bool = True) -> Root:
    """Deserialize editor-state JSON that must describe a whole document.

    Raises
    ------
    DeserializationError
        If the payload is invalid or its top-level node is not a root

    """
    node = json_to_ast(json_str, strict_mode=strict_mode)
    if not isinstance(node, Root):
        raise DeserializationError(f"Expected a 'root' node at top level, got '{node.node_type}'")
    return node


__all__ = [
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
    "json_to_document",
]
