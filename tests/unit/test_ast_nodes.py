#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for document node classes and visitor helpers."""
import pytest

from cleanstate.ast import (
    CommentWrapper,
    Heading,
    LineBreak,
    NodeCollector,
    NodeVisitor,
    Paragraph,
    Quote,
    Root,
    Text,
    collect_leaves,
    count_nodes,
    get_node_children,
    is_format_equal,
    replace_node_children,
)
from cleanstate.constants import TextFormat


@pytest.mark.unit
class TestNodeModel:
    """Test node construction and defaults."""

    def test_element_defaults(self) -> None:
        """Test that element nodes start empty with editor defaults."""
        para = Paragraph()
        assert para.children == []
        assert para.direction == "ltr"
        assert para.format == ""
        assert para.indent == 0
        assert para.version == 1

    def test_node_type_discriminants(self) -> None:
        """Test the serialized type name of every node class."""
        assert Root.node_type == "root"
        assert Paragraph.node_type == "paragraph"
        assert Heading.node_type == "heading"
        assert Quote.node_type == "quote"
        assert CommentWrapper.node_type == "comment"
        assert Text.node_type == "text"
        assert LineBreak.node_type == "linebreak"

    def test_heading_level(self) -> None:
        """Test heading level derived from its tag."""
        assert Heading(tag="h3").level == 3

    def test_children_lists_are_independent(self) -> None:
        """Test that default children lists are not shared between instances."""
        first = Paragraph()
        second = Paragraph()
        first.children.append(Text(text="x"))
        assert second.children == []

    def test_structural_equality(self) -> None:
        """Test that nodes compare by value."""
        assert Paragraph(children=[Text(text="a")]) == Paragraph(children=[Text(text="a")])
        assert Paragraph(children=[Text(text="a")]) != Quote(children=[Text(text="a")])


@pytest.mark.unit
class TestTextFormatting:
    """Test text leaf formatting helpers."""

    def test_toggle_format_returns_copy(self) -> None:
        """Test that toggling leaves the original leaf untouched."""
        leaf = Text(text="x")
        toggled = leaf.toggle_format(TextFormat.BOLD)
        assert leaf.format == 0
        assert toggled.format == TextFormat.BOLD
        assert toggled.toggle_format(TextFormat.BOLD).format == 0

    def test_has_format(self) -> None:
        """Test checking format bits."""
        leaf = Text(text="x", format=int(TextFormat.BOLD | TextFormat.ITALIC))
        assert leaf.has_format(TextFormat.BOLD)
        assert leaf.has_format(TextFormat.BOLD | TextFormat.ITALIC)
        assert not leaf.has_format(TextFormat.CODE)

    def test_format_equality_ignores_payload(self) -> None:
        """Test that format equality compares attributes, not text."""
        assert is_format_equal(Text(text="a", format=1), Text(text="b", format=1))

    @pytest.mark.parametrize(
        "other",
        [
            Text(text="b", format=2),
            Text(text="b", style="color: red"),
            Text(text="b", mode="token"),
            Text(text="b", detail=1),
        ],
    )
    def test_format_inequality(self, other: Text) -> None:
        """Test that any differing formatting attribute breaks equality."""
        assert not is_format_equal(Text(text="a"), other)


@pytest.mark.unit
class TestChildHelpers:
    """Test child access and replacement helpers."""

    def test_get_node_children_copies(self) -> None:
        """Test that the returned list is a copy."""
        para = Paragraph(children=[Text(text="a")])
        children = get_node_children(para)
        children.append(LineBreak())
        assert len(para.children) == 1

    def test_get_node_children_of_leaf(self) -> None:
        """Test that leaves have no children."""
        assert get_node_children(Text(text="a")) == []

    def test_replace_node_children(self) -> None:
        """Test replacing children keeps other fields."""
        heading = Heading(tag="h2", children=[Text(text="old")])
        updated = replace_node_children(heading, [Text(text="new")])
        assert updated.tag == "h2"
        assert updated.children == [Text(text="new")]
        assert heading.children == [Text(text="old")]

    def test_replace_leaf_children_raises(self) -> None:
        """Test that a leaf cannot receive children."""
        with pytest.raises(ValueError):
            replace_node_children(Text(text="a"), [LineBreak()])

    def test_replace_leaf_with_no_children(self) -> None:
        """Test that an empty replacement on a leaf is a no-op."""
        leaf = Text(text="a")
        assert replace_node_children(leaf, []) is leaf


@pytest.mark.unit
class TestVisitors:
    """Test visitor dispatch and collection helpers."""

    def test_generic_visit_raises_for_unhandled_kind(self) -> None:
        """Test that visitors fail loudly on kinds they do not handle."""

        class ParagraphOnly(NodeVisitor):
            def visit_paragraph(self, node):
                return "paragraph"

        visitor = ParagraphOnly()
        assert Paragraph().accept(visitor) == "paragraph"
        with pytest.raises(NotImplementedError):
            CommentWrapper().accept(visitor)

    def test_collect_leaves_in_document_order(self, sample_document: Root) -> None:
        """Test that leaves are collected left to right across wrappers."""
        leaves = collect_leaves(sample_document)
        assert [getattr(leaf, "text", "<br>") for leaf in leaves] == ["Title", "a", "b", "c", "d", "<br>"]

    def test_count_nodes(self, sample_document: Root) -> None:
        """Test counting nodes of a class, including nested ones."""
        assert count_nodes(sample_document, CommentWrapper) == 3
        assert count_nodes(sample_document, Root) == 1

    def test_collector_predicate(self, sample_document: Root) -> None:
        """Test collecting with a predicate in pre-order."""
        collector = NodeCollector(lambda n: isinstance(n, CommentWrapper))
        sample_document.accept(collector)
        assert [node.annotation_id for node in collector.collected] == ["a1", "a2", "a3"]
