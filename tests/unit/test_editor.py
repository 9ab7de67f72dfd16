#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the in-memory editing surface."""
import pytest

from cleanstate.ast import CommentWrapper, LineBreak, Paragraph, Root, Text
from cleanstate.constants import HISTORY_MERGE_TAG
from cleanstate.editor import InMemoryEditor
from cleanstate.exceptions import ValidationError


def doc(*texts: str) -> Root:
    """Build a one-paragraph document from text payloads."""
    return Root(children=[Paragraph(children=[Text(text=t) for t in texts])])


@pytest.mark.unit
class TestSnapshots:
    """Test snapshot access and replacement."""

    def test_default_document_is_empty(self) -> None:
        """Test the initial document."""
        assert InMemoryEditor().get_snapshot() == Root()

    def test_snapshot_is_a_copy(self) -> None:
        """Test that snapshots cannot mutate the live document."""
        editor = InMemoryEditor(doc("a"))
        snapshot = editor.get_snapshot()
        snapshot.children.clear()
        assert editor.get_snapshot() == doc("a")

    def test_constructor_copies_root(self) -> None:
        """Test that the initial root is not aliased."""
        root = doc("a")
        editor = InMemoryEditor(root)
        root.children.clear()
        assert editor.get_snapshot() == doc("a")

    def test_set_snapshot_records_history(self) -> None:
        """Test that a plain replacement is undoable."""
        editor = InMemoryEditor()
        assert editor.set_snapshot(doc("a")) is True
        assert editor.history_size == 1
        assert editor.undo() is True
        assert editor.get_snapshot() == Root()

    def test_history_merge_tag_skips_history(self) -> None:
        """Test that a tagged replacement creates no undo entry."""
        editor = InMemoryEditor()
        editor.set_snapshot(doc("a"), tag=HISTORY_MERGE_TAG)
        assert editor.history_size == 0
        assert editor.undo() is False

    def test_identical_snapshot_is_noop(self) -> None:
        """Test that setting an equal document changes nothing."""
        editor = InMemoryEditor(doc("a"))
        calls = []
        editor.register_update_listener(calls.append)
        assert editor.set_snapshot(doc("a")) is False
        assert calls == []
        assert editor.history_size == 0


@pytest.mark.unit
class TestUpdates:
    """Test edits and listener notification."""

    def test_listener_called_once_per_commit(self) -> None:
        """Test one notification with the new snapshot per committed edit."""
        editor = InMemoryEditor(doc("a"))
        calls = []
        editor.register_update_listener(calls.append)
        editor.update(lambda draft: draft.children[0].children.append(LineBreak()))
        assert calls == [Root(children=[Paragraph(children=[Text(text="a"), LineBreak()])])]

    def test_update_may_return_replacement(self) -> None:
        """Test an edit function that returns a new root."""
        editor = InMemoryEditor()
        assert editor.update(lambda draft: doc("new")) is True
        assert editor.get_snapshot() == doc("new")

    def test_update_without_change(self) -> None:
        """Test that an edit that changes nothing is not committed."""
        editor = InMemoryEditor(doc("a"))
        calls = []
        editor.register_update_listener(calls.append)
        assert editor.update(lambda draft: None) is False
        assert calls == []

    def test_listener_snapshots_are_independent(self) -> None:
        """Test that a listener mutating its snapshot does not affect the editor."""
        editor = InMemoryEditor()
        editor.register_update_listener(lambda snapshot: snapshot.children.clear())
        editor.set_snapshot(doc("a"))
        assert editor.get_snapshot() == doc("a")

    def test_unregister(self) -> None:
        """Test removing a listener."""
        editor = InMemoryEditor()
        calls = []
        unregister = editor.register_update_listener(calls.append)
        unregister()
        unregister()
        editor.set_snapshot(doc("a"))
        assert calls == []

    def test_undo_notifies_listeners(self) -> None:
        """Test that undo is reported like any other change."""
        editor = InMemoryEditor()
        editor.set_snapshot(doc("a"))
        calls = []
        editor.register_update_listener(calls.append)
        editor.undo()
        assert calls == [Root()]


@pytest.mark.unit
class TestAddComment:
    """Test wrapping content in comment wrappers."""

    def test_wraps_range(self) -> None:
        """Test wrapping a slice of a block's children."""
        editor = InMemoryEditor(doc("a", "b", "c"))
        editor.add_comment("a1", start=1, end=2)
        para = editor.get_snapshot().children[0]
        assert para.children == [
            Text(text="a"),
            CommentWrapper(annotation_id="a1", children=[Text(text="b")]),
            Text(text="c"),
        ]
        assert editor.history_size == 1

    def test_wraps_whole_block_by_default(self) -> None:
        """Test that the default range is the whole block."""
        editor = InMemoryEditor(doc("a", "b"))
        editor.add_comment("a1")
        assert editor.get_snapshot().children[0].children == [
            CommentWrapper(annotation_id="a1", children=[Text(text="a"), Text(text="b")])
        ]

    def test_missing_block(self) -> None:
        """Test rejecting an out-of-range block index."""
        with pytest.raises(ValidationError) as exc_info:
            InMemoryEditor(doc("a")).add_comment("a1", block_index=3)
        assert exc_info.value.parameter_name == "block_index"

    def test_leaf_block(self) -> None:
        """Test rejecting a top-level leaf."""
        editor = InMemoryEditor(Root(children=[Text(text="loose")]))
        with pytest.raises(ValidationError):
            editor.add_comment("a1")

    def test_empty_range(self) -> None:
        """Test rejecting an empty selection and leaving the document unchanged."""
        editor = InMemoryEditor(doc("a"))
        with pytest.raises(ValidationError):
            editor.add_comment("a1", start=1)
        assert editor.get_snapshot() == doc("a")
