#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the editing session wiring."""
from pathlib import Path

import pytest

from cleanstate.ast import Paragraph, Root, Text, ast_to_json
from cleanstate.config import SessionConfig
from cleanstate.constants import COMMENT_ANNOTATIONS_KEY, DEFAULT_STORAGE_KEY, TextFormat
from cleanstate.content import fallback_document, prepopulated_document
from cleanstate.editor import InMemoryEditor
from cleanstate.exceptions import StorageError, ValidationError
from cleanstate.overlay import AnnotationChannel
from cleanstate.persistence import ManualScheduler, PersistenceController
from cleanstate.session import STORAGE_CLEAR_FAILED_MESSAGE, EditorSession, create_session
from cleanstate.storage import FileStore, MemoryStore


class OverlayRecorder:
    """Render hook that records its calls."""

    def __init__(self) -> None:
        self.calls: list[dict] = []

    def __call__(self, *, tree: Root, annotations: list) -> None:
        self.calls.append({"tree": tree, "annotations": annotations})


@pytest.fixture
def session(controller: PersistenceController, channel: AnnotationChannel) -> EditorSession:
    """Provide an unstarted session over an in-memory store."""
    return EditorSession(InMemoryEditor(), controller, channel=channel, render_overlay=OverlayRecorder())


@pytest.mark.unit
class TestInitialContent:
    """Test the built-in documents."""

    def test_prepopulated_document(self) -> None:
        """Test the plain, bold, plain paragraph."""
        root = prepopulated_document()
        leaves = root.children[0].children
        assert [leaf.format for leaf in leaves] == [0, int(TextFormat.BOLD), 0]
        assert leaves[1].text.startswith("A set of editor states")

    def test_fallback_document(self) -> None:
        """Test the single empty paragraph."""
        assert fallback_document() == Root(children=[Paragraph()])


@pytest.mark.unit
class TestStart:
    """Test session start-up."""

    def test_empty_store_applies_initial_content(self, session: EditorSession, scheduler: ManualScheduler) -> None:
        """Test that initial content is applied once without an undo entry or save."""
        assert session.start() is False
        assert session.editor.get_snapshot() == prepopulated_document()
        assert session.editor.history_size == 0
        assert scheduler.pending == 0

    def test_loads_persisted_document(self, session: EditorSession, memory_store: MemoryStore) -> None:
        """Test that a stored document replaces the initial content."""
        stored = Root(children=[Paragraph(children=[Text(text="saved")])])
        memory_store.set(DEFAULT_STORAGE_KEY, ast_to_json(stored))
        assert session.start() is True
        assert session.editor.get_snapshot() == stored
        assert session.editor.history_size == 0

    def test_start_twice(self, session: EditorSession) -> None:
        """Test that a session starts only once."""
        session.start()
        with pytest.raises(RuntimeError):
            session.start()

    def test_subscribes_overlay_key(self, session: EditorSession, channel: AnnotationChannel) -> None:
        """Test that the render hook is registered under the comment key."""
        session.start()
        assert channel.subscribers == [COMMENT_ANNOTATIONS_KEY]

    def test_corrupt_state_matches_initial_content_path(self, memory_store: MemoryStore) -> None:
        """Test that a corrupt load ends where an empty store with fallback content ends."""
        memory_store.set(DEFAULT_STORAGE_KEY, "{corrupt")
        corrupt = EditorSession(InMemoryEditor(), PersistenceController(memory_store, scheduler=ManualScheduler()))
        corrupt.start()

        fresh = EditorSession(
            InMemoryEditor(),
            PersistenceController(MemoryStore(), scheduler=ManualScheduler()),
            initial_content=fallback_document,
        )
        fresh.start()

        assert corrupt.editor.get_snapshot() == fresh.editor.get_snapshot() == fallback_document()


@pytest.mark.unit
class TestEditing:
    """Test that edits flow to persistence."""

    def test_edits_are_saved_after_quiet_period(
        self, session: EditorSession, memory_store: MemoryStore, scheduler: ManualScheduler
    ) -> None:
        """Test debounced save of user edits."""
        session.start()
        session.editor.update(lambda draft: draft.children[0].children.append(Text(text="!")))
        assert memory_store.get(DEFAULT_STORAGE_KEY) is None
        scheduler.advance(1.0)
        assert memory_store.get(DEFAULT_STORAGE_KEY) is not None

    def test_comments_never_reach_storage(
        self, session: EditorSession, memory_store: MemoryStore, scheduler: ManualScheduler
    ) -> None:
        """Test that adding a comment persists the uncommented document."""
        session.start()
        session.add_comment("a1", start=1, end=2)
        scheduler.run_all()
        payload = memory_store.get(DEFAULT_STORAGE_KEY)
        assert "annotationId" not in payload
        assert '"comment"' not in payload

    def test_close_flushes_and_detaches(
        self, session: EditorSession, memory_store: MemoryStore, channel: AnnotationChannel
    ) -> None:
        """Test that closing writes the pending change and stops listening."""
        session.start()
        session.editor.set_snapshot(Root(children=[Paragraph(children=[Text(text="closing")])]))
        session.close()
        assert "closing" in memory_store.get(DEFAULT_STORAGE_KEY)
        assert not session.started
        assert COMMENT_ANNOTATIONS_KEY not in channel

        session.editor.set_snapshot(Root())
        assert not session.controller.has_pending_save

    def test_context_manager(self, session: EditorSession) -> None:
        """Test starting and closing with a with-block."""
        with session as active:
            assert active.started
        assert not session.started


@pytest.mark.unit
class TestOverlay:
    """Test annotation delivery to the render hook."""

    def test_render_hook_receives_tree_and_annotations(
        self, session: EditorSession, channel: AnnotationChannel
    ) -> None:
        """Test the keyword call of the render hook."""
        session.start()
        channel.publish([{"annotationId": "a1"}])
        call = session.render_overlay.calls[0]
        assert call["annotations"] == [{"annotationId": "a1"}]
        assert call["tree"] == session.editor.get_snapshot()

    def test_missing_render_hook(self, controller: PersistenceController, channel: AnnotationChannel) -> None:
        """Test that a session without render hook accepts annotations."""
        session = EditorSession(InMemoryEditor(), controller, channel=channel)
        session.start()
        assert channel.publish([{"annotationId": "a1"}]) == 1

    def test_annotations_are_not_persisted(
        self, session: EditorSession, channel: AnnotationChannel, memory_store: MemoryStore
    ) -> None:
        """Test that publishing annotations writes nothing."""
        session.start()
        channel.publish([{"annotationId": "a1"}])
        session.close()
        assert memory_store.get(DEFAULT_STORAGE_KEY) is None


@pytest.mark.unit
class TestClearStorage:
    """Test the clear action."""

    def test_clear_message(self, session: EditorSession, memory_store: MemoryStore) -> None:
        """Test the confirmation message and the emptied slot."""
        session.start()
        session.controller.save(session.editor.get_snapshot())
        assert session.clear_storage() == "Storage cleared!"
        assert memory_store.get(DEFAULT_STORAGE_KEY) is None

    def test_clear_failure_message(self, session: EditorSession, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the message when the store cannot be modified."""

        def fail(key):
            raise StorageError("unavailable", key=key, operation="delete")

        monkeypatch.setattr(session.controller.store, "delete", fail)
        assert session.clear_storage() == STORAGE_CLEAR_FAILED_MESSAGE


@pytest.mark.unit
class TestCreateSession:
    """Test building sessions from configuration."""

    def test_uses_config(self, memory_store: MemoryStore, scheduler: ManualScheduler) -> None:
        """Test that configured values reach the controller."""
        session = create_session(
            SessionConfig(storage_key="draft", debounce_seconds=0.5), store=memory_store, scheduler=scheduler
        )
        assert session.controller.key == "draft"
        assert session.controller.debounce_seconds == 0.5
        assert isinstance(session.editor, InMemoryEditor)

    def test_default_file_store(self, tmp_path: Path, scheduler: ManualScheduler) -> None:
        """Test that a file store under the configured directory is the default."""
        session = create_session(SessionConfig(storage_dir=str(tmp_path / "state")), scheduler=scheduler)
        assert isinstance(session.controller.store, FileStore)
        assert session.controller.store.directory == tmp_path / "state"

    def test_default_scheduler_outside_event_loop(self, memory_store: MemoryStore) -> None:
        """Test that a session without a scheduler fails up front when no loop is running."""
        with pytest.raises(ValidationError, match="running event loop"):
            create_session(SessionConfig(), store=memory_store)
