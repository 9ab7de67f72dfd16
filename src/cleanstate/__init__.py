"""cleanstate - annotation-free persistence for rich-text editor documents.

A live rich-text document is decorated with transient comment wrappers and an
overlay of externally sourced annotations. cleanstate keeps a canonical,
comment-free snapshot of it in a key-value store and brings the annotations
back through a separate channel after reload.

Key Features
------------
- Stripping of comment-wrapper nodes, splicing their children in place
- Merging of adjacent text runs with identical formatting
- Editor-state JSON serialization that round-trips the canonical form
- Debounced save-on-change with load-with-fallback and clear
- Publish/subscribe delivery of annotation lists with per-subscriber isolation

Examples
--------
Canonicalize a document:

    >>> from cleanstate import canonicalize
    >>> from cleanstate.ast import CommentWrapper, Paragraph, Root, Text
    >>> doc = Root(children=[Paragraph(children=[
    ...     Text(text="a"), CommentWrapper(children=[Text(text="b")]), Text(text="c"),
    ... ])])
    >>> canonicalize(doc).children[0].children
    [Text(text='abc', format=0, style='', mode='normal', detail=0, version=1)]

Run a session against an in-memory store:

    >>> from cleanstate import EditorSession, InMemoryEditor, ManualScheduler, MemoryStore, PersistenceController
    >>> controller = PersistenceController(MemoryStore(), scheduler=ManualScheduler())
    >>> session = EditorSession(InMemoryEditor(), controller)
    >>> session.start()
    False

"""

from cleanstate.ast import Root, json_to_ast, json_to_document
from cleanstate.ast.serialization import ast_to_json
from cleanstate.config import SessionConfig, load_config
from cleanstate.editor import EditorSurface, InMemoryEditor
from cleanstate.exceptions import (
    CleanStateError,
    DeserializationError,
    StorageError,
    SubscriberError,
    TransformError,
    ValidationError,
)
from cleanstate.overlay import AnnotationChannel, AnnotationFeed
from cleanstate.persistence import (
    AsyncioScheduler,
    ManualScheduler,
    PersistenceController,
    PersistenceState,
)
from cleanstate.session import EditorSession, create_session
from cleanstate.storage import FileStore, KeyValueStore, MemoryStore
from cleanstate.transforms import (
    CanonicalizationPipeline,
    canonical_json,
    canonicalize,
    normalize_text_runs,
    strip_comments,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Tree
    "Root",
    "ast_to_json",
    "json_to_ast",
    "json_to_document",
    # Passes
    "strip_comments",
    "normalize_text_runs",
    "canonicalize",
    "canonical_json",
    "CanonicalizationPipeline",
    # Persistence
    "KeyValueStore",
    "MemoryStore",
    "FileStore",
    "PersistenceController",
    "PersistenceState",
    "AsyncioScheduler",
    "ManualScheduler",
    # Overlay
    "AnnotationChannel",
    "AnnotationFeed",
    # Session
    "EditorSurface",
    "InMemoryEditor",
    "EditorSession",
    "create_session",
    "SessionConfig",
    "load_config",
    # Errors
    "CleanStateError",
    "ValidationError",
    "DeserializationError",
    "StorageError",
    "SubscriberError",
    "TransformError",
]
