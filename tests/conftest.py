"""Pytest configuration and shared fixtures for the cleanstate test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import logging
import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings
from utils import commented_document

from cleanstate.ast import Root
from cleanstate.logging_utils import PACKAGE_LOGGER, remove_handlers
from cleanstate.overlay import AnnotationChannel
from cleanstate.persistence import ManualScheduler, PersistenceController
from cleanstate.storage import FileStore, MemoryStore

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=50)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture(autouse=True)
def _reset_loggers():
    """Keep handlers installed by ``configure_logging`` from leaking between tests."""
    saved = {}
    for name in ("", PACKAGE_LOGGER):
        logger = logging.getLogger(name)
        saved[name] = (list(logger.handlers), logger.level)
    yield
    remove_handlers()
    for name, (handlers, level) in saved.items():
        logger = logging.getLogger(name)
        logger.handlers[:] = handlers
        logger.setLevel(level)


@pytest.fixture
def memory_store() -> MemoryStore:
    """Provide an empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def file_store(tmp_path: Path) -> FileStore:
    """Provide a file store rooted in a temporary directory."""
    return FileStore(tmp_path / "store")


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Provide a scheduler with a virtual clock."""
    return ManualScheduler()


@pytest.fixture
def controller(memory_store: MemoryStore, scheduler: ManualScheduler) -> PersistenceController:
    """Provide a controller over an in-memory store with a one second debounce."""
    return PersistenceController(memory_store, scheduler=scheduler, debounce_seconds=1.0)


@pytest.fixture
def channel() -> AnnotationChannel:
    """Provide an empty annotation channel."""
    return AnnotationChannel()


@pytest.fixture
def sample_document() -> Root:
    """Provide a document with nested comment wrappers and mergeable runs.

    Returns
    -------
    Root
        Document whose canonical form is a heading and one merged paragraph

    """
    return commented_document()
