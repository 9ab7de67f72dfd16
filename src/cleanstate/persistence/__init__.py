#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/persistence/__init__.py
"""Debounced persistence of canonical documents."""

from cleanstate.persistence.controller import PersistenceController, PersistenceState
from cleanstate.persistence.scheduler import AsyncioScheduler, Cancellable, ManualScheduler, Scheduler

__all__ = [
    "PersistenceController",
    "PersistenceState",
    "Scheduler",
    "Cancellable",
    "AsyncioScheduler",
    "ManualScheduler",
]
