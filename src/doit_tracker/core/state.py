# src/doit_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..habits.habit_store import HabitStore
from ..persistence.sync import SyncQueue
from ..tasks.category_store import CategoryStore
from ..tasks.task_store import TaskStore
from .ports import PersistenceBackend, SuggestionClient


@dataclass
class AppState:
    # Settings object (config.Settings in the app, SimpleNamespace in tests).
    settings: Any

    backend: PersistenceBackend
    sync: SyncQueue
    habits: HabitStore
    tasks: TaskStore
    categories: CategoryStore
    suggester: SuggestionClient

    # Active identity (local name or Supabase email); None when signed out.
    user: str | None = None
    loaded: bool = False
