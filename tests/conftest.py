# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from doit_tracker.bootstrap import create_initial_state
from doit_tracker.core.state import AppState
from doit_tracker.habits.habit_store import HabitStore
from doit_tracker.persistence.sync import SyncQueue
from doit_tracker.tasks.category_store import CategoryStore
from doit_tracker.tasks.task_store import TaskStore

from .fakes import FakeBackend, FakeSuggestionClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the backends.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment/.env.
    """
    return SimpleNamespace(
        app_name="doit-test",
        log_level="DEBUG",
        supabase_url=None,
        supabase_anon_key=None,
        supabase_email=None,
        supabase_password=None,
        remote_configured=False,
        local_user=None,
        data_dir=tmp_path,
        local_db_path=tmp_path / "local_store.sqlite3",
        seed_defaults=True,
        openrouter_api_key=None,
        openrouter_base_url="https://openrouter.example/api/v1",
        llm_models=["m1", "m2"],
        extra_headers={},
    )


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def sync() -> SyncQueue:
    return SyncQueue()


@pytest.fixture()
def habit_store(backend: FakeBackend, sync: SyncQueue) -> HabitStore:
    return HabitStore(backend, sync)


@pytest.fixture()
def task_store(backend: FakeBackend, sync: SyncQueue) -> TaskStore:
    return TaskStore(backend, sync)


@pytest.fixture()
def category_store(backend: FakeBackend, sync: SyncQueue, task_store: TaskStore) -> CategoryStore:
    store = CategoryStore(backend, sync, task_store)
    store.load(["Complete It", "Monthly", "Yearly"])
    return store


@pytest.fixture()
def state(settings: SimpleNamespace, backend: FakeBackend) -> AppState:
    """AppState wired with deterministic fakes (no SQLite, no network)."""
    return create_initial_state(settings, backend=backend, suggester=FakeSuggestionClient(["a", "b"]))
