# tests/test_bootstrap.py

from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from doit_tracker.bootstrap import (
    DEFAULT_CATEGORIES,
    create_initial_state,
    load_state,
    shutdown,
    sign_in,
    sign_out,
)
from doit_tracker.core.dates import Cadence
from doit_tracker.core.state import AppState
from doit_tracker.llm.offline import OfflineSuggestionClient
from doit_tracker.persistence.local_backend import LocalBackend
from doit_tracker.tasks.task_models import TaskPriority

from .fakes import FakeBackend


@pytest.mark.asyncio
async def test_first_run_seeds_defaults(state: AppState, backend: FakeBackend) -> None:
    await load_state(state)

    assert state.loaded
    assert state.categories.names == DEFAULT_CATEGORIES
    assert [h.title for h in state.habits.daily] == ["Deep Work (4h)", "Physical Training", "Zero Sugar"]
    assert [h.title for h in state.habits.monthly] == ["Financial Audit", "Network Review"]
    assert [t.category for t in state.tasks.tasks] == DEFAULT_CATEGORIES

    # seeded through the backend so the next load finds them
    assert len(backend.data["habits"]) == 5
    assert len(backend.data["tasks"]) == 3
    assert [r["name"] for r in backend.data["categories"]] == DEFAULT_CATEGORIES


@pytest.mark.asyncio
async def test_load_maps_rows_and_splits_habits(settings: SimpleNamespace) -> None:
    backend = FakeBackend(
        {
            "habits": [
                {"id": "d1", "title": "Run", "type": "DAILY", "completions": {"2024-05-01": True}},
                {"id": "m1", "title": "Audit", "type": "MONTHLY", "completions": {"2024-05": True, "bad": True}},
            ],
            "categories": [{"name": "Work"}],
            "tasks": [
                {"id": "t2", "title": "Later", "category": "Work", "priority": "LOW",
                 "completed": False, "created_at": "2024-05-02T00:00:00Z"},
                {"id": "t1", "title": "Sooner", "category": "Work", "priority": "HIGH",
                 "completed": True, "created_at": "2024-05-01T00:00:00Z"},
            ],
        }
    )
    state = create_initial_state(settings, backend=backend, suggester=OfflineSuggestionClient())
    await load_state(state)

    assert [h.id for h in state.habits.daily] == ["d1"]
    assert state.habits.monthly[0].completions == {"2024-05": True}
    assert state.categories.names == ["Work"]
    assert [t.id for t in state.tasks.tasks] == ["t1", "t2"]
    assert state.tasks.get("t1").priority is TaskPriority.HIGH
    assert backend.calls == []


@pytest.mark.asyncio
async def test_orphaned_task_category_is_recreated(settings: SimpleNamespace) -> None:
    backend = FakeBackend(
        {
            "habits": [],
            "categories": [{"name": "Work"}],
            "tasks": [{"id": "t1", "title": "Lost", "category": "Ghost", "created_at": 1}],
        }
    )
    state = create_initial_state(settings, backend=backend, suggester=OfflineSuggestionClient())
    await load_state(state)
    await shutdown(state)

    assert state.categories.names == ["Work", "Ghost"]
    assert ("insert", "categories", {"name": "Ghost"}) in backend.calls


@pytest.mark.asyncio
async def test_seeding_can_be_disabled(settings: SimpleNamespace) -> None:
    settings.seed_defaults = False
    backend = FakeBackend()
    state = create_initial_state(settings, backend=backend, suggester=OfflineSuggestionClient())
    await load_state(state)
    assert state.categories.names == []
    assert state.habits.daily == [] and state.tasks.tasks == []
    assert backend.calls == []


@pytest.mark.asyncio
async def test_local_fallback_survives_restart(settings: SimpleNamespace) -> None:
    settings.local_user = "ann"

    # No Supabase configured -> local SQLite fallback is picked once, here.
    state = create_initial_state(settings)
    assert isinstance(state.backend, LocalBackend)
    assert isinstance(state.suggester, OfflineSuggestionClient)
    await load_state(state)

    habit = state.habits.add("Stretch", Cadence.DAILY)
    assert habit is not None
    state.habits.toggle(habit.id, date(2024, 5, 1), Cadence.DAILY)
    state.categories.rename("Monthly", "Finance")
    state.categories.delete("Yearly")
    task = state.tasks.add("Pay rent", TaskPriority.HIGH, "Finance")
    assert task is not None
    state.tasks.toggle_completed(task.id)
    await shutdown(state)

    again = await load_state(create_initial_state(settings))
    reloaded = {h.title: h for h in again.habits.daily}
    assert reloaded["Stretch"].completions == {"2024-05-01": True}
    assert again.categories.names == ["Complete It", "Finance"]
    by_title = {t.title: t for t in again.tasks.tasks}
    assert by_title["Pay rent"].completed is True
    assert by_title["Q3 Financial Review"].category == "Finance"
    assert "Launch Mobile App" not in by_title



@pytest.mark.asyncio
async def test_local_sign_in_switches_to_isolated_data(settings: SimpleNamespace) -> None:
    state = await load_state(create_initial_state(settings))
    assert state.user is None
    state.habits.add("Shared habit", Cadence.DAILY)

    assert not await sign_in(state, "ann@example.com", "")
    assert state.user is None

    assert await sign_in(state, "ann@example.com", "pw")
    assert state.user == "ann@example.com"
    assert state.backend.storage_key("habits") == "doit_habits_ann@example.com"
    # the signed-out write was flushed under the old keys before switching
    assert "Shared habit" not in [h.title for h in state.habits.daily]
    assert state.categories.names == DEFAULT_CATEGORIES
    state.habits.add("Ann only", Cadence.DAILY)

    assert await sign_in(state, "bob@example.com", "pw")
    assert "Ann only" not in [h.title for h in state.habits.daily]

    await sign_out(state)
    assert state.user is None
    assert "Shared habit" in [h.title for h in state.habits.daily]
    assert "Ann only" not in [h.title for h in state.habits.daily]


@pytest.mark.asyncio
async def test_local_identity_is_remembered_across_restarts(settings: SimpleNamespace) -> None:
    state = await load_state(create_initial_state(settings))
    assert await sign_in(state, "ann@example.com", "pw")
    state.habits.add("Ann only", Cadence.DAILY)
    await shutdown(state)

    again = await load_state(create_initial_state(settings))
    assert again.user == "ann@example.com"
    assert "Ann only" in [h.title for h in again.habits.daily]

    await sign_out(again)
    restarted = await load_state(create_initial_state(settings))
    assert restarted.user is None
    assert "Ann only" not in [h.title for h in restarted.habits.daily]


@pytest.mark.asyncio
async def test_sign_in_needs_an_identity_capable_backend(state: AppState) -> None:
    await load_state(state)
    assert not await sign_in(state, "ann@example.com", "pw")
    assert state.user is None
