# tests/test_local_backend.py

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from doit_tracker.persistence.local_backend import CURRENT_USER_KEY, LocalBackend, remembered_user
from doit_tracker.persistence.local_store import SQLiteKeyValueStore
from doit_tracker.persistence.remote_backend import create_backend


def test_kv_roundtrip_and_overwrite(tmp_path: Path) -> None:
    kv = SQLiteKeyValueStore(tmp_path / "kv.sqlite3")
    assert kv.get("missing") is None
    kv.set("k", "v1")
    kv.set("k", "v2")
    assert kv.get("k") == "v2"
    assert kv.count_keys() == 1

    # a second instance sees the same data (one connection per call, nothing cached)
    assert SQLiteKeyValueStore(tmp_path / "kv.sqlite3").get("k") == "v2"


def test_storage_keys_are_namespaced_by_user(tmp_path: Path) -> None:
    kv = SQLiteKeyValueStore(tmp_path / "kv.sqlite3")
    assert LocalBackend(kv).storage_key("tasks") == "doit_tasks"
    assert LocalBackend(kv, user="ann@example.com").storage_key("tasks") == "doit_tasks_ann@example.com"
    assert LocalBackend(kv, user="  ").storage_key("habits") == "doit_habits"


@pytest.mark.asyncio
async def test_crud_on_local_backend(tmp_path: Path) -> None:
    kv = SQLiteKeyValueStore(tmp_path / "kv.sqlite3")
    b = LocalBackend(kv)

    assert await b.list_all("tasks") is None

    await b.insert("tasks", {"id": "1", "title": "A", "category": "X"})
    await b.insert("tasks", {"id": "2", "title": "B", "category": "Y"})
    await b.update("tasks", "1", {"title": "A2"})
    await b.bulk_update("tasks", "category", "Y", {"category": "Z"})
    rows = await b.list_all("tasks")
    assert rows == [
        {"id": "1", "title": "A2", "category": "X"},
        {"id": "2", "title": "B", "category": "Z"},
    ]

    await b.bulk_delete("tasks", "category", "X")
    await b.delete("tasks", "2")
    assert await b.list_all("tasks") == []

    # categories are keyed by name
    await b.insert("categories", {"name": "Monthly"})
    await b.delete("categories", "Monthly")
    assert await b.list_all("categories") == []


@pytest.mark.asyncio
async def test_users_do_not_see_each_other(tmp_path: Path) -> None:
    kv = SQLiteKeyValueStore(tmp_path / "kv.sqlite3")
    await LocalBackend(kv, user="a").insert("habits", {"id": "h"})
    assert await LocalBackend(kv, user="b").list_all("habits") is None
    assert await LocalBackend(kv, user="a").list_all("habits") == [{"id": "h"}]


@pytest.mark.asyncio
async def test_corrupt_value_is_treated_as_nothing_stored(tmp_path: Path) -> None:
    kv = SQLiteKeyValueStore(tmp_path / "kv.sqlite3")
    kv.set("doit_tasks", "{not json")
    b = LocalBackend(kv)
    assert await b.list_all("tasks") is None
    await b.insert("tasks", {"id": "1"})
    assert json.loads(kv.get("doit_tasks") or "[]") == [{"id": "1"}]


def test_switch_user_is_remembered_and_cleared(tmp_path: Path) -> None:
    kv = SQLiteKeyValueStore(tmp_path / "kv.sqlite3")
    b = LocalBackend(kv)
    assert remembered_user(kv) is None

    b.switch_user("  ann@example.com ")
    assert b.user == "ann@example.com"
    assert b.storage_key("categories") == "doit_categories_ann@example.com"
    assert kv.get(CURRENT_USER_KEY) == "ann@example.com"
    assert remembered_user(kv) == "ann@example.com"

    b.switch_user(None)
    assert b.storage_key("categories") == "doit_categories"
    assert kv.get(CURRENT_USER_KEY) is None


def test_create_backend_restores_remembered_user(settings: SimpleNamespace) -> None:
    kv = SQLiteKeyValueStore(settings.local_db_path)
    kv.set(CURRENT_USER_KEY, "ann")
    assert create_backend(settings).user == "ann"

    settings.local_user = "bob"
    assert create_backend(settings).user == "bob"
