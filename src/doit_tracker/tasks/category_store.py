# src/doit_tracker/tasks/category_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core.ports import KIND_CATEGORIES, KIND_TASKS, PersistenceBackend
from ..persistence.sync import SyncQueue
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class CategoryStore:
    """
    Ordered board categories ("sectors"). The name is the identity (case-sensitive,
    trimmed on write), and tasks reference categories by name.

    Rename and delete cascade into TaskStore synchronously, before any backend call is issued,
    so callers never observe a task pointing at a missing category.
    """

    def __init__(self, backend: PersistenceBackend, sync: SyncQueue, tasks: TaskStore) -> None:
        self._backend = backend
        self._sync = sync
        self._tasks = tasks
        self._names: list[str] = []
        tasks.bind_categories(self.exists)

    @property
    def names(self) -> list[str]:
        return list(self._names)

    def exists(self, name: str) -> bool:
        return name in self._names

    def load(self, names: Iterable[str]) -> None:
        """Replace in-memory state (load time only). Duplicates/blank names are dropped."""
        out: list[str] = []
        for raw in names:
            name = str(raw or "").strip()
            if name and name not in out:
                out.append(name)
        self._names = out

    def add(self, name: str) -> bool:
        name = (name or "").strip()
        if not name or name in self._names:
            return False
        self._names.append(name)
        self._sync.submit(f"category insert {name!r}", self._backend.insert, KIND_CATEGORIES, {"name": name})
        return True

    def rename(self, old: str, new: str) -> bool:
        new = (new or "").strip()
        if not new or old not in self._names:
            return False
        if new == old:
            return True
        if new in self._names:
            return False

        self._names = [new if n == old else n for n in self._names]
        moved = self._tasks.rename_category_local(old, new)
        logger.info("Category renamed %r -> %r (tasks=%d)", old, new, moved)

        self._sync.submit(
            f"category rename {old!r}",
            self._backend.bulk_update,
            KIND_CATEGORIES,
            "name",
            old,
            {"name": new},
        )
        self._sync.submit(
            f"tasks recategorize {old!r}",
            self._backend.bulk_update,
            KIND_TASKS,
            "category",
            old,
            {"category": new},
        )
        return True

    def delete(self, name: str) -> bool:
        if name not in self._names:
            return False

        self._names = [n for n in self._names if n != name]
        removed = self._tasks.delete_category_local(name)
        logger.info("Category deleted %r (tasks removed=%d)", name, removed)

        self._sync.submit(f"category delete {name!r}", self._backend.bulk_delete, KIND_CATEGORIES, "name", name)
        self._sync.submit(f"tasks delete by category {name!r}", self._backend.bulk_delete, KIND_TASKS, "category", name)
        return True
