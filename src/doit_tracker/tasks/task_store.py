# src/doit_tracker/tasks/task_store.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from typing import Any

from ..core.ports import KIND_TASKS, PersistenceBackend
from ..persistence.sync import SyncQueue
from .task_models import Task, TaskPriority, now_ms

logger = logging.getLogger(__name__)

# In-memory field name -> remote column name. Callers only ever see the left side.
_REMOTE_COLUMNS: dict[str, str] = {
    "title": "title",
    "category": "category",
    "priority": "priority",
    "completed": "completed",
}


class TaskStore:
    """
    In-memory task board, mirrored to the persistence backend.

    The board is ONE flat list; a column is the filtered view of tasks with a given category.
    List order is session-local: same-category reorders are never persisted.

    Rules:
    - empty titles are rejected (no state change)
    - unknown ids are no-ops
    - when bound to a CategoryStore, tasks can only point at live categories
    """

    def __init__(self, backend: PersistenceBackend, sync: SyncQueue) -> None:
        self._backend = backend
        self._sync = sync
        self._tasks: list[Task] = []
        self._category_exists: Callable[[str], bool] | None = None

    def bind_categories(self, exists: Callable[[str], bool]) -> None:
        self._category_exists = exists

    def _category_ok(self, name: str) -> bool:
        if not name:
            return False
        return self._category_exists is None or self._category_exists(name)

    # ---- queries ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def in_category(self, category: str) -> list[Task]:
        return [t for t in self._tasks if t.category == category]

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    # ---- loading ----

    def load(self, tasks: Iterable[Task]) -> None:
        """Replace in-memory state, ordered by creation time (load time only)."""
        self._tasks = sorted(tasks, key=lambda t: t.created_at)

    # ---- mutators ----

    def add(self, title: str, priority: TaskPriority, category: str) -> Task | None:
        title = (title or "").strip()
        if not title or not self._category_ok(category):
            return None

        task = Task(
            id=str(uuid.uuid4()),
            title=title,
            category=category,
            priority=TaskPriority(priority),
            completed=False,
            created_at=now_ms(),
        )
        self._tasks.append(task)
        logger.debug("Task added id=%s category=%s", task.id, category)

        self._sync.submit(f"task insert {task.id}", self._backend.insert, KIND_TASKS, task.to_record())
        return task

    def update(self, task_id: str, **fields: Any) -> bool:
        """
        Partial update: only the given fields change.
        Accepted fields: title, category, priority, completed.
        """
        task = self.get(task_id)
        if task is None:
            return False

        unknown = set(fields) - set(_REMOTE_COLUMNS)
        if unknown:
            raise TypeError(f"Unknown task fields: {sorted(unknown)}")

        changes: dict[str, Any] = {}
        if "title" in fields:
            title = str(fields["title"] or "").strip()
            if not title:
                return False
            changes["title"] = title
        if "category" in fields:
            if not self._category_ok(fields["category"]):
                return False
            changes["category"] = str(fields["category"])
        if "priority" in fields:
            try:
                changes["priority"] = TaskPriority(fields["priority"])
            except ValueError:
                return False
        if "completed" in fields:
            changes["completed"] = bool(fields["completed"])

        if not changes:
            return False

        for name, value in changes.items():
            setattr(task, name, value)

        self._sync.submit(
            f"task update {task_id}",
            self._backend.update,
            KIND_TASKS,
            task_id,
            self._to_remote(changes),
        )
        return True

    def toggle_completed(self, task_id: str) -> bool:
        task = self.get(task_id)
        if task is None:
            return False
        task.completed = not task.completed
        self._sync.submit(
            f"task toggle {task_id}",
            self._backend.update,
            KIND_TASKS,
            task_id,
            self._to_remote({"completed": task.completed}),
        )
        return True

    def delete(self, task_id: str) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        if len(self._tasks) == before:
            return False
        self._sync.submit(f"task delete {task_id}", self._backend.delete, KIND_TASKS, task_id)
        return True

    def move(self, task_id: str, new_category: str, new_index: int) -> bool:
        """
        Drag-and-drop.

        Same category: local-only reorder. The task becomes the `new_index`-th task of its
        column; every other task keeps its relative order. Not persisted.

        Other category: only the category changes (position in the flat list is kept),
        and that change is persisted.
        """
        task = self.get(task_id)
        if task is None:
            return False

        if task.category != new_category:
            if not self._category_ok(new_category):
                return False
            task.category = new_category
            self._sync.submit(
                f"task move {task_id}",
                self._backend.update,
                KIND_TASKS,
                task_id,
                self._to_remote({"category": new_category}),
            )
            return True

        old_pos = self._tasks.index(task)
        rest = self._tasks[:old_pos] + self._tasks[old_pos + 1:]
        sibling_pos = [i for i, t in enumerate(rest) if t.category == new_category]
        k = max(0, min(int(new_index), len(sibling_pos)))
        if not sibling_pos:
            insert_at = old_pos
        elif k < len(sibling_pos):
            insert_at = sibling_pos[k]
        else:
            insert_at = sibling_pos[-1] + 1
        rest.insert(insert_at, task)
        self._tasks = rest
        return True

    # ---- cascades (driven by CategoryStore; in-memory only) ----

    def rename_category_local(self, old: str, new: str) -> int:
        n = 0
        for t in self._tasks:
            if t.category == old:
                t.category = new
                n += 1
        return n

    def delete_category_local(self, name: str) -> int:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.category != name]
        return before - len(self._tasks)

    # ---- helpers ----

    @staticmethod
    def _to_remote(changes: dict[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name, value in changes.items():
            if isinstance(value, TaskPriority):
                value = value.value
            out[_REMOTE_COLUMNS[name]] = value
        return out
