# src/doit_tracker/habits/habit_store.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from datetime import date

from ..core.dates import Cadence
from ..core.ports import KIND_HABITS, PersistenceBackend
from ..persistence.sync import SyncQueue
from .habit_models import Habit, toggle_completion

logger = logging.getLogger(__name__)


class HabitStore:
    """
    In-memory habits, split by cadence, mirrored to the persistence backend.

    Every mutator applies its change locally first and then submits the matching backend
    call to the SyncQueue. A failed backend call never rolls the local change back:
    local state is the source of truth for the session.
    """

    def __init__(self, backend: PersistenceBackend, sync: SyncQueue) -> None:
        self._backend = backend
        self._sync = sync
        self._lists: dict[Cadence, list[Habit]] = {Cadence.DAILY: [], Cadence.MONTHLY: []}

    # ---- queries ----

    def habits(self, cadence: Cadence) -> list[Habit]:
        return list(self._lists[Cadence(cadence)])

    @property
    def daily(self) -> list[Habit]:
        return self.habits(Cadence.DAILY)

    @property
    def monthly(self) -> list[Habit]:
        return self.habits(Cadence.MONTHLY)

    def get(self, habit_id: str, cadence: Cadence) -> Habit | None:
        for h in self._lists[Cadence(cadence)]:
            if h.id == habit_id:
                return h
        return None

    # ---- loading ----

    def load(self, habits: Iterable[Habit]) -> None:
        """Replace in-memory state (load time only; nothing is persisted)."""
        self._lists = {Cadence.DAILY: [], Cadence.MONTHLY: []}
        for h in habits:
            self._lists[h.cadence].append(h)

    # ---- mutators ----

    def add(self, title: str, cadence: Cadence) -> Habit | None:
        title = (title or "").strip()
        if not title:
            return None

        habit = Habit(id=str(uuid.uuid4()), title=title, cadence=Cadence(cadence))
        self._lists[habit.cadence].append(habit)
        logger.debug("Habit added id=%s cadence=%s", habit.id, habit.cadence.value)

        # Same id locally and remotely.
        self._sync.submit(f"habit insert {habit.id}", self._backend.insert, KIND_HABITS, habit.to_record())
        return habit

    def toggle(self, habit_id: str, point: date, cadence: Cadence) -> bool:
        habit = self.get(habit_id, cadence)
        if habit is None:
            return False

        habit.completions = toggle_completion(habit, point)

        # Whole map, not a delta: last writer wins remotely.
        self._sync.submit(
            f"habit completions {habit_id}",
            self._backend.update,
            KIND_HABITS,
            habit_id,
            {"completions": dict(habit.completions)},
        )
        return True

    def delete(self, habit_id: str, cadence: Cadence) -> bool:
        items = self._lists[Cadence(cadence)]
        kept = [h for h in items if h.id != habit_id]
        if len(kept) == len(items):
            return False
        self._lists[Cadence(cadence)] = kept
        logger.debug("Habit deleted id=%s", habit_id)

        self._sync.submit(f"habit delete {habit_id}", self._backend.delete, KIND_HABITS, habit_id)
        return True
