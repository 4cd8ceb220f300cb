# src/doit_tracker/habits/habit_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..core.dates import Cadence, date_key, is_valid_key


@dataclass(slots=True)
class Habit:
    id: str
    title: str
    cadence: Cadence
    # date-key -> True; a missing key means "not completed" (False is never stored).
    completions: dict[str, bool] = field(default_factory=dict)

    def to_record(self) -> dict[str, Any]:
        # Remote schema calls the cadence column "type".
        return {
            "id": self.id,
            "title": self.title,
            "type": self.cadence.value,
            "completions": dict(self.completions),
        }

    @classmethod
    def from_record(cls, raw: dict[str, Any], default_cadence: Cadence = Cadence.DAILY) -> Habit | None:
        hid = raw.get("id")
        title = str(raw.get("title") or "").strip()
        if hid is None or not title:
            return None
        cadence = Cadence.from_db(raw.get("type") or raw.get("cadence") or default_cadence)
        comps = raw.get("completions") or {}
        completions = {
            str(k): True
            for k, v in (comps.items() if isinstance(comps, dict) else [])
            if v and is_valid_key(str(k), cadence)
        }
        return cls(id=str(hid), title=title, cadence=cadence, completions=completions)


def toggle_completion(habit: Habit, point: date) -> dict[str, bool]:
    """
    Return the habit's completions with the key for `point` flipped.

    Pure: the habit is not modified. Toggling the same point twice yields the original map.
    """
    key = date_key(point, habit.cadence)
    new = dict(habit.completions)
    if new.get(key):
        del new[key]
    else:
        new[key] = True
    return new


def is_complete(habit: Habit, key: str) -> bool:
    return bool(habit.completions.get(key))
