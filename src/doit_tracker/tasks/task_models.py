# src/doit_tracker/tasks/task_models.py

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class TaskPriority(StrEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).upper())
        except ValueError:
            return cls.MEDIUM


def now_ms() -> int:
    return int(time.time() * 1000)


def ms_to_iso(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=UTC).isoformat().replace("+00:00", "Z")


def parse_created_at(raw: Any) -> int:
    """Epoch ms from either a number (local records) or an ISO-8601 string (remote rows)."""
    if raw is None or raw == "":
        return 0
    if isinstance(raw, (int, float)):
        return int(raw)
    s = str(raw).strip()
    try:
        return int(float(s))
    except ValueError:
        pass
    try:
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return 0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return round(dt.timestamp() * 1000)


@dataclass(slots=True)
class Task:
    id: str
    title: str
    category: str
    priority: TaskPriority
    completed: bool
    # Epoch milliseconds; tie-breaker for the default (load-time) order.
    created_at: int

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "priority": self.priority.value,
            "completed": self.completed,
            "created_at": ms_to_iso(self.created_at),
        }

    @classmethod
    def from_record(cls, raw: dict[str, Any]) -> Task | None:
        tid = raw.get("id")
        title = str(raw.get("title") or "").strip()
        # Older local records used "column" for the category.
        category = raw.get("category", raw.get("column"))
        if tid is None or not title or not category:
            return None
        return cls(
            id=str(tid),
            title=title,
            category=str(category),
            priority=TaskPriority.from_db(raw.get("priority")),
            completed=bool(raw.get("completed", False)),
            created_at=parse_created_at(raw.get("created_at", raw.get("createdAt"))),
        )
