# src/doit_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The stores depend on Protocols instead of concrete implementations.
This keeps the persistence backend (Supabase vs local) and the LLM provider swappable,
and lets tests plug in deterministic fakes.
"""

from typing import Any, Protocol

Record = dict[str, Any]

# Entity kinds (table names remotely, key prefixes locally).
KIND_HABITS = "habits"
KIND_TASKS = "tasks"
KIND_CATEGORIES = "categories"


class PersistenceBackend(Protocol):
    """
    Key-value CRUD collection per entity kind.

    All calls are async and are issued fire-and-forget by the stores (through SyncQueue);
    a raised exception is logged by the queue and never rolls back local state.
    """

    async def insert(self, kind: str, record: Record) -> None: ...

    async def update(self, kind: str, record_id: str, fields: Record) -> None: ...

    async def delete(self, kind: str, record_id: str) -> None: ...

    async def bulk_update(self, kind: str, match_field: str, match_value: Any, fields: Record) -> None: ...

    async def bulk_delete(self, kind: str, match_field: str, match_value: Any) -> None: ...

    async def list_all(self, kind: str) -> list[Record] | None:
        """Load-time read. None means "nothing was ever stored under this kind"."""
        ...


class KeyValueStore(Protocol):
    """String key-value store used by the local fallback backend."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class SuggestionClient(Protocol):
    """Free text prompt -> short list of titles. Best-effort, must not raise."""

    def suggest(self, prompt: str) -> list[str]: ...
