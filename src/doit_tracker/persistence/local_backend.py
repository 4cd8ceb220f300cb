# src/doit_tracker/persistence/local_backend.py

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.ports import KeyValueStore, Record

logger = logging.getLogger(__name__)

KEY_PREFIX = "doit"

# Local identity that survives restarts (local fallback only).
CURRENT_USER_KEY = f"{KEY_PREFIX}_current_user"


def remembered_user(kv: KeyValueStore) -> str | None:
    return (kv.get(CURRENT_USER_KEY) or "").strip() or None


class LocalBackend:
    """
    PersistenceBackend over a string key-value store.

    Each entity kind is one JSON array of records stored under
    `doit_<kind>` (or `doit_<kind>_<user>` when a local identity is active).
    Every call is a read-modify-write of that array; the stores only ever issue one
    call at a time per event-loop turn, so no locking is needed.
    """

    def __init__(self, kv: KeyValueStore, *, user: str | None = None) -> None:
        self._kv = kv
        self._user = (user or "").strip() or None

    @property
    def user(self) -> str | None:
        return self._user

    def switch_user(self, user: str | None) -> None:
        """
        Activate (or clear, with None) the local identity and remember it under `doit_current_user`.
        Subsequent calls read and write that identity's keys.
        """
        self._user = (user or "").strip() or None
        if self._user:
            self._kv.set(CURRENT_USER_KEY, self._user)
        else:
            self._kv.delete(CURRENT_USER_KEY)
        logger.info("Local identity: %s", self._user or "(none)")

    def storage_key(self, kind: str) -> str:
        base = f"{KEY_PREFIX}_{kind}"
        return f"{base}_{self._user}" if self._user else base

    # ---- helpers ----

    def _read(self, kind: str) -> list[Record] | None:
        raw = self._kv.get(self.storage_key(kind))
        if raw is None:
            return None
        try:
            val = json.loads(raw)
        except json.JSONDecodeError:
            logger.exception("Corrupt local data for key=%s; treating as empty.", self.storage_key(kind))
            return None
        if not isinstance(val, list):
            logger.warning("Unexpected local data shape for key=%s; treating as empty.", self.storage_key(kind))
            return None
        return [r for r in val if isinstance(r, dict)]

    def _write(self, kind: str, records: list[Record]) -> None:
        self._kv.set(self.storage_key(kind), json.dumps(records, ensure_ascii=False))

    @staticmethod
    def _id_of(record: Record) -> Any:
        # Categories have no id column; their name is the identity.
        return record.get("id", record.get("name"))

    # ---- PersistenceBackend ----

    async def insert(self, kind: str, record: Record) -> None:
        records = self._read(kind) or []
        records.append(dict(record))
        self._write(kind, records)

    async def update(self, kind: str, record_id: str, fields: Record) -> None:
        records = self._read(kind) or []
        for r in records:
            if self._id_of(r) == record_id:
                r.update(fields)
        self._write(kind, records)

    async def delete(self, kind: str, record_id: str) -> None:
        records = self._read(kind) or []
        self._write(kind, [r for r in records if self._id_of(r) != record_id])

    async def bulk_update(self, kind: str, match_field: str, match_value: Any, fields: Record) -> None:
        records = self._read(kind) or []
        for r in records:
            if r.get(match_field) == match_value:
                r.update(fields)
        self._write(kind, records)

    async def bulk_delete(self, kind: str, match_field: str, match_value: Any) -> None:
        records = self._read(kind) or []
        self._write(kind, [r for r in records if r.get(match_field) != match_value])

    async def list_all(self, kind: str) -> list[Record] | None:
        return self._read(kind)
