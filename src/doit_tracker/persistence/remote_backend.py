# src/doit_tracker/persistence/remote_backend.py

from __future__ import annotations

"""
Supabase-backed PersistenceBackend and the one-time backend selection.

The supabase client is synchronous; every call is pushed to a worker thread with
asyncio.to_thread so the event loop (and therefore the UI) is never blocked.
"""

import asyncio
import logging
from typing import Any

from supabase import Client, create_client

from ..core.ports import PersistenceBackend, Record
from .local_backend import LocalBackend, remembered_user
from .local_store import SQLiteKeyValueStore

logger = logging.getLogger(__name__)


class SupabaseBackend:
    """Entity kinds map 1:1 to tables (habits / tasks / categories)."""

    def __init__(self, client: Client, *, user_id: str | None = None) -> None:
        self._client = client
        self.user_id = user_id
        self.email: str | None = None

    def sign_in(self, email: str, password: str) -> str | None:
        """
        Password sign-in (auth itself is owned by Supabase).
        Returns the user id, or None on failure (logged, not raised).
        """
        try:
            res = self._client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception:
            logger.exception("Supabase sign-in failed for %s; session unchanged.", email)
            return None
        user = getattr(res, "user", None)
        self.user_id = str(user.id) if user is not None and getattr(user, "id", None) else None
        self.email = email if self.user_id else None
        logger.info("Supabase signed in user_id=%s", self.user_id)
        return self.user_id

    def sign_up(self, email: str, password: str) -> bool:
        """
        Register a new account. True when the request was accepted.

        With email confirmation enabled Supabase returns no session: the user stays signed out
        until they confirm and sign in. Otherwise the new session becomes active right away.
        """
        try:
            res = self._client.auth.sign_up({"email": email, "password": password})
        except Exception:
            logger.exception("Supabase sign-up failed for %s.", email)
            return False
        user = getattr(res, "user", None)
        if getattr(res, "session", None) is not None and user is not None:
            self.user_id = str(user.id)
            self.email = email
            logger.info("Supabase signed up and signed in user_id=%s", self.user_id)
        else:
            logger.info("Supabase sign-up for %s awaits email confirmation.", email)
        return True

    def sign_out(self) -> None:
        """Drop the session. Local identity is cleared even if the remote call fails (logged)."""
        try:
            self._client.auth.sign_out()
        except Exception:
            logger.exception("Supabase sign-out failed; clearing the session locally.")
        logger.info("Supabase signed out user_id=%s", self.user_id)
        self.user_id = None
        self.email = None

    # ---- sync bodies (run in a worker thread) ----

    def _insert(self, kind: str, record: Record) -> None:
        row = dict(record)
        if self.user_id:
            row["user_id"] = self.user_id
        self._client.table(kind).insert(row).execute()

    def _update(self, kind: str, field: str, value: Any, fields: Record) -> None:
        self._client.table(kind).update(fields).eq(field, value).execute()

    def _delete(self, kind: str, field: str, value: Any) -> None:
        self._client.table(kind).delete().eq(field, value).execute()

    def _select_all(self, kind: str) -> list[Record]:
        res = self._client.table(kind).select("*").execute()
        data = getattr(res, "data", None) or []
        return [r for r in data if isinstance(r, dict)]

    # ---- PersistenceBackend ----

    async def insert(self, kind: str, record: Record) -> None:
        await asyncio.to_thread(self._insert, kind, record)

    async def update(self, kind: str, record_id: str, fields: Record) -> None:
        await asyncio.to_thread(self._update, kind, "id", record_id, fields)

    async def delete(self, kind: str, record_id: str) -> None:
        await asyncio.to_thread(self._delete, kind, "id", record_id)

    async def bulk_update(self, kind: str, match_field: str, match_value: Any, fields: Record) -> None:
        await asyncio.to_thread(self._update, kind, match_field, match_value, fields)

    async def bulk_delete(self, kind: str, match_field: str, match_value: Any) -> None:
        await asyncio.to_thread(self._delete, kind, match_field, match_value)

    async def list_all(self, kind: str) -> list[Record] | None:
        # Remote tables always "exist": an empty table is [] rather than None.
        return await asyncio.to_thread(self._select_all, kind)


def create_backend(settings) -> PersistenceBackend:
    """
    Pick the persistence backend once, at startup.

    Supabase when URL + anon key are configured and the client can be created;
    otherwise the local SQLite key-value fallback, namespaced by DOIT_LOCAL_USER or else by the
    identity remembered from the last local sign-in.
    """
    if settings.remote_configured:
        try:
            client = create_client(str(settings.supabase_url).strip(), str(settings.supabase_anon_key).strip())
        except Exception:
            logger.exception("Supabase client creation failed; falling back to local storage.")
        else:
            backend = SupabaseBackend(client)
            if settings.supabase_email and settings.supabase_password:
                backend.sign_in(settings.supabase_email, settings.supabase_password)
            logger.info("Persistence: supabase url=%s", settings.supabase_url)
            return backend

    kv = SQLiteKeyValueStore(settings.local_db_path)
    user = settings.local_user or remembered_user(kv)
    logger.info("Persistence: local db=%s user=%s", settings.local_db_path, user)
    return LocalBackend(kv, user=user)
