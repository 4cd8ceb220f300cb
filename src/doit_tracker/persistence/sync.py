# src/doit_tracker/persistence/sync.py

from __future__ import annotations

"""
Fire-and-forget synchronization of optimistic local changes.

Stores mutate in-memory state first, then hand the matching backend call to `SyncQueue.submit`.
The queue:
- schedules each call as an asyncio task on the running loop (issue order is start order),
- if no loop is running (sync callers, unit tests), defers the call; deferred calls are started
  ahead of the next call submitted on a running loop, or by `drain()`,
- logs failures and counts them; it never retries and never re-raises.

There is no ordering guarantee between two calls for the same entity beyond issue order:
whichever write reaches the backend last wins.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

SyncCall = Callable[..., Awaitable[Any]]


class SyncQueue:
    def __init__(self) -> None:
        self._inflight: set[asyncio.Task[None]] = set()
        self._deferred: list[tuple[str, SyncCall, tuple[Any, ...], dict[str, Any]]] = []
        self.failures = 0
        self.completed = 0

    @property
    def pending(self) -> int:
        return len(self._inflight) + len(self._deferred)

    def submit(self, label: str, fn: SyncCall, *args: Any, **kwargs: Any) -> None:
        """
        Schedule `fn(*args, **kwargs)` without waiting for it.

        `fn` is called lazily (inside the task), so nothing touches the backend
        until the event loop gets control back.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._deferred.append((label, fn, args, kwargs))
            logger.debug("sync deferred (no running loop): %s", label)
            return
        self._flush_deferred(loop)
        self._spawn(loop, label, fn, args, kwargs)

    def _flush_deferred(self, loop: asyncio.AbstractEventLoop) -> None:
        deferred, self._deferred = self._deferred, []
        for label, fn, args, kwargs in deferred:
            self._spawn(loop, label, fn, args, kwargs)

    def _spawn(
        self,
        loop: asyncio.AbstractEventLoop,
        label: str,
        fn: SyncCall,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> None:
        task = loop.create_task(self._run(label, fn, args, kwargs))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _run(self, label: str, fn: SyncCall, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        try:
            await fn(*args, **kwargs)
        except Exception:
            self.failures += 1
            logger.exception("sync failed: %s (local state kept)", label)
            return
        self.completed += 1
        logger.debug("sync ok: %s", label)

    async def drain(self) -> None:
        """Start deferred calls and wait until every submitted call has settled."""
        self._flush_deferred(asyncio.get_running_loop())

        while True:
            waiting = [t for t in self._inflight if not t.done()]
            if not waiting:
                break
            await asyncio.gather(*waiting, return_exceptions=True)
        self._inflight = {t for t in self._inflight if not t.done()}
