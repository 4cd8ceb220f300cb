# src/doit_tracker/bootstrap.py

"""
Composition root.

- loads settings once,
- picks the persistence backend once (Supabase or local fallback),
- wires SyncQueue + stores + suggestion client into AppState,
- loads persisted data (seeding defaults on first run),
- switches the active identity at runtime (sign in / sign up / sign out) and reloads its data,
- drains pending synchronization on shutdown.

The UI layer talks to the stores on AppState; nothing below it branches on which backend is active.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

from .config import get_settings
from .core.dates import Cadence
from .core.ports import KIND_CATEGORIES, KIND_HABITS, KIND_TASKS, PersistenceBackend, SuggestionClient
from .core.state import AppState
from .habits.habit_models import Habit
from .habits.habit_store import HabitStore
from .llm.client import OpenRouterSuggestionClient
from .llm.offline import OfflineSuggestionClient
from .logging_setup import setup_logging
from .persistence.local_backend import LocalBackend
from .persistence.remote_backend import SupabaseBackend, create_backend
from .persistence.sync import SyncQueue
from .tasks.category_store import CategoryStore
from .tasks.task_models import Task, TaskPriority, now_ms
from .tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = ["Complete It", "Monthly", "Yearly"]

DEFAULT_HABITS: list[tuple[str, Cadence]] = [
    ("Deep Work (4h)", Cadence.DAILY),
    ("Physical Training", Cadence.DAILY),
    ("Zero Sugar", Cadence.DAILY),
    ("Financial Audit", Cadence.MONTHLY),
    ("Network Review", Cadence.MONTHLY),
]

DEFAULT_TASKS: list[tuple[str, str, TaskPriority]] = [
    ("Deploy Production Build", "Complete It", TaskPriority.HIGH),
    ("Q3 Financial Review", "Monthly", TaskPriority.MEDIUM),
    ("Launch Mobile App", "Yearly", TaskPriority.HIGH),
]


def _make_suggester(settings) -> SuggestionClient:
    try:
        return OpenRouterSuggestionClient(settings)
    except Exception:
        # No key (or SDK init failure): keep suggestions working with fixed lists.
        logger.info("LLM not configured; using offline suggestions.")
        return OfflineSuggestionClient()


def create_initial_state(
    settings=None,
    *,
    backend: PersistenceBackend | None = None,
    suggester: SuggestionClient | None = None,
) -> AppState:
    """
    Build AppState. No data is loaded yet (see load_state).

    backend/suggester are injectable for tests; by default they are chosen from settings.
    """
    if settings is None:
        settings = get_settings()

    if backend is None:
        backend = create_backend(settings)
    if suggester is None:
        suggester = _make_suggester(settings)

    sync = SyncQueue()
    tasks = TaskStore(backend, sync)
    return AppState(
        settings=settings,
        backend=backend,
        sync=sync,
        habits=HabitStore(backend, sync),
        tasks=tasks,
        categories=CategoryStore(backend, sync, tasks),
        suggester=suggester,
    )


async def _seed(state: AppState, kind: str, records: list[dict]) -> None:
    # Seeding goes through the normal backend path, awaited so it lands before first use.
    for r in records:
        try:
            await state.backend.insert(kind, r)
        except Exception:
            logger.exception("Seeding %s failed; defaults stay in memory only.", kind)
            return
    logger.info("Seeded %d default %s", len(records), kind)


async def load_state(state: AppState) -> AppState:
    """
    Load habits, categories and tasks from the active backend.

    - with Supabase and no signed-in user the stores are emptied (remote data is per user)
    - habits are split by cadence (the remote "type" column)
    - tasks are ordered by created_at
    - defaults are seeded for kinds never stored before (and for an empty category list)
    A failed read is logged and treated as an empty collection.
    """
    seed = bool(getattr(state.settings, "seed_defaults", True))
    state.user = _identity(state.backend)

    if isinstance(state.backend, SupabaseBackend) and state.backend.user_id is None:
        state.categories.load([])
        state.habits.load([])
        state.tasks.load([])
        state.loaded = True
        logger.info("No Supabase session; stores cleared until sign-in.")
        return state

    async def _list(kind: str) -> list[dict] | None:
        try:
            return await state.backend.list_all(kind)
        except Exception:
            logger.exception("Loading %s failed; starting empty.", kind)
            return []

    raw_habits = await _list(KIND_HABITS)
    raw_categories = await _list(KIND_CATEGORIES)
    raw_tasks = await _list(KIND_TASKS)

    # ---- categories ----
    names = [str(r.get("name") or "") for r in (raw_categories or [])]
    state.categories.load(names)
    if seed and not state.categories.names:
        state.categories.load(DEFAULT_CATEGORIES)
        await _seed(state, KIND_CATEGORIES, [{"name": n} for n in DEFAULT_CATEGORIES])

    # ---- habits ----
    if raw_habits is None and seed:
        habits = [Habit(id=str(uuid.uuid4()), title=t, cadence=c) for t, c in DEFAULT_HABITS]
        await _seed(state, KIND_HABITS, [h.to_record() for h in habits])
    else:
        habits = [h for h in (Habit.from_record(r) for r in (raw_habits or [])) if h is not None]
    state.habits.load(habits)

    # ---- tasks ----
    if raw_tasks is None and seed:
        base = now_ms()
        tasks = [
            Task(id=str(uuid.uuid4()), title=t, category=c, priority=p, completed=False, created_at=base + i)
            for i, (t, c, p) in enumerate(DEFAULT_TASKS)
            if state.categories.exists(c)
        ]
        await _seed(state, KIND_TASKS, [t.to_record() for t in tasks])
    else:
        tasks = [t for t in (Task.from_record(r) for r in (raw_tasks or [])) if t is not None]
        # Tasks must always reference a live category: recreate any that only tasks still name.
        restored = [t.category for t in tasks if state.categories.add(t.category)]
        if restored:
            logger.warning("Recreated categories referenced only by tasks: %s", restored)
    state.tasks.load(tasks)

    state.loaded = True
    logger.info(
        "Loaded habits daily=%d monthly=%d categories=%d tasks=%d",
        len(state.habits.daily),
        len(state.habits.monthly),
        len(state.categories.names),
        len(state.tasks.tasks),
    )
    return state


def _identity(backend: PersistenceBackend) -> str | None:
    if isinstance(backend, SupabaseBackend):
        return backend.email if backend.user_id else None
    if isinstance(backend, LocalBackend):
        return backend.user
    return None


async def sign_in(state: AppState, email: str, password: str) -> bool:
    """
    Make `email` the active identity and reload its data.

    Supabase: password sign-in. Local fallback: the identity is only a namespace for local keys
    (the password is required but not checked) and is remembered across restarts.
    Returns False (nothing changes) on missing credentials or a rejected sign-in.
    """
    email = (email or "").strip()
    if not email or not password:
        logger.info("Sign-in rejected: email and password required.")
        return False

    # Writes issued under the previous identity must land under its keys / session.
    await state.sync.drain()

    backend = state.backend
    if isinstance(backend, SupabaseBackend):
        if await asyncio.to_thread(backend.sign_in, email, password) is None:
            return False
    elif isinstance(backend, LocalBackend):
        backend.switch_user(email)
    else:
        logger.warning("Backend %s has no identity session.", type(backend).__name__)
        return False

    await load_state(state)
    return True


async def sign_up(state: AppState, email: str, password: str) -> bool:
    """
    Register with Supabase; reloads only if the new account is signed in right away
    (no email confirmation). In local mode this is the same as sign_in.
    """
    if not isinstance(state.backend, SupabaseBackend):
        return await sign_in(state, email, password)

    email = (email or "").strip()
    if not email or not password:
        logger.info("Sign-up rejected: email and password required.")
        return False

    await state.sync.drain()
    if not await asyncio.to_thread(state.backend.sign_up, email, password):
        return False
    if state.backend.user_id is not None:
        await load_state(state)
    return True


async def sign_out(state: AppState) -> None:
    """Clear the active identity and reload (local: un-namespaced data; Supabase: empty stores)."""
    await state.sync.drain()

    backend = state.backend
    if isinstance(backend, SupabaseBackend):
        await asyncio.to_thread(backend.sign_out)
    elif isinstance(backend, LocalBackend):
        backend.switch_user(None)

    await load_state(state)


async def start(settings=None) -> AppState:
    """Logging + state + initial load, in that order."""
    if settings is None:
        settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    setup_logging(log_dir=settings.data_dir, console_level=getattr(logging, level_name, logging.INFO))
    logger.info("Starting %s...", getattr(settings, "app_name", "doit"))

    state = create_initial_state(settings)
    return await load_state(state)


async def shutdown(state: AppState) -> None:
    """Wait for every in-flight synchronization call (best-effort; failures are already logged)."""
    await state.sync.drain()
    logger.info("Shutdown: sync ok=%d failed=%d", state.sync.completed, state.sync.failures)
