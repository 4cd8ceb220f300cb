# src/doit_tracker/llm/suggestions.py

from __future__ import annotations

import logging

from ..core.ports import SuggestionClient

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5


def _clean(items: list[str]) -> list[str]:
    out: list[str] = []
    for raw in items:
        s = str(raw or "").strip()
        if s and s not in out:
            out.append(s)
    return out[:MAX_SUGGESTIONS]


def _ask(client: SuggestionClient, prompt: str) -> list[str]:
    try:
        return _clean(client.suggest(prompt))
    except Exception:
        # Suggestions are a nicety; the board must keep working without them.
        logger.exception("Suggestion client failed")
        return []


def suggest_habits(client: SuggestionClient, goal: str) -> list[str]:
    goal = (goal or "").strip()
    if not goal:
        return []
    return _ask(
        client,
        f"Suggest 5 short, actionable daily habits for someone who wants to: {goal}. "
        "Keep them under 5 words each.",
    )


def suggest_tasks(client: SuggestionClient, project: str) -> list[str]:
    project = (project or "").strip()
    if not project:
        return []
    return _ask(client, f"Break down this project into 3-5 high-level tasks: {project}.")
