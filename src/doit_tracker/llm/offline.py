# src/doit_tracker/llm/offline.py

from __future__ import annotations


class OfflineSuggestionClient:
    """
    Deterministic suggestions used when no LLM is configured.

    Behavior:
    - task breakdown prompts -> a generic three-step plan
    - everything else (habit prompts) -> three starter habits
    """

    HABITS = ["Drink 2L water", "Read 10 pages", "10 min meditation"]
    TASKS = ["Plan project", "Execute phase 1", "Review"]

    def suggest(self, prompt: str) -> list[str]:
        if "break down this project" in (prompt or "").lower():
            return list(self.TASKS)
        return list(self.HABITS)
