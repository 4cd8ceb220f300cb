# src/doit_tracker/habits/progress.py

from __future__ import annotations

"""
Read-side derivations for the protocol grid.

Everything here is pure and recomputed on every render; nothing is cached and
nothing mutates habits.
"""

import math
from collections.abc import Sequence
from datetime import date

from ..core.dates import (
    Cadence,
    Granularity,
    add_periods,
    date_key,
    days_in_month,
    months_in_year,
    previous_period,
    same_day,
    same_month,
)
from .habit_models import Habit, is_complete


def streak(habit: Habit, reference: date | None = None) -> int:
    """
    Number of consecutive completed periods ending at (or just before) `reference`.

    An incomplete current period does not break the chain: counting then starts
    from the previous period. Each step either hits an existing key or stops, so
    the loop runs at most len(completions) + 1 times.
    """
    cursor = reference or date.today()
    cadence = habit.cadence

    if not is_complete(habit, date_key(cursor, cadence)):
        cursor = previous_period(cursor, cadence)

    count = 0
    while is_complete(habit, date_key(cursor, cadence)):
        count += 1
        cursor = previous_period(cursor, cadence)
    return count


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def progress_fractions(habits: Sequence[Habit], columns: Sequence[date]) -> list[int]:
    """Percent (0..100) of habits completed per column; all zeros for no habits."""
    if not habits:
        return [0 for _ in columns]
    total = len(habits)
    out: list[int] = []
    for col in columns:
        done = sum(1 for h in habits if is_complete(h, date_key(col, h.cadence)))
        out.append(_round_half_up(100 * done / total))
    return out


def period_columns(anchor: date, cadence: Cadence) -> list[date]:
    """Grid columns: days of the anchor's month (DAILY) or months of its year (MONTHLY)."""
    if Cadence(cadence) is Cadence.DAILY:
        return days_in_month(anchor)
    return months_in_year(anchor)


def shift_view(anchor: date, cadence: Cadence, n: int) -> date:
    """Page the grid: by months for the daily view, by years for the monthly view."""
    step = Granularity.MONTH if Cadence(cadence) is Cadence.DAILY else Granularity.YEAR
    return add_periods(anchor, n, step)


def is_current(column: date, cadence: Cadence, today: date | None = None) -> bool:
    today = today or date.today()
    if Cadence(cadence) is Cadence.DAILY:
        return same_day(column, today)
    return same_month(column, today)
