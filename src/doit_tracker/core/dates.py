# src/doit_tracker/core/dates.py

"""
Calendar helpers.

Two layers:
- date-keying: the canonical string key of a calendar point at a cadence
  (DAILY -> "YYYY-MM-DD", MONTHLY -> "YYYY-MM"); completions are stored under these keys.
- plain date arithmetic (add/start-of period, same-day, formatting, grid enumeration).

Points are `datetime.date` (a `datetime` works too; only its date part is used).
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from enum import StrEnum


class Cadence(StrEnum):
    """Granularity a habit is tracked at."""

    DAILY = "DAILY"
    MONTHLY = "MONTHLY"

    @classmethod
    def from_db(cls, raw: str | None) -> Cadence:
        if not raw:
            return cls.DAILY
        try:
            return cls(str(raw).upper())
        except ValueError:
            return cls.DAILY


class Granularity(StrEnum):
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


_KEY_FORMATS: dict[Cadence, str] = {
    Cadence.DAILY: "%Y-%m-%d",
    Cadence.MONTHLY: "%Y-%m",
}

_CADENCE_STEP: dict[Cadence, Granularity] = {
    Cadence.DAILY: Granularity.DAY,
    Cadence.MONTHLY: Granularity.MONTH,
}


def _as_date(point: date) -> date:
    return point.date() if isinstance(point, datetime) else point


# ---- date-keying ----

def date_key(point: date, cadence: Cadence) -> str:
    return _as_date(point).strftime(_KEY_FORMATS[Cadence(cadence)])


def previous_period(point: date, cadence: Cadence) -> date:
    return add_periods(point, -1, _CADENCE_STEP[Cadence(cadence)])


def is_valid_key(key: str, cadence: Cadence) -> bool:
    try:
        parsed = datetime.strptime(key, _KEY_FORMATS[Cadence(cadence)])
    except (TypeError, ValueError):
        return False
    return parsed.strftime(_KEY_FORMATS[Cadence(cadence)]) == key


# ---- date arithmetic ----

def _add_months(d: date, months: int) -> date:
    total = d.year * 12 + (d.month - 1) + months
    year, month0 = divmod(total, 12)
    month = month0 + 1
    # Clamp the day so Jan 31 - 1 month -> Dec 31, Mar 31 - 1 month -> Feb 28/29.
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_periods(point: date, n: int, granularity: Granularity | str) -> date:
    d = _as_date(point)
    g = Granularity(granularity)
    if g is Granularity.DAY:
        return d + timedelta(days=n)
    if g is Granularity.MONTH:
        return _add_months(d, n)
    return _add_months(d, 12 * n)


def start_of_period(point: date, granularity: Granularity | str) -> date:
    d = _as_date(point)
    g = Granularity(granularity)
    if g is Granularity.DAY:
        return d
    if g is Granularity.MONTH:
        return d.replace(day=1)
    return date(d.year, 1, 1)


def same_day(a: date, b: date) -> bool:
    return _as_date(a) == _as_date(b)


def same_month(a: date, b: date) -> bool:
    da, db = _as_date(a), _as_date(b)
    return (da.year, da.month) == (db.year, db.month)


def format_point(point: date, pattern: str) -> str:
    """strftime-style formatting of a calendar point."""
    return _as_date(point).strftime(pattern)


def days_in_month(point: date) -> list[date]:
    first = start_of_period(point, Granularity.MONTH)
    n = calendar.monthrange(first.year, first.month)[1]
    return [first + timedelta(days=i) for i in range(n)]


def months_in_year(point: date) -> list[date]:
    year = _as_date(point).year
    return [date(year, m, 1) for m in range(1, 13)]
