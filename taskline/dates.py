"""Resolve loose date phrases ("tomorrow", "next fri", "3/5") to ISO dates.

Every function here is total: a phrase that is not a date yields ``None``.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, timedelta

MONTH_NAMES = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]
WEEKDAY_NAMES = [
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
]

TODAY_WORDS = {"today", "tod"}
TOMORROW_WORDS = {"tomorrow", "tom", "tmr", "tmrw"}

RE_WEEKDAY = re.compile(r"^(?P<next>next\s+)?(?P<day>[a-z]+)$")
RE_RELATIVE = re.compile(
    r"^(?:in\s+)?(?P<count>a|an|\d+)\s+(?P<unit>day|days|week|weeks|month|months)$"
)
RE_MONTH_DAY = re.compile(r"^(?P<month>[a-z]{3,})\s+(?P<day>\d{1,2})$")
RE_DAY_MONTH = re.compile(r"^(?P<day>\d{1,2})\s+(?P<month>[a-z]{3,})$")
RE_ISO = re.compile(r"^(?P<year>\d{4})[-/](?P<month>\d{1,2})[-/](?P<day>\d{1,2})$")
RE_US = re.compile(r"^(?P<month>\d{1,2})/(?P<day>\d{1,2})(?:/(?P<year>\d{4}|\d{2}))?$")


def resolve_date(
    phrase: str,
    today: date | None = None,
    week_start: int = 0,
) -> str | None:
    """Resolve ``phrase`` to a ``YYYY-MM-DD`` string, or None if it is not a date.

    Args:
        phrase: Free-form text such as "tomorrow", "next friday", "in 2 weeks",
            "jan 15", "2025-01-15" or "1/15/25".
        today: Reference day; defaults to ``date.today()``.
        week_start: Weekday that starts a week (Monday is 0).
    """
    resolved = resolve(phrase, today=today, week_start=week_start)
    return resolved.isoformat() if resolved is not None else None


def resolve(phrase: str, today: date | None = None, week_start: int = 0) -> date | None:
    """Same as :func:`resolve_date` but returns a ``date``."""
    text = " ".join(phrase.lower().split())
    if not text:
        return None
    if today is None:
        today = date.today()

    for rule in (
        _keyword,
        _weekday,
        _next_period,
        _relative,
        _month_day,
        _iso,
        _us,
    ):
        result = rule(text, today, week_start)
        if result is not None:
            return result
    return None


def next_week_start(today: date, week_start: int = 0) -> date:
    """The first ``week_start`` weekday strictly after ``today``."""
    days = (week_start - today.weekday() + 7) % 7
    return today + timedelta(days=days or 7)


def add_months(day: date, months: int) -> date:
    """Add calendar months, clamping to the last day of the target month."""
    index = day.month - 1 + months
    year = day.year + index // 12
    month = index % 12 + 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


# ---------------------------------------------------------------------------
# Rules, tried in order
# ---------------------------------------------------------------------------


def _keyword(text: str, today: date, week_start: int) -> date | None:
    if text in TODAY_WORDS:
        return today
    if text in TOMORROW_WORDS:
        return today + timedelta(days=1)
    if text == "yesterday":
        return today - timedelta(days=1)
    return None


def _weekday(text: str, today: date, week_start: int) -> date | None:
    m = RE_WEEKDAY.match(text)
    if not m:
        return None
    target = _weekday_index(m.group("day"))
    if target is None:
        return None

    days = (target - today.weekday() + 7) % 7 or 7
    result = today + timedelta(days=days)
    if m.group("next") and result < next_week_start(today, week_start):
        result += timedelta(days=7)
    return result


def _next_period(text: str, today: date, week_start: int) -> date | None:
    if text == "next week":
        return next_week_start(today, week_start)
    if text == "next month":
        return add_months(today.replace(day=1), 1)
    return None


def _relative(text: str, today: date, week_start: int) -> date | None:
    m = RE_RELATIVE.match(text)
    if not m:
        return None
    raw = m.group("count")
    unit = m.group("unit").rstrip("s")
    try:
        count = 1 if raw in ("a", "an") else int(raw)
        if unit == "day":
            return today + timedelta(days=count)
        if unit == "week":
            return today + timedelta(weeks=count)
        return add_months(today, count)
    except (OverflowError, ValueError):
        return None


def _month_day(text: str, today: date, week_start: int) -> date | None:
    m = RE_MONTH_DAY.match(text) or RE_DAY_MONTH.match(text)
    if not m:
        return None
    month = _month_index(m.group("month"))
    if month is None:
        return None
    return _next_occurrence(today, month, int(m.group("day")))


def _iso(text: str, today: date, week_start: int) -> date | None:
    m = RE_ISO.match(text)
    if not m:
        return None
    return _make_date(int(m.group("year")), int(m.group("month")), int(m.group("day")))


def _us(text: str, today: date, week_start: int) -> date | None:
    m = RE_US.match(text)
    if not m:
        return None
    month, day = int(m.group("month")), int(m.group("day"))
    raw_year = m.group("year")
    if raw_year is None:
        return _next_occurrence(today, month, day)
    year = int(raw_year)
    if len(raw_year) == 2:
        year += 2000
    return _make_date(year, month, day)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _next_occurrence(today: date, month: int, day: int) -> date | None:
    """First ``month``/``day`` on or after today; Feb 29 waits for a leap year."""
    for year in range(today.year, today.year + 9):
        result = _make_date(year, month, day)
        if result is not None and result >= today:
            return result
    return None


def _weekday_index(name: str) -> int | None:
    for i, full in enumerate(WEEKDAY_NAMES):
        if name == full or name == full[:3]:
            return i
    return None


def _month_index(prefix: str) -> int | None:
    for i, full in enumerate(MONTH_NAMES, start=1):
        if full.startswith(prefix):
            return i
    return None
