"""
Calendar Helpers
=================

Date parsing, calendar-component spans, the include-start / include-end
duration calculator and per-date calendar facts (weekday, moon phase,
ISO week, day of year, date numerology).

Dates may be given as ``date`` / ``datetime`` objects, ISO-8601 strings
or free-form strings understood by :mod:`dateutil.parser`. Missing
month or day components default to January / the 1st.

References:
    - Meeus, J. (1998). Astronomical Algorithms. 2nd ed.
      Willmann-Bell. Chapter 49 (phases of the Moon).
    - ISO 8601-1:2019. Date and time -- Representations for
      information interchange. Section 5.2.3 (week dates).
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from shared.math_utils import reduce_with_masters
from decoder.core.models import DateFacts, DayDifference, MoonPhase


_PARSE_DEFAULT = datetime(1, 1, 1)

# Mean synodic month in days and the epoch offset of the approximation
SYNODIC_MONTH: float = 29.5305882
_MOON_EPOCH_OFFSET: float = 694039.09

_PHASES: tuple[MoonPhase, ...] = (
    MoonPhase.NEW_MOON,
    MoonPhase.WAXING_CRESCENT,
    MoonPhase.FIRST_QUARTER,
    MoonPhase.WAXING_GIBBOUS,
    MoonPhase.FULL_MOON,
    MoonPhase.WANING_GIBBOUS,
    MoonPhase.LAST_QUARTER,
    MoonPhase.WANING_CRESCENT,
)

_WEEKDAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


# ===================================================================== #
#  Parsing
# ===================================================================== #


def parse_date(value: Any) -> Optional[date]:
    """Best-effort conversion of *value* to a :class:`date`.

    Returns ``None`` for empty, non-string or unparseable input instead
    of raising.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        return date_parser.parse(text, default=_PARSE_DEFAULT).date()
    except (ValueError, OverflowError):
        return None


def date_text(value: Any) -> str:
    """Render a supplied date value for display, keeping strings as given."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


# ===================================================================== #
#  Spans
# ===================================================================== #


def calendar_components(start: date, end: date) -> tuple[int, int, int]:
    """Whole years, months and days from *start* to *end* (``start <= end``).

    Month-end starts clamp the way :class:`relativedelta` does, so
    ``2024-01-31 -> 2024-03-01`` is one month and one day.
    """
    delta = relativedelta(end, start)
    return delta.years, delta.months, delta.days


def day_difference(
    start: date,
    end: date,
    *,
    include_start: bool = True,
    include_end: bool = False,
) -> DayDifference:
    """Duration between two dates with endpoint-inclusion rules.

    Counting both endpoints adds a day, counting neither removes one
    (never below zero). Reversed input is reordered and flagged.
    """
    is_reversed = start > end
    first, last = (end, start) if is_reversed else (start, end)

    adjustment = 0
    if include_start and include_end:
        adjustment = 1
    elif not include_start and not include_end:
        adjustment = -1

    total_days = max(0, (last - first).days + adjustment)

    calc_end = last + timedelta(days=adjustment)
    if calc_end < first:
        calc_end = first
    years, months, days = calendar_components(first, calc_end)

    total_hours = total_days * 24
    return DayDifference(
        start=start,
        end=end,
        include_start=include_start,
        include_end=include_end,
        is_reversed=is_reversed,
        total_days=total_days,
        years=years,
        months=months,
        days=days,
        total_weeks=total_days // 7,
        total_hours=total_hours,
        total_minutes=total_hours * 60,
        total_seconds=total_hours * 3600,
    )


# ===================================================================== #
#  Per-date facts
# ===================================================================== #


def moon_phase(d: date) -> MoonPhase:
    """Approximate moon phase from the mean synodic month.

    Counts days from a fixed epoch, takes the fractional part of the
    elapsed lunations and rounds it to one of eight phases.
    """
    year, month, day = d.year, d.month, d.day
    if month < 3:
        year -= 1
        month += 12
    month += 1

    elapsed = 365.25 * year + 30.6 * month + day - _MOON_EPOCH_OFFSET
    lunations = elapsed / SYNODIC_MONTH
    fraction = lunations - math.floor(lunations)
    index = math.floor(fraction * 8 + 0.5)
    if index >= 8:
        index = 0
    return _PHASES[index]


def date_numerology_sum(d: date) -> int:
    """Digits of month, day and year summed and reduced (masters kept)."""
    digits = f"{d.month}{d.day}{d.year}"
    return reduce_with_masters(sum(int(ch) for ch in digits))


def date_facts(d: date) -> DateFacts:
    """Weekday, moon phase, ISO week, day of year and numerology of *d*."""
    return DateFacts(
        date=d,
        day_of_week=_WEEKDAYS[d.weekday()],
        moon_phase=moon_phase(d),
        week_of_year=d.isocalendar()[1],
        day_of_year=d.timetuple().tm_yday,
        numerology=date_numerology_sum(d),
    )
