"""Tests for date parsing, durations and per-date facts."""

from datetime import date, datetime

import pytest

from decoder.analyzers.dates import (
    calendar_components,
    date_facts,
    day_difference,
    moon_phase,
    parse_date,
)
from decoder.core.models import MoonPhase


class TestParseDate:

    def test_iso(self):
        assert parse_date("2024-04-08") == date(2024, 4, 8)

    def test_free_form(self):
        assert parse_date("March 22, 1832") == date(1832, 3, 22)

    def test_year_only_defaults_to_january_first(self):
        assert parse_date("2024") == date(2024, 1, 1)

    def test_objects(self):
        assert parse_date(datetime(2024, 4, 8, 13, 5)) == date(2024, 4, 8)
        assert parse_date(date(2024, 4, 8)) == date(2024, 4, 8)

    @pytest.mark.parametrize("value", ["", "   ", "not a date", None, 42])
    def test_unparseable(self, value):
        assert parse_date(value) is None


class TestCalendarComponents:

    def test_simple(self):
        assert calendar_components(date(2024, 1, 1), date(2024, 2, 3)) == (0, 1, 2)

    def test_month_end_start(self):
        assert calendar_components(date(2024, 1, 31), date(2024, 3, 1)) == (0, 1, 1)

    def test_years(self):
        assert calendar_components(date(2000, 6, 15), date(2024, 6, 14)) == (23, 11, 30)


class TestDayDifference:

    @pytest.mark.parametrize(
        "include_start,include_end,expected",
        [(True, False, 30), (True, True, 31), (False, True, 30), (False, False, 29)],
    )
    def test_endpoint_rules(self, include_start, include_end, expected):
        diff = day_difference(
            date(2024, 1, 1),
            date(2024, 1, 31),
            include_start=include_start,
            include_end=include_end,
        )
        assert diff.total_days == expected

    def test_never_negative(self):
        same = date(2024, 1, 1)
        diff = day_difference(same, same, include_start=False, include_end=False)
        assert diff.total_days == 0

    def test_reversed_input(self):
        diff = day_difference(date(2024, 1, 31), date(2024, 1, 1))
        assert diff.is_reversed
        assert diff.total_days == 30

    def test_derived_units(self):
        diff = day_difference(date(2024, 1, 1), date(2024, 12, 31), include_end=True)
        assert diff.total_days == 366
        assert diff.total_weeks == 52
        assert diff.total_hours == 366 * 24
        assert diff.total_seconds == 366 * 86400
        assert (diff.years, diff.months, diff.days) == (1, 0, 0)


class TestDateFacts:

    def test_moon_phases(self):
        assert moon_phase(date(2024, 4, 8)) == MoonPhase.NEW_MOON
        assert moon_phase(date(2024, 4, 23)) == MoonPhase.FULL_MOON

    def test_facts(self):
        facts = date_facts(date(2024, 4, 8))
        assert facts.day_of_week == "Mon"
        assert facts.week_of_year == 15
        assert facts.day_of_year == 99
        assert facts.numerology == 2
