"""
Chronology Matcher
===================

Computes day spans between dated facts about entities and flags spans
that hit a fixed watchlist of control numbers.

For every entity the matcher emits:

1. a birth/founding -> death comparison when both events exist;
2. for each dated event, a comparison against the reference date
   (skipped when the dates are identical);
3. for each dated event, a comparison against the "next astronomical
   event" entity, if one is present and is not the entity itself;
4. for each dated event, a comparison against every ritual date,
   rebuilt for the event's year and for the reference year.

Each comparison yields two rows, exclusive (``|d2 - d1|`` days) and
inclusive (exclusive + 1). Every count is checked raw, after the
master-aware digit sum and after zero-dropping. The match label
prefers the raw count, then the zero-dropped value, then the digit sum.

The product is deliberately exhaustive: symmetric or overlapping
comparisons are all kept. Unparseable dates drop their comparison
without raising. Rows are stable-sorted with control matches first.

References:
    - Dershowitz, N. & Reingold, E. M. (2018). Calendrical
      Calculations. 4th ed. Cambridge University Press.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Iterator, Optional, Sequence

from shared.math_utils import digit_sum, drop_zeros, reduce_with_masters
from shared.logger import DecoderLogger
from decoder.analyzers.dates import calendar_components, date_text, parse_date
from decoder.core.models import (
    DateNumerology,
    DateSpanAnalysis,
    DayCountRow,
    EntityChronology,
    ReducedValue,
)


# ===================================================================== #
#  Catalogs
# ===================================================================== #

CONTROL_NUMBERS: frozenset[int] = frozenset(
    {33, 56, 84, 113, 171, 201, 223, 322, 911}
)


@dataclass(frozen=True)
class RitualDate:
    """A recurring month/day evaluated against any year."""

    name: str
    month: int
    day: int

    def in_year(self, year: int) -> date:
        return date(year, self.month, self.day)


RITUAL_DATES: tuple[RitualDate, ...] = (
    RitualDate("Skull & Bones (322)", 3, 22),
    RitualDate("Ignatius Loyola Birth", 10, 23),
    RitualDate("Jesuit Founding", 8, 15),
    RitualDate("Pope Francis Birth", 12, 17),
    RitualDate("May Day (Illuminati)", 5, 1),
    RitualDate("9/11 Ritual", 9, 11),
    RitualDate("Halloween/Reformation", 10, 31),
    RitualDate("Christmas", 12, 25),
    RitualDate("Spring Equinox", 3, 20),
    RitualDate("Summer Solstice", 6, 21),
    RitualDate("Autumn Equinox", 9, 22),
    RitualDate("Winter Solstice", 12, 21),
    RitualDate("Balfour Declaration", 11, 2),
    RitualDate("Hiroshima", 8, 6),
)

_BIRTH_KEYWORDS: tuple[str, ...] = ("birth", "founding")
_DEATH_KEYWORDS: tuple[str, ...] = ("death",)


# ===================================================================== #
#  Control checks
# ===================================================================== #


def is_control_number(value: int) -> bool:
    """Whether *value* is on the control-number watchlist."""
    return value in CONTROL_NUMBERS


@dataclass(frozen=True)
class ControlCheck:
    """Digit transforms of one day count and the resulting match."""

    count: int
    digit_sum: int
    zero_dropped: int
    matched_value: Optional[int]
    label: Optional[str]

    @property
    def is_match(self) -> bool:
        return self.matched_value is not None


def check_control(count: int) -> ControlCheck:
    """Test *count*, its digit sum and its zero-dropped form.

    Priority when several transforms match: raw, zero-dropped, sum.
    """
    summed = reduce_with_masters(count)
    dropped = drop_zeros(count)

    matched: Optional[int] = None
    label: Optional[str] = None
    if is_control_number(count):
        matched, label = count, f"{count}"
    elif is_control_number(dropped):
        matched, label = dropped, f"{dropped} (Zero Drop)"
    elif is_control_number(summed):
        matched, label = summed, f"{summed} (Sum)"

    return ControlCheck(
        count=count,
        digit_sum=summed,
        zero_dropped=dropped,
        matched_value=matched,
        label=label,
    )


# ===================================================================== #
#  Standalone span helpers
# ===================================================================== #


def date_span(first: Any, second: Any) -> Optional[DateSpanAnalysis]:
    """Span between two dates with calendar components and a control check.

    Returns ``None`` if either date cannot be parsed.
    """
    d1, d2 = parse_date(first), parse_date(second)
    if d1 is None or d2 is None:
        return None

    start, end = (d1, d2) if d1 <= d2 else (d2, d1)
    total_days = (end - start).days
    years, months, days = calendar_components(start, end)
    check = check_control(total_days)

    return DateSpanAnalysis(
        total_days=total_days,
        years=years,
        months=months,
        days=days,
        digit_sum=check.digit_sum,
        zero_dropped=check.zero_dropped,
        is_control_match=check.is_match,
        control_match_value=check.matched_value,
    )


def date_numerology(value: Any) -> Optional[DateNumerology]:
    """Digit sums of a date: full date, month + day, and year.

    Each sum is paired with its master-aware reduction. Text containing
    no digit at all, or that cannot be parsed, yields ``None``.
    """
    if isinstance(value, str) and not any(ch.isdigit() for ch in value):
        return None
    parsed = parse_date(value)
    if parsed is None:
        return None

    month_sum = digit_sum(parsed.month)
    day_sum = digit_sum(parsed.day)
    year_sum = digit_sum(parsed.year)

    def reduced(total: int) -> ReducedValue:
        return ReducedValue(sum=total, reduced=reduce_with_masters(total))

    return DateNumerology(
        full_date=reduced(month_sum + day_sum + year_sum),
        month_day=reduced(month_sum + day_sum),
        year=reduced(year_sum),
    )


# ===================================================================== #
#  Matcher
# ===================================================================== #


class ChronologyMatcher:
    """Builds the day-count comparison table for a set of chronologies.

    Args:
        astronomical_entity_type: ``entity_type`` marking the
            "next astronomical event" entity.
        astronomical_keywords: Substrings of ``entity_name`` that the
            astronomical entity must contain (any one suffices).
        reference_label: Label used for comparisons against the
            reference date.
        logger: Logger to use instead of a default ``chronology`` one.

    Usage::

        matcher = ChronologyMatcher()
        rows = matcher.analyze(entities, "2024-04-08")
        hits = [r for r in rows if r.is_control_match]
    """

    def __init__(
        self,
        *,
        astronomical_entity_type: str = "Astronomical",
        astronomical_keywords: Sequence[str] = ("Eclipse", "Moon"),
        reference_label: str = "Reference",
        logger: Optional[DecoderLogger] = None,
    ) -> None:
        self.astronomical_entity_type = astronomical_entity_type
        self.astronomical_keywords = tuple(astronomical_keywords)
        self.reference_label = reference_label
        self.logger = logger or DecoderLogger("chronology")

    # ------------------------------------------------------------------ #
    #  Public API
    # ------------------------------------------------------------------ #

    def analyze(
        self,
        entities: Sequence[EntityChronology],
        reference_date: Any = None,
    ) -> list[DayCountRow]:
        """Compare every dated event and return the sorted row table.

        Args:
            entities: Caller-supplied chronologies.
            reference_date: Date every event is compared against (usually
                the article date). ``None`` or an unparseable value skips
                the reference comparisons.

        Returns:
            Rows with control matches first, generation order otherwise.
        """
        with self.logger.timed("chronology analysis"):
            rows = list(self.iter_rows(entities, reference_date))
            rows.sort(key=lambda row: not row.is_control_match)

        self.logger.debug(
            "Generated %d rows (%d control matches)",
            len(rows),
            sum(1 for row in rows if row.is_control_match),
        )
        return rows

    def iter_rows(
        self,
        entities: Sequence[EntityChronology],
        reference_date: Any = None,
    ) -> Iterator[DayCountRow]:
        """Yield rows in generation order, unsorted.

        Useful for chunked consumption of very large inputs.
        """
        reference = parse_date(reference_date)
        reference_text = date_text(reference_date) if reference else ""

        eclipse_entity = self.find_astronomical_entity(entities)
        eclipse_value: Any = None
        if eclipse_entity is not None and eclipse_entity.events:
            eclipse_value = eclipse_entity.events[0].date_value

        for entity in entities:
            name = entity.entity_name

            birth = self._find_event(entity, _BIRTH_KEYWORDS)
            death = self._find_event(entity, _DEATH_KEYWORDS)
            if birth is not None and death is not None:
                yield from self._compare(
                    birth.date_value, death.date_value, f"{name}: Birth → Death"
                )

            for event in entity.events:
                if not event.date_value:
                    continue
                event_date = parse_date(event.date_value)

                if reference is not None:
                    yield from self._compare(
                        event.date_value,
                        reference_text,
                        f"{name} ({event.date_type}) → {self.reference_label}",
                    )

                if eclipse_value and entity is not eclipse_entity:
                    yield from self._compare(
                        event.date_value, eclipse_value, f"{name} → Next Eclipse"
                    )

                for year in self._years_to_check(event_date, reference):
                    for ritual in RITUAL_DATES:
                        yield from self._compare(
                            event.date_value,
                            ritual.in_year(year),
                            f"{name} → {ritual.name} ({year})",
                        )

    def find_astronomical_entity(
        self, entities: Iterable[EntityChronology]
    ) -> Optional[EntityChronology]:
        """First entity of the astronomical type whose name has a keyword."""
        for entity in entities:
            if entity.entity_type != self.astronomical_entity_type:
                continue
            if any(word in entity.entity_name for word in self.astronomical_keywords):
                return entity
        return None

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _find_event(entity: EntityChronology, keywords: tuple[str, ...]):
        for event in entity.events:
            label = event.date_type.lower()
            if any(word in label for word in keywords):
                return event
        return None

    @staticmethod
    def _years_to_check(
        event_date: Optional[date], reference: Optional[date]
    ) -> list[int]:
        years: list[int] = []
        if event_date is not None:
            years.append(event_date.year)
        if reference is not None and reference.year not in years:
            years.append(reference.year)
        return years

    def _compare(self, first: Any, second: Any, label: str) -> Iterator[DayCountRow]:
        """Exclusive then inclusive row for one pair; nothing if unusable."""
        d1, d2 = parse_date(first), parse_date(second)
        if d1 is None or d2 is None:
            self.logger.debug("Skipping %s: unparseable date", label)
            return
        if d1 == d2:
            return

        exclusive = abs((d2 - d1).days)
        start_text, end_text = date_text(first), date_text(second)
        yield self._row(label, start_text, end_text, exclusive, inclusive=False)
        yield self._row(label, start_text, end_text, exclusive + 1, inclusive=True)

    @staticmethod
    def _row(
        label: str, start: str, end: str, count: int, *, inclusive: bool
    ) -> DayCountRow:
        check = check_control(count)
        return DayCountRow(
            comparison=label,
            start_date=start,
            end_date=end,
            day_count=count,
            is_inclusive=inclusive,
            digit_sum=check.digit_sum,
            zero_dropped=check.zero_dropped,
            is_control_match=check.is_match,
            control_match_value=check.label,
            notes=f"Sync: {check.label}" if check.is_match else "",
        )
