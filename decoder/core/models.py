"""
Decoder Core Data Models
=========================

Pydantic models for the decoder's symbolic-value engine. They cover
cipher totals and per-character breakdowns, number-theory reports,
dated entity chronologies with their day-count comparison rows, calendar
facts, and entries of the word/value match index.

Every result model is frozen: analyzers build a fresh instance per call
and nothing mutates it afterwards. All models serialise to JSON for the
CLI report layer.

References:
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
    - Sloane, N. J. A. The On-Line Encyclopedia of Integer Sequences.
      https://oeis.org/
"""

from __future__ import annotations

import datetime as _dt
import enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# ===================================================================== #
#  Enumerations
# ===================================================================== #


class CipherScheme(str, enum.Enum):
    """The closed set of letter-to-number encoding schemes.

    Values are the display names used in CSV headers and reports.
    Declaration order is the order reported by ``scheme_names()``.
    """

    ORDINAL = "Ordinal"
    REVERSE_ORDINAL = "Reverse Ordinal"
    REDUCTION = "Reduction"
    REVERSE_REDUCTION = "Reverse Reduction"
    CHALDEAN = "Chaldean"
    SEPTENARY = "Septenary"
    SUMERIAN = "Sumerian"
    LATIN = "Latin"
    FIBONACCI = "Fibonacci"
    PRIMES = "Primes"
    PI = "Pi"
    THREE_SIX_NINE = "Three Six Nine"
    KEYPAD = "Keypad"
    SATANIC = "Satanic"
    ENGLISH_KABBALAH = "English Kabbalah"
    TRIGRAMMATON = "Trigrammaton"
    TRIGONAL = "Trigonal"
    STANDARD = "Standard"
    SQUARES = "Squares"


class Confidence(str, enum.Enum):
    """How well a dated fact is sourced."""

    VERIFIED = "Verified"
    ESTIMATED = "Estimated"
    UNKNOWN = "Unknown"


# ===================================================================== #
#  Gematria Models
# ===================================================================== #


class CharValue(_FrozenModel):
    """One character of the input text and its scheme value.

    Attributes:
        char: The character exactly as it appeared (case preserved).
        value: Scheme value of the letter, 0 for non-letters.
    """

    char: str
    value: int = 0


# ===================================================================== #
#  Number Theory Models
# ===================================================================== #


class BasicProperties(_FrozenModel):
    """Divisors, primality and nearest special neighbors.

    Neighbor fields are ``None`` when no neighbor lies within the
    configured search limit. Both directions are capped, so for large
    numbers a ``prev_*`` field can be ``None`` even though a smaller
    neighbor exists (``classify(1_000_000)`` has ``prev_triangular=None``
    with the default limits, although 998991 is triangular).
    """

    divisors: list[int] = Field(default_factory=list)
    sum_divisors: int = 0
    is_prime: bool = False
    prev_prime: Optional[int] = None
    next_prime: Optional[int] = None
    prev_triangular: Optional[int] = None
    next_triangular: Optional[int] = None
    prev_fibonacci: Optional[int] = None
    next_fibonacci: Optional[int] = None
    prev_palindrome: Optional[int] = None
    next_palindrome: Optional[int] = None


class IdentityProperties(_FrozenModel):
    """Digital root and positional representations.

    Attributes:
        digital_root: ``1 + (n - 1) mod 9``.
        reduced_sum: Same value as ``digital_root``, kept for report parity.
        binary / octal / decimal / duodecimal / hexadecimal: Base 2, 8,
            10, 12 and 16 renderings, upper-case digits.
        is_magic_constant: Whether *n* is ``k(k^2+1)/2`` for k in 3..10.
        magic_order: The matching magic-square order, if any.
    """

    digital_root: int
    reduced_sum: int
    binary: str
    octal: str
    decimal: str
    duodecimal: str
    hexadecimal: str
    is_magic_constant: bool = False
    magic_order: Optional[int] = None


class Classification(_FrozenModel):
    """Figurate and recreational number classifications."""

    prime_index: Optional[int] = None
    is_triangular: bool = False
    triangular_index: Optional[int] = None
    is_square: bool = False
    is_cube: bool = False
    is_fibonacci: bool = False
    fibonacci_index: Optional[int] = None
    is_harshad: bool = False
    is_happy: bool = False
    is_pentagonal: bool = False
    is_tetrahedral: bool = False


class NumberReport(_FrozenModel):
    """Complete classification of a single positive integer."""

    number: int
    basic: BasicProperties
    identity: IdentityProperties
    classification: Classification


# ===================================================================== #
#  Chronology Models
# ===================================================================== #

DateInput = Union[_dt.date, str]


class DatedEvent(_FrozenModel):
    """A single dated fact about an entity.

    Attributes:
        date_type: Free-form label, e.g. ``"Date of Birth"`` or
            ``"Founding Date"``.
        date_value: A ``date`` or a date string (ISO or free-form).
        confidence: Sourcing confidence tag.
        source_url: Optional provenance link.
    """

    date_type: str
    date_value: DateInput
    confidence: Confidence = Confidence.UNKNOWN
    source_url: Optional[str] = None


class EntityChronology(_FrozenModel):
    """An entity and its ordered dated events."""

    entity_name: str
    entity_type: str = ""
    events: list[DatedEvent] = Field(default_factory=list)


class DayCountRow(_FrozenModel):
    """One day-count comparison between two dates.

    Attributes:
        comparison: Human-readable comparison label.
        start_date / end_date: The two dates, as supplied.
        day_count: Absolute span in days (+1 when inclusive).
        is_inclusive: Whether both endpoints are counted.
        digit_sum: Master-aware recursive digit sum of ``day_count``.
        zero_dropped: ``day_count`` with every ``0`` digit deleted.
        is_control_match: Whether any transform hit the watchlist.
        control_match_value: Label of the winning transform, e.g.
            ``"322"``, ``"201 (Zero Drop)"`` or ``"33 (Sum)"``.
        notes: ``"Sync: <label>"`` for matches, empty otherwise.
    """

    comparison: str
    start_date: str
    end_date: str
    day_count: int = Field(ge=0)
    is_inclusive: bool = False
    digit_sum: int = 0
    zero_dropped: int = 0
    is_control_match: bool = False
    control_match_value: Optional[str] = None
    notes: str = ""


class DateSpanAnalysis(_FrozenModel):
    """Span between two dates with its calendar components."""

    total_days: int
    years: int
    months: int
    days: int
    digit_sum: int
    zero_dropped: int
    is_control_match: bool = False
    control_match_value: Optional[int] = None


class ReducedValue(_FrozenModel):
    """A raw digit sum and its master-aware reduction."""

    sum: int
    reduced: int


class DateNumerology(_FrozenModel):
    """Numerology of a single calendar date."""

    full_date: ReducedValue
    month_day: ReducedValue
    year: ReducedValue


# ===================================================================== #
#  Calendar Models
# ===================================================================== #


class MoonPhase(str, enum.Enum):
    """The eight named phases of the synodic month."""

    NEW_MOON = "New Moon"
    WAXING_CRESCENT = "Waxing Crescent"
    FIRST_QUARTER = "First Quarter"
    WAXING_GIBBOUS = "Waxing Gibbous"
    FULL_MOON = "Full Moon"
    WANING_GIBBOUS = "Waning Gibbous"
    LAST_QUARTER = "Last Quarter"
    WANING_CRESCENT = "Waning Crescent"


class DateFacts(_FrozenModel):
    """Calendar facts for one date."""

    date: _dt.date
    day_of_week: str
    moon_phase: MoonPhase
    week_of_year: int
    day_of_year: int
    numerology: int


class DayDifference(_FrozenModel):
    """Duration between two dates with endpoint-inclusion rules applied."""

    start: _dt.date
    end: _dt.date
    include_start: bool = True
    include_end: bool = False
    is_reversed: bool = False
    total_days: int = 0
    years: int = 0
    months: int = 0
    days: int = 0
    total_weeks: int = 0
    total_hours: int = 0
    total_minutes: int = 0
    total_seconds: int = 0


# ===================================================================== #
#  Match Index Models
# ===================================================================== #


class MatchEntry(_FrozenModel):
    """A word from the match dataset and the scheme column it came from."""

    word: str
    scheme: str


class MatchDatabaseStatus(_FrozenModel):
    """Snapshot of the match index lifecycle."""

    is_loaded: bool = False
    is_loading: bool = False
    record_count: int = 0
    error: Optional[str] = None
