"""
Decoder Engine
===============

Central orchestrator for the decoder toolkit. :class:`DecoderEngine`
owns one instance of each component and wires them together the way
the presentation layer consumes them: cipher totals feed match-index
lookups, dated entities feed the chronology matcher, and so on.

Architecture follows the Facade pattern (Gamma et al., 1994), providing
a simplified interface over the individual analyzer subsystems.

References:
    - Gamma, E., Helm, R., Johnson, R., & Vlissides, J. (1994).
      Design Patterns: Elements of Reusable Object-Oriented Software.
      Addison-Wesley.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

from shared.config import DecoderConfig
from shared.logger import DecoderLogger

from decoder.analyzers.chronology import ChronologyMatcher, date_numerology, date_span
from decoder.analyzers.dates import date_facts, day_difference, parse_date
from decoder.analyzers.gematria import CipherEngine, SchemeLike
from decoder.analyzers.number_theory import NumberTheoryClassifier
from decoder.collectors.match_index import (
    MatchDatabaseIndex,
    ProgressCallback,
    Source,
)
from decoder.core.errors import InvalidInputError
from decoder.core.models import (
    CharValue,
    CipherScheme,
    DateFacts,
    DateNumerology,
    DateSpanAnalysis,
    DayCountRow,
    DayDifference,
    EntityChronology,
    MatchDatabaseStatus,
    MatchEntry,
    NumberReport,
)


class DecoderEngine:
    """Facade over the cipher, number-theory, chronology and match-index
    components.

    Usage::

        engine = DecoderEngine()
        totals = engine.gematria("Solar Eclipse")
        report = engine.classify_number(totals[CipherScheme.ORDINAL])
        await engine.load_matches("matches.csv")
        engine.find_matches("Solar Eclipse")

    Attributes:
        config: Decoder configuration instance.
        ciphers: The cipher engine.
        numbers: The number-theory classifier.
        chronology_matcher: The chronology matcher.
        match_index: The caller-owned match index.
    """

    def __init__(
        self,
        config: Optional[DecoderConfig] = None,
        *,
        match_index: Optional[MatchDatabaseIndex] = None,
    ) -> None:
        self.config = config or DecoderConfig()
        self.logger = self._make_logger("engine")

        nt = self.config.number_theory
        self.ciphers = CipherEngine()
        self.numbers = NumberTheoryClassifier(
            prime_search_limit=nt.prime_search_limit,
            triangular_search_limit=nt.triangular_search_limit,
            fibonacci_search_limit=nt.fibonacci_search_limit,
            palindrome_search_limit=nt.palindrome_search_limit,
            prime_index_method=nt.prime_index_method,
            logger=self._make_logger("number_theory"),
        )

        chrono = self.config.chronology
        self.chronology_matcher = ChronologyMatcher(
            astronomical_entity_type=chrono.astronomical_entity_type,
            astronomical_keywords=chrono.astronomical_keywords,
            logger=self._make_logger("chronology"),
        )

        mi = self.config.match_index
        self.match_index = match_index or MatchDatabaseIndex(
            chunk_size=mi.chunk_size,
            assumed_content_length=mi.assumed_content_length,
            progress_interval_rows=mi.progress_interval_rows,
            request_timeout=mi.request_timeout,
            max_retries=mi.max_retries,
            user_agent=mi.user_agent,
            logger=self._make_logger("match_index"),
        )

    # ------------------------------------------------------------------ #
    #  Gematria
    # ------------------------------------------------------------------ #

    def gematria(self, text: str) -> dict[CipherScheme, int]:
        """Totals of *text* under every cipher scheme."""
        return self.ciphers.compute_all(text)

    def breakdown(self, text: str, scheme: SchemeLike) -> list[CharValue]:
        """Per-character values of *text* under *scheme*."""
        return self.ciphers.breakdown(text, scheme)

    # ------------------------------------------------------------------ #
    #  Number theory
    # ------------------------------------------------------------------ #

    def classify_number(self, n: Union[int, float]) -> NumberReport:
        """Classification report for *n* (raises ``InvalidInputError`` for 0)."""
        return self.numbers.classify(n)

    # ------------------------------------------------------------------ #
    #  Chronology and dates
    # ------------------------------------------------------------------ #

    def chronology(
        self, entities: Sequence[EntityChronology], reference_date: Any = None
    ) -> list[DayCountRow]:
        """Day-count comparison table, control matches first."""
        self.logger.debug(
            "Chronology over %d entities (reference %s)",
            len(entities),
            reference_date,
        )
        return self.chronology_matcher.analyze(entities, reference_date)

    def date_span(self, first: Any, second: Any) -> DateSpanAnalysis:
        """Span between two dates.

        Raises:
            InvalidInputError: If either date cannot be parsed.
        """
        span = date_span(first, second)
        if span is None:
            raise InvalidInputError(f"Unparseable date in ({first!r}, {second!r})")
        return span

    def date_numerology(self, value: Any) -> DateNumerology:
        """Digit-sum numerology of a single date.

        Raises:
            InvalidInputError: If *value* holds no parseable date.
        """
        result = date_numerology(value)
        if result is None:
            raise InvalidInputError(f"No date found in {value!r}")
        return result

    def day_difference(
        self,
        start: Any,
        end: Any,
        *,
        include_start: bool = True,
        include_end: bool = False,
    ) -> DayDifference:
        """Duration between two dates with endpoint-inclusion rules."""
        return day_difference(
            self._require_date(start),
            self._require_date(end),
            include_start=include_start,
            include_end=include_end,
        )

    def date_facts(self, value: Any) -> DateFacts:
        """Weekday, moon phase, week, day of year and numerology of a date."""
        return date_facts(self._require_date(value))

    # ------------------------------------------------------------------ #
    #  Match database
    # ------------------------------------------------------------------ #

    async def load_matches(
        self,
        source: Optional[Source] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> int:
        """Load the match dataset (defaults to the configured source URL)."""
        target = source or self.config.match_index.source_url
        return await self.match_index.load(target, on_progress)

    def find_matches(self, text: str) -> dict[CipherScheme, list[MatchEntry]]:
        """Index lookups for every non-zero scheme total of *text*.

        Schemes whose total has no entries are omitted. Empty before a
        successful load; check :meth:`match_status` to tell the cases apart.
        """
        found: dict[CipherScheme, list[MatchEntry]] = {}
        for scheme, total in self.gematria(text).items():
            if total == 0:
                continue
            entries = self.match_index.lookup(total)
            if entries:
                found[scheme] = entries
        return found

    def match_status(self) -> MatchDatabaseStatus:
        """Status snapshot of the match index."""
        return self.match_index.status()

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    def _make_logger(self, name: str) -> DecoderLogger:
        settings = self.config.global_settings
        return DecoderLogger(
            name,
            log_level="DEBUG" if settings.debug else settings.log_level,
            log_file=settings.log_file or None,
            json_logs=settings.log_json,
        )

    @staticmethod
    def _require_date(value: Any):
        parsed = parse_date(value)
        if parsed is None:
            raise InvalidInputError(f"Unparseable date: {value!r}")
        return parsed
