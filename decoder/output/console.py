"""
Decoder Console Output
=======================

Rich-based renderers for decoder results: the cipher matrix, per-letter
breakdowns, number reports, day-count tables, date spans, calendar facts
and match-index hits.

Uses the shared :class:`~shared.console.DecoderConsole` for consistent
styling across commands.

References:
    - Rich Library Documentation. https://rich.readthedocs.io/
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shared.console import DecoderConsole
from decoder.core.models import (
    CharValue,
    CipherScheme,
    DateFacts,
    DateNumerology,
    DateSpanAnalysis,
    DayCountRow,
    DayDifference,
    MatchDatabaseStatus,
    MatchEntry,
    NumberReport,
)


def _flag(value: bool) -> str:
    return "[green]yes[/green]" if value else "[dim]no[/dim]"


def _maybe(value: Optional[int]) -> str:
    return "-" if value is None else str(value)


class DecoderConsoleOutput:
    """Console renderers for decoder results.

    Usage::

        output = DecoderConsoleOutput(DecoderConsole())
        output.display_gematria("Solar Eclipse", totals)
        output.display_number(report)
    """

    def __init__(self, console: Optional[DecoderConsole] = None) -> None:
        self.console = console or DecoderConsole()
        self._rich = self.console.rich

    # ------------------------------------------------------------------ #
    #  Gematria
    # ------------------------------------------------------------------ #

    def display_gematria(self, text: str, totals: Mapping[CipherScheme, int]) -> None:
        """Render the totals of *text* under every scheme."""
        self.console.section(f"Cipher Matrix: {text}")
        tbl = Table(
            border_style="bright_yellow",
            header_style="bold bright_magenta",
        )
        tbl.add_column("Scheme", style="bold")
        tbl.add_column("Value", justify="right", style="decoder.value")
        for scheme, total in totals.items():
            tbl.add_row(scheme.value, str(total))
        self._rich.print(tbl)

    def display_breakdown(self, scheme: str, chars: Sequence[CharValue]) -> None:
        """Render per-character values, letters highlighted."""
        self.console.section(f"Breakdown ({scheme})")
        if not chars:
            self.console.warning(f"Unknown scheme: {scheme}")
            return

        line = Text()
        for item in chars:
            if item.char.isspace():
                line.append("   ")
                continue
            style = "decoder.value" if item.value else "decoder.dim"
            line.append(f"{item.char}={item.value} ", style=style)
        total = sum(item.value for item in chars)
        line.append(f"\nTotal: {total}", style="decoder.highlight")
        self._rich.print(Panel(line, border_style="cyan"))

    # ------------------------------------------------------------------ #
    #  Number theory
    # ------------------------------------------------------------------ #

    def display_number(self, report: NumberReport) -> None:
        """Render a number report as three property tables."""
        n = report.number
        basic = report.basic
        ident = report.identity
        cls = report.classification

        self.console.section(f"Number Analysis: {n}")

        divisors = ", ".join(str(d) for d in basic.divisors)
        self.console.table(
            "Basic Properties",
            ["Property", "Value"],
            [
                ("Divisors", divisors),
                ("Sum of divisors", basic.sum_divisors),
                ("Prime", _flag(basic.is_prime)),
                ("Prev / next prime", f"{_maybe(basic.prev_prime)} / {_maybe(basic.next_prime)}"),
                ("Prev / next triangular", f"{_maybe(basic.prev_triangular)} / {_maybe(basic.next_triangular)}"),
                ("Prev / next Fibonacci", f"{_maybe(basic.prev_fibonacci)} / {_maybe(basic.next_fibonacci)}"),
                ("Prev / next palindrome", f"{_maybe(basic.prev_palindrome)} / {_maybe(basic.next_palindrome)}"),
            ],
            styles=["bold", ""],
        )

        magic = f"order {ident.magic_order}" if ident.is_magic_constant else _flag(False)
        self.console.table(
            "Identity",
            ["Property", "Value"],
            [
                ("Digital root", ident.digital_root),
                ("Binary", ident.binary),
                ("Octal", ident.octal),
                ("Duodecimal", ident.duodecimal),
                ("Hexadecimal", ident.hexadecimal),
                ("Magic constant", magic),
            ],
            styles=["bold", ""],
        )

        self.console.table(
            "Classification",
            ["Property", "Value"],
            [
                ("Prime index", _maybe(cls.prime_index)),
                ("Triangular", f"{_flag(cls.is_triangular)} {_maybe(cls.triangular_index) if cls.is_triangular else ''}"),
                ("Square", _flag(cls.is_square)),
                ("Cube", _flag(cls.is_cube)),
                ("Fibonacci", f"{_flag(cls.is_fibonacci)} {_maybe(cls.fibonacci_index) if cls.is_fibonacci else ''}"),
                ("Harshad", _flag(cls.is_harshad)),
                ("Happy", _flag(cls.is_happy)),
                ("Pentagonal", _flag(cls.is_pentagonal)),
                ("Tetrahedral", _flag(cls.is_tetrahedral)),
            ],
            styles=["bold", ""],
        )

    # ------------------------------------------------------------------ #
    #  Chronology
    # ------------------------------------------------------------------ #

    def display_day_counts(self, rows: Sequence[DayCountRow]) -> None:
        """Render the day-count table with control matches highlighted."""
        matches = sum(1 for row in rows if row.is_control_match)
        self.console.section(f"Day Counts ({matches} control matches / {len(rows)} rows)")
        if not rows:
            self.console.info("No comparable dates.")
            return

        tbl = Table(
            border_style="bright_yellow",
            header_style="bold bright_magenta",
        )
        tbl.add_column("Comparison", ratio=3)
        tbl.add_column("Start")
        tbl.add_column("End")
        tbl.add_column("Days", justify="right")
        tbl.add_column("Incl.", justify="center")
        tbl.add_column("Sum", justify="right")
        tbl.add_column("No 0", justify="right")
        tbl.add_column("Match")

        for row in rows:
            tbl.add_row(
                escape(row.comparison),
                escape(row.start_date),
                escape(row.end_date),
                str(row.day_count),
                "✔" if row.is_inclusive else "",
                str(row.digit_sum),
                str(row.zero_dropped),
                escape(row.control_match_value or ""),
                style="decoder.match" if row.is_control_match else None,
            )
        self._rich.print(tbl)

    def display_span(self, span: DateSpanAnalysis) -> None:
        """Render a two-date span."""
        self.console.section("Date Span")
        body = Text()
        body.append("Total days: ", style="bold")
        body.append(f"{span.total_days:,}\n", style="decoder.value")
        body.append("Calendar: ", style="bold")
        body.append(f"{span.years}y {span.months}m {span.days}d\n")
        body.append("Digit sum: ", style="bold")
        body.append(f"{span.digit_sum}   ")
        body.append("Zero drop: ", style="bold")
        body.append(f"{span.zero_dropped}\n")
        if span.is_control_match:
            body.append(f"Control match: {span.control_match_value}", style="decoder.match")
        else:
            body.append("No control match", style="decoder.dim")
        self._rich.print(Panel(body, border_style="cyan"))

    def display_day_difference(self, diff: DayDifference) -> None:
        """Render the duration calculator result."""
        self.console.section("Day Difference")
        self.console.table(
            f"{diff.start.isoformat()} → {diff.end.isoformat()}",
            ["Unit", "Value"],
            [
                ("Days", f"{diff.total_days:,}"),
                ("Calendar", f"{diff.years}y {diff.months}m {diff.days}d"),
                ("Weeks", f"{diff.total_weeks:,}"),
                ("Hours", f"{diff.total_hours:,}"),
                ("Minutes", f"{diff.total_minutes:,}"),
                ("Seconds", f"{diff.total_seconds:,}"),
            ],
            caption=(
                f"start {'included' if diff.include_start else 'excluded'}, "
                f"end {'included' if diff.include_end else 'excluded'}"
                + (", dates swapped" if diff.is_reversed else "")
            ),
            styles=["bold", "decoder.value"],
        )

    def display_numerology(self, label: str, numerology: DateNumerology) -> None:
        """Render the three date digit sums with their reductions."""
        self.console.section(f"Date Numerology: {label}")
        self.console.table(
            "",
            ["Part", "Sum", "Reduced"],
            [
                ("Full date", numerology.full_date.sum, numerology.full_date.reduced),
                ("Month + day", numerology.month_day.sum, numerology.month_day.reduced),
                ("Year", numerology.year.sum, numerology.year.reduced),
            ],
            styles=["bold", "", "decoder.value"],
        )

    def display_date_facts(self, facts: DateFacts) -> None:
        """Render calendar facts for one date."""
        self.console.section(f"Date Facts: {facts.date.isoformat()}")
        self.console.table(
            "",
            ["Fact", "Value"],
            [
                ("Day of week", facts.day_of_week),
                ("Moon phase", facts.moon_phase.value),
                ("Week of year", facts.week_of_year),
                ("Day of year", facts.day_of_year),
                ("Numerology", facts.numerology),
            ],
            styles=["bold", ""],
        )

    # ------------------------------------------------------------------ #
    #  Match database
    # ------------------------------------------------------------------ #

    def display_matches(
        self,
        text: str,
        totals: Mapping[CipherScheme, int],
        matches: Mapping[CipherScheme, Sequence[MatchEntry]],
        *,
        limit: int = 10,
    ) -> None:
        """Render the words sharing a value with *text*, per scheme.

        At most *limit* words are shown for each scheme.
        """
        self.console.section(f"Matches: {text}")
        if not matches:
            self.console.info("No matching words.")
            return

        tbl = Table(border_style="bright_yellow", header_style="bold bright_magenta")
        tbl.add_column("Scheme", style="bold")
        tbl.add_column("Value", justify="right", style="decoder.value")
        tbl.add_column("Words (column)", ratio=3)
        for scheme, entries in matches.items():
            shown = ", ".join(
                f"{escape(e.word)} ({escape(e.scheme)})" for e in entries[:limit]
            )
            extra = len(entries) - limit
            if extra > 0:
                shown += f" ... +{extra} more"
            tbl.add_row(scheme.value, str(totals.get(scheme, "")), shown)
        self._rich.print(tbl)

    def display_status(self, status: MatchDatabaseStatus) -> None:
        """One-line status of the match index."""
        if status.error:
            self.console.error(status.error)
        elif status.is_loaded:
            self.console.success(f"Match database loaded: {status.record_count:,} records")
        elif status.is_loading:
            self.console.info("Match database loading...")
        else:
            self.console.warning("Match database not loaded")
