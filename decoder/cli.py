"""
Decoder CLI
============

Click-based command-line interface for the decoder toolkit. Provides
subcommands for gematria totals and breakdowns, number classification,
chronology day-count tables, date spans and facts, and reverse lookups
in the word/value match database.

Usage::

    python -m decoder gematria "Solar Eclipse" --breakdown
    python -m decoder number 322
    python -m decoder chronology entities.json --reference 2024-04-08
    python -m decoder span 2024-01-01 2024-02-03
    python -m decoder diff 2024-01-01 2024-12-31 --include-end
    python -m decoder date-facts 2024-04-08
    python -m decoder numerology "March 22, 1832"
    python -m decoder matches "Solar Eclipse" --source matches.csv

References:
    - Click Documentation. https://click.palletsprojects.com/
"""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Union

import click
from pydantic import TypeAdapter, ValidationError

from shared.config import DecoderConfig
from shared.console import DecoderConsole

from decoder import __version__
from decoder.core.engine import DecoderEngine
from decoder.core.errors import DecoderError, InvalidInputError
from decoder.core.models import CipherScheme, EntityChronology
from decoder.output.console import DecoderConsoleOutput
from decoder.output.report import DecoderReportGenerator


_ENTITIES = TypeAdapter(list[EntityChronology])


# ===================================================================== #
#  Helpers
# ===================================================================== #

def _run_async(coro):
    """Run an async coroutine from a synchronous Click handler."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        import concurrent.futures
        with concurrent.futures.ThreadPoolExecutor() as pool:
            return pool.submit(asyncio.run, coro).result()
    return asyncio.run(coro)


def _parse_number(
    ctx: click.Context, param: click.Parameter, value: str
) -> Union[int, float]:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a number") from None


@contextmanager
def _reported_errors(ctx: click.Context) -> Iterator[None]:
    """Report :class:`DecoderError` on the console and exit with status 1."""
    try:
        yield
    except DecoderError as exc:
        console: DecoderConsole = ctx.obj["console"]
        if console.rich.quiet:
            click.echo(f"Error: {exc}", err=True)
        else:
            console.error(str(exc))
        ctx.exit(1)


def _is_console(ctx: click.Context) -> bool:
    return ctx.obj["output_format"] == "console"


def _emit_json(ctx: click.Context, command: str, subject: str, result: Any) -> None:
    """Write a JSON report to ``--output-file`` or stdout."""
    reporter: DecoderReportGenerator = ctx.obj["reporter"]
    report = reporter.build(command, subject, result)
    output_file = ctx.obj["output_file"]
    if output_file:
        path = reporter.generate_json(report, Path(output_file))
        if not ctx.obj["quiet"]:
            click.echo(f"JSON report saved to: {path}", err=True)
    else:
        click.echo(reporter.render_json(report))


# ===================================================================== #
#  CLI Group
# ===================================================================== #

@click.group()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a decoder configuration file (TOML).",
)
@click.option(
    "--output", "-o",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Output format.",
)
@click.option(
    "--output-file", "-f",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the JSON report to this file instead of stdout.",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress banner and console output.",
)
@click.version_option(__version__, prog_name="decoder")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    output: str,
    output_file: Optional[str],
    quiet: bool,
) -> None:
    """DecoderCore -- gematria, number theory and chronology toolkit."""
    ctx.ensure_object(dict)

    decoder_config = DecoderConfig.load(config) if config else DecoderConfig()
    ctx.obj["config"] = decoder_config
    ctx.obj["output_format"] = output
    ctx.obj["output_file"] = output_file
    ctx.obj["quiet"] = quiet

    console = DecoderConsole(quiet=quiet or output == "json")
    ctx.obj["console"] = console
    ctx.obj["engine"] = DecoderEngine(decoder_config)
    ctx.obj["display"] = DecoderConsoleOutput(console)
    ctx.obj["reporter"] = DecoderReportGenerator()

    if not quiet and output == "console":
        console.banner(version=__version__)


# ===================================================================== #
#  Subcommands
# ===================================================================== #

@cli.command()
@click.argument("text")
@click.option(
    "--scheme", "-s",
    default=CipherScheme.ORDINAL.value,
    show_default=True,
    help="Scheme used for --breakdown.",
)
@click.option("--breakdown", "-b", is_flag=True, help="Show per-letter values.")
@click.pass_context
def gematria(ctx: click.Context, text: str, scheme: str, breakdown: bool) -> None:
    """Compute the value of TEXT under every cipher scheme."""
    engine: DecoderEngine = ctx.obj["engine"]
    display: DecoderConsoleOutput = ctx.obj["display"]

    totals = engine.gematria(text)
    chars = engine.breakdown(text, scheme) if breakdown else None

    if _is_console(ctx):
        display.display_gematria(text, totals)
        if chars is not None:
            display.display_breakdown(scheme, chars)
    else:
        result: dict[str, Any] = {"totals": totals}
        if chars is not None:
            result["breakdown"] = {"scheme": scheme, "chars": chars}
        _emit_json(ctx, "gematria", text, result)


@cli.command()
@click.argument("value", callback=_parse_number)
@click.pass_context
def number(ctx: click.Context, value: Union[int, float]) -> None:
    """Classify VALUE (floored, then made positive; zero is rejected)."""
    engine: DecoderEngine = ctx.obj["engine"]

    with _reported_errors(ctx):
        report = engine.classify_number(value)

    if _is_console(ctx):
        ctx.obj["display"].display_number(report)
    else:
        _emit_json(ctx, "number", str(value), report)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--reference", "-r",
    default=None,
    help="Reference date every event is compared against.",
)
@click.option(
    "--matches-only", "-m",
    is_flag=True,
    help="Only show rows that hit a control number.",
)
@click.pass_context
def chronology(
    ctx: click.Context, file: str, reference: Optional[str], matches_only: bool
) -> None:
    """Day-count table for the entity chronologies in FILE (JSON list)."""
    engine: DecoderEngine = ctx.obj["engine"]

    with _reported_errors(ctx):
        try:
            entities = _ENTITIES.validate_json(Path(file).read_bytes())
        except ValidationError as exc:
            raise InvalidInputError(f"Invalid chronology file {file}: {exc}") from exc
        rows = engine.chronology(entities, reference)

    if matches_only:
        rows = [row for row in rows if row.is_control_match]

    if _is_console(ctx):
        ctx.obj["display"].display_day_counts(rows)
    else:
        _emit_json(ctx, "chronology", file, rows)


@cli.command()
@click.argument("first")
@click.argument("second")
@click.pass_context
def span(ctx: click.Context, first: str, second: str) -> None:
    """Span in days between FIRST and SECOND with a control check."""
    engine: DecoderEngine = ctx.obj["engine"]

    with _reported_errors(ctx):
        result = engine.date_span(first, second)

    if _is_console(ctx):
        ctx.obj["display"].display_span(result)
    else:
        _emit_json(ctx, "span", f"{first} -> {second}", result)


@cli.command()
@click.argument("start")
@click.argument("end")
@click.option(
    "--include-start/--exclude-start",
    default=True,
    show_default=True,
    help="Count the start date.",
)
@click.option(
    "--include-end/--exclude-end",
    default=False,
    show_default=True,
    help="Count the end date.",
)
@click.pass_context
def diff(
    ctx: click.Context,
    start: str,
    end: str,
    include_start: bool,
    include_end: bool,
) -> None:
    """Duration from START to END in days, weeks, hours and calendar units."""
    engine: DecoderEngine = ctx.obj["engine"]

    with _reported_errors(ctx):
        result = engine.day_difference(
            start, end, include_start=include_start, include_end=include_end
        )

    if _is_console(ctx):
        ctx.obj["display"].display_day_difference(result)
    else:
        _emit_json(ctx, "diff", f"{start} -> {end}", result)


@cli.command("date-facts")
@click.argument("value")
@click.pass_context
def date_facts(ctx: click.Context, value: str) -> None:
    """Weekday, moon phase, week, day of year and numerology of VALUE."""
    engine: DecoderEngine = ctx.obj["engine"]

    with _reported_errors(ctx):
        facts = engine.date_facts(value)

    if _is_console(ctx):
        ctx.obj["display"].display_date_facts(facts)
    else:
        _emit_json(ctx, "date-facts", value, facts)


@cli.command()
@click.argument("value")
@click.pass_context
def numerology(ctx: click.Context, value: str) -> None:
    """Digit sums of the date VALUE: full date, month + day, year."""
    engine: DecoderEngine = ctx.obj["engine"]

    with _reported_errors(ctx):
        result = engine.date_numerology(value)

    if _is_console(ctx):
        ctx.obj["display"].display_numerology(value, result)
    else:
        _emit_json(ctx, "numerology", value, result)


@cli.command()
@click.argument("text")
@click.option(
    "--source", "-s",
    default=None,
    help="CSV URL or local path (defaults to the configured source URL).",
)
@click.option(
    "--limit", "-n",
    type=int,
    default=10,
    show_default=True,
    help="Words shown per scheme on the console.",
)
@click.pass_context
def matches(ctx: click.Context, text: str, source: Optional[str], limit: int) -> None:
    """Words in the match database sharing a value with TEXT."""
    engine: DecoderEngine = ctx.obj["engine"]
    console: DecoderConsole = ctx.obj["console"]
    display: DecoderConsoleOutput = ctx.obj["display"]

    with _reported_errors(ctx):
        with console.percent_progress("Loading match database") as report:
            _run_async(engine.load_matches(source, on_progress=report))

    totals = engine.gematria(text)
    found = engine.find_matches(text)

    if _is_console(ctx):
        display.display_status(engine.match_status())
        display.display_matches(text, totals, found, limit=limit)
    else:
        _emit_json(
            ctx,
            "matches",
            text,
            {"status": engine.match_status(), "totals": totals, "matches": found},
        )


# ===================================================================== #
#  Entry Point
# ===================================================================== #

def main() -> None:
    """Main entry point for the decoder CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
