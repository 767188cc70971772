"""
DecoderCore Console Interface
==============================

Rich-powered console abstraction giving every decoder command the same
presentation layer.

The class wraps :class:`rich.console.Console` and adds helpers for the
banner, section rules, coloured status messages, a percentage progress
bar and tables.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

import datetime as _dt
from contextlib import contextmanager
from typing import Any, Callable, Generator, Sequence

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------
_DECODER_THEME = Theme(
    {
        "decoder.banner": "bold bright_yellow",
        "decoder.section": "bold bright_magenta",
        "decoder.success": "bold green",
        "decoder.warning": "bold yellow",
        "decoder.error": "bold red",
        "decoder.info": "bold bright_blue",
        "decoder.dim": "dim white",
        "decoder.highlight": "bold bright_white",
        "decoder.match": "bold black on bright_yellow",
        "decoder.value": "bold bright_cyan",
        "decoder.tagline": "italic bright_white",
    }
)

# ---------------------------------------------------------------------------
# ASCII banner art
# ---------------------------------------------------------------------------
_BANNER_ART = r"""
[bright_yellow]
  ██████╗ ███████╗ ██████╗ ██████╗ ██████╗ ███████╗██████╗
  ██╔══██╗██╔════╝██╔════╝██╔═══██╗██╔══██╗██╔════╝██╔══██╗
  ██║  ██║█████╗  ██║     ██║   ██║██║  ██║█████╗  ██████╔╝
  ██║  ██║██╔══╝  ██║     ██║   ██║██║  ██║██╔══╝  ██╔══██╗
  ██████╔╝███████╗╚██████╗╚██████╔╝██████╔╝███████╗██║  ██║
  ╚═════╝ ╚══════╝ ╚═════╝ ╚═════╝ ╚═════╝ ╚══════╝╚═╝  ╚═╝
[/bright_yellow]"""

_TAGLINE = "Gematria, Number Theory & Chronology Toolkit"


class DecoderConsole:
    """Unified console interface for the decoder commands.

    Usage::

        con = DecoderConsole()
        con.banner()
        con.section("Cipher Matrix")
        con.success("Match database loaded")
    """

    def __init__(self, *, quiet: bool = False) -> None:
        """Initialise the console.

        Args:
            quiet: Suppress all output (library / test mode, JSON output).
        """
        self._console = Console(theme=_DECODER_THEME, quiet=quiet, highlight=False)

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Banner and sections
    # ------------------------------------------------------------------ #

    def banner(self, version: str = "1.0.0") -> None:
        """Display the ASCII-art banner with the version and current time."""
        now = _dt.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        subtitle = (
            f"[decoder.tagline]{_TAGLINE}[/decoder.tagline]\n"
            f"[decoder.dim]Version: {version}  |  {now}[/decoder.dim]"
        )
        panel = Panel(
            Align.center(Text.from_markup(_BANNER_ART + "\n" + subtitle)),
            border_style="bright_yellow",
            padding=(1, 2),
        )
        self._console.print(panel)

    def section(self, title: str) -> None:
        """Print a section rule; *title* is shown literally, never as markup."""
        self._console.rule(f"  {escape(title)}  ", style="decoder.section", characters="─")
        self._console.print()

    # ------------------------------------------------------------------ #
    #  Status messages
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(f"[decoder.success][✔] SUCCESS:[/decoder.success] {escape(message)}")

    def warning(self, message: str) -> None:
        self._console.print(f"[decoder.warning][⚠] WARNING:[/decoder.warning] {escape(message)}")

    def error(self, message: str) -> None:
        self._console.print(f"[decoder.error][✘] ERROR:[/decoder.error] {escape(message)}")

    def info(self, message: str) -> None:
        self._console.print(f"[decoder.info][ℹ] INFO:[/decoder.info] {escape(message)}")

    # ------------------------------------------------------------------ #
    #  Progress
    # ------------------------------------------------------------------ #

    @contextmanager
    def percent_progress(
        self, description: str = "Loading..."
    ) -> Generator[Callable[[float], None], None, None]:
        """Progress bar driven by percentage callbacks.

        Yields a callable taking a percentage in ``[0, 100]``, suitable
        as an ``on_progress`` callback::

            with con.percent_progress("Loading matches") as report:
                await index.load(url, on_progress=report)
        """
        bar = Progress(
            SpinnerColumn("dots", style="bright_yellow"),
            TextColumn("[decoder.info]{task.description}"),
            BarColumn(bar_width=40, style="bright_yellow", complete_style="bright_green"),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self._console,
            transient=False,
        )
        with bar:
            task_id = bar.add_task(description, total=100.0)

            def report(percent: float) -> None:
                bar.update(task_id, completed=max(0.0, min(100.0, percent)))

            yield report

    # ------------------------------------------------------------------ #
    #  Tables
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table; each cell is stringified and read as
        markup, so callers escape user-supplied text.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Row tuples.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_yellow",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            tbl.add_column(col_name, style=style)

        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))

        self._console.print(tbl)
