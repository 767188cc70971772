"""
Match Database Index
=====================

Streams a word/value CSV dataset and builds an in-memory inverted index
from integer value to the words (and scheme columns) that produce it.

Dataset layout (RFC 4180 CSV, UTF-8)::

    Word,Ordinal,Reduction,...
    TEST,74,11,...

Column 1 holds the word or phrase; every other header names a scheme.
Each data cell is read with leading-integer semantics (``"74"`` and
``"74 "`` give 74, ``"abc"`` and ``""`` are skipped).

Lifecycle:

- ``load`` downloads (progress 0-50%) then parses (progress 50-100%).
- The finished index replaces the previous one in a single swap under
  an :class:`asyncio.Lock`; readers never see a partial index.
- Every ``load`` takes a new generation number. An older load that is
  still running when a newer one starts is superseded: it stops at its
  next checkpoint, raises :class:`LoadSupersededError` and leaves the
  index alone.
- A failed load raises :class:`MatchIndexLoadError` and keeps whatever
  index was already loaded.

References:
    - RFC 4180 (2005). Common Format and MIME Type for CSV Files.
    - Zobel, J. & Moffat, A. (2006). Inverted Files for Text Search
      Engines. ACM Computing Surveys, 38(2).
"""

from __future__ import annotations

import asyncio
import codecs
import csv
import io
import re
from pathlib import Path
from typing import Callable, Optional, Union

import httpx

from shared.logger import DecoderLogger
from shared.network import DecoderHTTP, DecoderHTTPError
from decoder.core.errors import LoadSupersededError, MatchIndexLoadError
from decoder.core.models import MatchDatabaseStatus, MatchEntry


ProgressCallback = Callable[[float], None]
Source = Union[str, Path]

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

DOWNLOAD_SHARE: float = 50.0


def parse_leading_int(cell: str) -> Optional[int]:
    """Integer at the start of *cell*, ignoring leading whitespace.

    ``"74"`` -> 74, ``"12abc"`` -> 12, ``"7.9"`` -> 7, ``"x"`` -> None.
    """
    match = _LEADING_INT.match(cell)
    if match is None:
        return None
    return int(match.group(1))


class MatchDatabaseIndex:
    """Caller-owned inverted index over a word/value dataset.

    Args:
        chunk_size: Bytes requested per read while downloading.
        assumed_content_length: Byte total used for download progress
            when the size is unknown.
        progress_interval_rows: Rows parsed between progress reports and
            event-loop yields.
        request_timeout: HTTP timeout in seconds.
        max_retries: Retries while opening the HTTP stream.
        user_agent: HTTP User-Agent header.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
        logger: Logger to use instead of a default ``match_index`` one.

    Usage::

        index = MatchDatabaseIndex()
        count = await index.load(url, on_progress=print)
        index.lookup(74)   # [MatchEntry(word='TEST', scheme='Ordinal')]
    """

    def __init__(
        self,
        *,
        chunk_size: int = 65_536,
        assumed_content_length: int = 50_000_000,
        progress_interval_rows: int = 50_000,
        request_timeout: float = 60.0,
        max_retries: int = 2,
        user_agent: str = "DecoderCore/1.0",
        transport: httpx.AsyncBaseTransport | None = None,
        logger: Optional[DecoderLogger] = None,
    ) -> None:
        self.chunk_size = chunk_size
        self.assumed_content_length = assumed_content_length
        self.progress_interval_rows = max(1, progress_interval_rows)
        self.request_timeout = request_timeout
        self.max_retries = max_retries
        self.user_agent = user_agent
        self._transport = transport

        self._index: Optional[dict[int, list[tuple[str, str]]]] = None
        self._record_count: int = 0
        self._error: Optional[str] = None
        self._generation: int = 0
        self._in_flight: int = 0
        self._swap_lock = asyncio.Lock()
        self.logger = logger or DecoderLogger("match_index")

    # ------------------------------------------------------------------ #
    #  Loading
    # ------------------------------------------------------------------ #

    async def load(
        self, source: Source, on_progress: Optional[ProgressCallback] = None
    ) -> int:
        """Download, parse and install a dataset.

        Args:
            source: ``http(s)://`` URL or local file path.
            on_progress: Called with a percentage in ``[0, 100]``.

        Returns:
            Number of data rows indexed (rows with a non-empty word).

        Raises:
            MatchIndexLoadError: Download, decoding or CSV parsing failed.
            LoadSupersededError: A newer ``load`` started meanwhile.
        """
        self._generation += 1
        generation = self._generation
        self._in_flight += 1
        report = on_progress or (lambda _pct: None)

        with self.logger.operation("load"):
            self.logger.info("Loading match database from %s", source)
            try:
                text = await self._download(source, generation, report)
                index, records = await self._parse(text, generation, report)

                async with self._swap_lock:
                    self._check_current(generation)
                    self._index = index
                    self._record_count = records
                    self._error = None

                report(100.0)
                self.logger.info(
                    "Indexed %d records under %d distinct values",
                    records,
                    len(index),
                )
                return records

            except LoadSupersededError:
                self.logger.info("Load of %s superseded by a newer load", source)
                raise
            except (DecoderHTTPError, OSError, UnicodeDecodeError, csv.Error) as exc:
                message = f"Failed to load match database from {source}: {exc}"
                if generation == self._generation:
                    self._error = message
                self.logger.error(message)
                raise MatchIndexLoadError(message) from exc
            finally:
                self._in_flight -= 1

    def clear(self) -> None:
        """Drop the index and supersede any load still in flight."""
        self._generation += 1
        self._index = None
        self._record_count = 0
        self._error = None

    # ------------------------------------------------------------------ #
    #  Queries
    # ------------------------------------------------------------------ #

    def lookup(self, value: int) -> list[MatchEntry]:
        """Unique entries for *value*, in dataset order; ``[]`` when absent."""
        if self._index is None:
            return []
        entries = self._index.get(value)
        if not entries:
            return []
        return [
            MatchEntry(word=word, scheme=scheme)
            for word, scheme in dict.fromkeys(entries)
        ]

    def has_matches(self, value: int) -> bool:
        """Whether any entry exists for *value*."""
        return self._index is not None and value in self._index

    def is_loaded(self) -> bool:
        """Whether a load has completed successfully since the last clear."""
        return self._index is not None

    def status(self) -> MatchDatabaseStatus:
        """Snapshot of loaded / loading state, record count and last error."""
        return MatchDatabaseStatus(
            is_loaded=self.is_loaded(),
            is_loading=self._in_flight > 0,
            record_count=self._record_count,
            error=self._error,
        )

    # ------------------------------------------------------------------ #
    #  Download phase
    # ------------------------------------------------------------------ #

    async def _download(
        self, source: Source, generation: int, report: ProgressCallback
    ) -> str:
        decoder = codecs.getincrementaldecoder("utf-8-sig")()
        parts: list[str] = []
        received = 0

        def consume(chunk: bytes, total: int) -> None:
            nonlocal received
            received += len(chunk)
            parts.append(decoder.decode(chunk))
            report(min(DOWNLOAD_SHARE, received / total * DOWNLOAD_SHARE))

        if _is_url(source):
            async with DecoderHTTP(
                timeout=self.request_timeout,
                max_retries=self.max_retries,
                user_agent=self.user_agent,
                transport=self._transport,
            ) as http:
                async with http.stream(str(source), chunk_size=self.chunk_size) as body:
                    total = body.content_length or self.assumed_content_length
                    async for chunk in body.chunks:
                        self._check_current(generation)
                        consume(chunk, total)
        else:
            path = Path(source)
            total = path.stat().st_size or 1
            with open(path, "rb") as fh:
                while chunk := fh.read(self.chunk_size):
                    self._check_current(generation)
                    consume(chunk, total)
                    await asyncio.sleep(0)

        parts.append(decoder.decode(b"", final=True))
        self._check_current(generation)
        report(DOWNLOAD_SHARE)
        return "".join(parts)

    # ------------------------------------------------------------------ #
    #  Parse phase
    # ------------------------------------------------------------------ #

    async def _parse(
        self, text: str, generation: int, report: ProgressCallback
    ) -> tuple[dict[int, list[tuple[str, str]]], int]:
        index: dict[int, list[tuple[str, str]]] = {}
        reader = csv.reader(io.StringIO(text, newline=""))
        total_rows = max(1, text.count("\n") + 1)

        header = next(reader, None)
        if header is None:
            return index, 0
        schemes = [name.strip() for name in header]

        records = 0
        for row_number, row in enumerate(reader, start=1):
            if row_number % self.progress_interval_rows == 0:
                report(DOWNLOAD_SHARE + (row_number / total_rows) * (100.0 - DOWNLOAD_SHARE))
                await asyncio.sleep(0)
                self._check_current(generation)

            if len(row) < 2:
                continue
            word = row[0].strip()
            if not word:
                continue
            records += 1

            for column, cell in enumerate(row[1:], start=1):
                value = parse_leading_int(cell)
                if value is None:
                    continue
                scheme = schemes[column] if column < len(schemes) and schemes[column] else f"Cipher {column}"
                index.setdefault(value, []).append((word, scheme))

        return index, records

    def _check_current(self, generation: int) -> None:
        if generation != self._generation:
            raise LoadSupersededError(
                f"Load #{generation} superseded by load #{self._generation}"
            )


def _is_url(source: Source) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))
