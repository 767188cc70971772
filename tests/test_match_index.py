"""Tests for the match-database index."""

import asyncio

import httpx
import pytest

from decoder.collectors.match_index import MatchDatabaseIndex, parse_leading_int
from decoder.core.errors import LoadSupersededError, MatchIndexLoadError
from decoder.core.models import MatchEntry


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "matches.csv"
    path.write_text("Word,Ordinal,Reduction\nTEST,74,11\n", encoding="utf-8")
    return path


def write_csv(tmp_path, name, text):
    path = tmp_path / name
    path.write_bytes(text.encode("utf-8"))
    return path


class TestParseLeadingInt:

    @pytest.mark.parametrize(
        "cell,expected",
        [("74", 74), (" 74 ", 74), ("12abc", 12), ("7.9", 7), ("-3", -3), ("abc", None), ("", None)],
    )
    def test_cells(self, cell, expected):
        assert parse_leading_int(cell) == expected


class TestLocalLoad:

    @pytest.mark.asyncio
    async def test_lookup(self, csv_file):
        index = MatchDatabaseIndex()
        assert await index.load(csv_file) == 1
        assert index.lookup(74) == [MatchEntry(word="TEST", scheme="Ordinal")]
        assert index.lookup(11) == [MatchEntry(word="TEST", scheme="Reduction")]
        assert index.lookup(999) == []
        assert index.has_matches(74)
        assert not index.has_matches(999)

    @pytest.mark.asyncio
    async def test_is_loaded_lifecycle(self, csv_file):
        index = MatchDatabaseIndex()
        assert not index.is_loaded()
        assert index.lookup(74) == []
        await index.load(csv_file)
        assert index.is_loaded()
        index.clear()
        assert not index.is_loaded()
        assert index.lookup(74) == []

    @pytest.mark.asyncio
    async def test_status(self, csv_file):
        index = MatchDatabaseIndex()
        await index.load(csv_file)
        status = index.status()
        assert status.is_loaded
        assert not status.is_loading
        assert status.record_count == 1
        assert status.error is None

    @pytest.mark.asyncio
    async def test_progress_reaches_100(self, csv_file):
        index = MatchDatabaseIndex(progress_interval_rows=1)
        seen = []
        await index.load(csv_file, on_progress=seen.append)
        assert seen[-1] == 100.0
        assert seen == sorted(seen)
        assert all(0.0 <= pct <= 100.0 for pct in seen)
        assert 50.0 in seen

    @pytest.mark.asyncio
    async def test_blank_words_not_counted(self, tmp_path):
        path = write_csv(tmp_path, "blank.csv", "Word,Ordinal\nA,1\n,2\nB,3\n")
        index = MatchDatabaseIndex()
        assert await index.load(path) == 2
        assert index.lookup(2) == []

    @pytest.mark.asyncio
    async def test_duplicates_collapsed(self, tmp_path):
        path = write_csv(tmp_path, "dup.csv", "Word,Ordinal,Reduction\nA,5,5\nA,5,9\n")
        index = MatchDatabaseIndex()
        await index.load(path)
        assert index.lookup(5) == [
            MatchEntry(word="A", scheme="Ordinal"),
            MatchEntry(word="A", scheme="Reduction"),
        ]

    @pytest.mark.asyncio
    async def test_quoted_cells_and_bom(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_bytes(b'\xef\xbb\xbfWord,Ordinal,\n"Hello, World",124,x\n')
        index = MatchDatabaseIndex()
        assert await index.load(path) == 1
        assert index.lookup(124) == [MatchEntry(word="Hello, World", scheme="Ordinal")]

    @pytest.mark.asyncio
    async def test_unnamed_column(self, tmp_path):
        path = write_csv(tmp_path, "unnamed.csv", "Word,,Reduction\nX,5,6\n")
        index = MatchDatabaseIndex()
        await index.load(path)
        assert index.lookup(5) == [MatchEntry(word="X", scheme="Cipher 1")]


class TestFailures:

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        index = MatchDatabaseIndex()
        with pytest.raises(MatchIndexLoadError):
            await index.load(tmp_path / "missing.csv")
        assert not index.is_loaded()
        assert index.status().error is not None

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_index(self, csv_file, tmp_path):
        index = MatchDatabaseIndex()
        await index.load(csv_file)
        with pytest.raises(MatchIndexLoadError):
            await index.load(tmp_path / "missing.csv")
        assert index.is_loaded()
        assert index.lookup(74) == [MatchEntry(word="TEST", scheme="Ordinal")]

    @pytest.mark.asyncio
    async def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_bytes(b"Word,Ordinal\n\xff\xfe,1\n")
        with pytest.raises(MatchIndexLoadError):
            await MatchDatabaseIndex().load(path)


class TestRemoteLoad:

    @pytest.mark.asyncio
    async def test_streamed_url(self):
        def handler(request):
            assert request.headers["User-Agent"] == "DecoderCore/1.0"
            return httpx.Response(200, content=b"Word,Ordinal\nHELLO,52\n")

        index = MatchDatabaseIndex(transport=httpx.MockTransport(handler))
        assert await index.load("https://example.test/matches.csv") == 1
        assert index.lookup(52) == [MatchEntry(word="HELLO", scheme="Ordinal")]

    @pytest.mark.asyncio
    async def test_http_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        index = MatchDatabaseIndex(transport=transport, max_retries=0)
        with pytest.raises(MatchIndexLoadError):
            await index.load("https://example.test/missing.csv")
        assert not index.is_loaded()

    @pytest.mark.asyncio
    async def test_retries_transient_status(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(503)
            return httpx.Response(200, content=b"Word,Ordinal\nA,1\n")

        index = MatchDatabaseIndex(transport=httpx.MockTransport(handler), max_retries=1)
        assert await index.load("https://example.test/matches.csv") == 1
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_stream_dropped_mid_body_keeps_previous_index(self, csv_file):
        class DroppedStream(httpx.AsyncByteStream):
            async def __aiter__(self):
                yield b"Word,Ordinal\nPART"
                raise httpx.ReadError("connection reset by peer")

        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, stream=DroppedStream())
        )
        index = MatchDatabaseIndex(transport=transport, max_retries=0)
        await index.load(csv_file)

        with pytest.raises(MatchIndexLoadError):
            await index.load("https://example.test/matches.csv")

        assert index.is_loaded()
        assert index.lookup(74) == [MatchEntry(word="TEST", scheme="Ordinal")]
        assert index.status().error is not None
        assert index.status().record_count == 1

    @pytest.mark.asyncio
    async def test_undecodable_body(self):
        def handler(request):
            return httpx.Response(
                200,
                headers={"Content-Encoding": "gzip"},
                content=b"Word,Ordinal\nA,1\n",
            )

        index = MatchDatabaseIndex(transport=httpx.MockTransport(handler), max_retries=0)
        with pytest.raises(MatchIndexLoadError):
            await index.load("https://example.test/matches.csv")
        assert not index.is_loaded()
        assert "example.test" in index.status().error


class TestSupersede:

    @pytest.mark.asyncio
    async def test_newer_load_wins(self, tmp_path):
        old = write_csv(tmp_path, "old.csv", "Word,Ordinal\n" + "OLD,1\n" * 50)
        new = write_csv(tmp_path, "new.csv", "Word,Ordinal\nNEW,2\n")
        index = MatchDatabaseIndex(chunk_size=8)

        results = await asyncio.gather(
            index.load(old), index.load(new), return_exceptions=True
        )

        assert isinstance(results[0], LoadSupersededError)
        assert results[1] == 1
        assert index.lookup(1) == []
        assert index.lookup(2) == [MatchEntry(word="NEW", scheme="Ordinal")]
        assert index.status().error is None

    @pytest.mark.asyncio
    async def test_clear_supersedes(self, tmp_path):
        path = write_csv(tmp_path, "big.csv", "Word,Ordinal\n" + "W,1\n" * 50)
        index = MatchDatabaseIndex(chunk_size=8)
        task = asyncio.create_task(index.load(path))
        await asyncio.sleep(0)
        index.clear()
        with pytest.raises(LoadSupersededError):
            await task
        assert not index.is_loaded()
