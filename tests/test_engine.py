"""Tests for the decoder engine facade."""

import pytest

from shared.config import DecoderConfig
from decoder.core.engine import DecoderEngine
from decoder.core.errors import InvalidInputError
from decoder.core.models import CipherScheme, DatedEvent, EntityChronology, MatchEntry


@pytest.fixture
def engine():
    return DecoderEngine()


def test_gematria_and_breakdown(engine):
    assert engine.gematria("ABC")[CipherScheme.ORDINAL] == 6
    assert [c.value for c in engine.breakdown("AB", "Sumerian")] == [6, 12]


def test_number_limits_come_from_config():
    config = DecoderConfig()
    config.number_theory.prime_search_limit = 3
    report = DecoderEngine(config).classify_number(97)
    assert report.basic.next_prime is None


def test_classify_zero_raises(engine):
    with pytest.raises(InvalidInputError):
        engine.classify_number(0)


def test_chronology(engine):
    entities = [
        EntityChronology(
            entity_name="Ada",
            events=[DatedEvent(date_type="Date of Birth", date_value="2024-01-01")],
        )
    ]
    rows = engine.chronology(entities, "2024-02-03")
    assert rows[0].is_control_match


def test_date_helpers(engine):
    assert engine.date_span("2024-01-01", "2024-02-03").total_days == 33
    assert engine.date_numerology("2024-03-22").year.sum == 8
    assert engine.day_difference("2024-01-01", "2024-01-31").total_days == 30
    assert engine.date_facts("2024-04-08").day_of_year == 99


@pytest.mark.parametrize(
    "call",
    [
        lambda e: e.date_span("nope", "2024-01-01"),
        lambda e: e.date_numerology("nope"),
        lambda e: e.day_difference("nope", "2024-01-01"),
        lambda e: e.date_facts("nope"),
    ],
)
def test_unparseable_dates_raise(engine, call):
    with pytest.raises(InvalidInputError):
        call(engine)


class TestMatches:

    @pytest.mark.asyncio
    async def test_find_matches(self, engine, tmp_path):
        path = tmp_path / "matches.csv"
        path.write_text("Word,Ordinal,Reduction\nCAB,6,6\nZZ,52,16\n", encoding="utf-8")

        assert engine.find_matches("ABC") == {}
        assert await engine.load_matches(path) == 2

        found = engine.find_matches("ABC")
        assert found[CipherScheme.ORDINAL] == [
            MatchEntry(word="CAB", scheme="Ordinal"),
            MatchEntry(word="CAB", scheme="Reduction"),
        ]
        assert engine.match_status().record_count == 2

    @pytest.mark.asyncio
    async def test_letter_free_text_has_no_matches(self, engine, tmp_path):
        path = tmp_path / "zero.csv"
        path.write_text("Word,Ordinal\nNOTHING,0\n", encoding="utf-8")
        await engine.load_matches(path)
        assert engine.find_matches("123") == {}
