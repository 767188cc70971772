"""Tests for the cipher engine."""

import pytest

from decoder.analyzers.gematria import LETTER_VALUES, CipherEngine, clean_text
from decoder.core.models import CharValue, CipherScheme
from shared.math_utils import reduce_with_masters


@pytest.fixture
def engine():
    return CipherEngine()


class TestTotals:

    def test_ordinal_basics(self, engine):
        assert engine.compute("ABC", CipherScheme.ORDINAL) == 6
        assert engine.compute("DECRYPTED", "Ordinal") == 100

    def test_compute_all_covers_every_scheme(self, engine):
        totals = engine.compute_all("Decrypted")
        assert list(totals) == list(CipherScheme)
        assert totals[CipherScheme.ORDINAL] == 100

    def test_reverse_ordinal_complements_ordinal(self, engine):
        text = "Hello, World!"
        totals = engine.compute_all(text)
        letters = len(clean_text(text))
        assert totals[CipherScheme.ORDINAL] + totals[CipherScheme.REVERSE_ORDINAL] == 27 * letters

    def test_reduction_reduces_each_letter(self, engine):
        # K = 11 and V = 22 reduce to 2 and 4; ordinal total is 33
        totals = engine.compute_all("KV")
        assert totals[CipherScheme.ORDINAL] == 33
        assert totals[CipherScheme.REDUCTION] == 6
        assert reduce_with_masters(33) == 33

    def test_case_and_punctuation_ignored(self, engine):
        assert engine.compute_all("a-b c!") == engine.compute_all("ABC")

    def test_empty_and_letter_free_input(self, engine):
        assert set(engine.compute_all("").values()) == {0}
        assert set(engine.compute_all("123 !!").values()) == {0}

    def test_unknown_scheme_raises_in_compute(self, engine):
        with pytest.raises(ValueError):
            engine.compute("abc", "Nonexistent")


class TestLetterTables:
    """Spot checks of individual per-letter rules."""

    def test_every_table_has_26_entries(self):
        assert all(len(table) == 26 for table in LETTER_VALUES.values())

    def test_reverse_reduction(self):
        assert LETTER_VALUES[CipherScheme.REVERSE_REDUCTION][0] == 8

    def test_sumerian_is_six_times_ordinal(self, engine):
        assert engine.compute("Decrypted", CipherScheme.SUMERIAN) == 600

    def test_latin_anomalous_j(self):
        assert LETTER_VALUES[CipherScheme.LATIN][9] == 600

    def test_three_six_nine(self, engine):
        assert engine.compute("ABC", CipherScheme.THREE_SIX_NINE) == 18

    def test_standard(self):
        table = LETTER_VALUES[CipherScheme.STANDARD]
        assert (table[0], table[8], table[9], table[17], table[18], table[25]) == (
            1, 9, 10, 90, 100, 800,
        )

    def test_figurate_schemes(self, engine):
        assert engine.compute("C", CipherScheme.TRIGONAL) == 6
        assert engine.compute("C", CipherScheme.SQUARES) == 9

    def test_offset_and_lookup_schemes(self, engine):
        assert engine.compute("A", CipherScheme.SATANIC) == 36
        assert engine.compute("Z", CipherScheme.PRIMES) == 101
        assert engine.compute("CALL", CipherScheme.KEYPAD) == 14

    def test_septenary_cycle(self):
        table = LETTER_VALUES[CipherScheme.SEPTENARY]
        assert (table[6], table[7], table[12], table[13]) == (7, 6, 1, 1)


class TestBreakdown:

    def test_aligned_with_input_text(self, engine):
        assert engine.breakdown("A b!", "Ordinal") == [
            CharValue(char="A", value=1),
            CharValue(char=" ", value=0),
            CharValue(char="b", value=2),
            CharValue(char="!", value=0),
        ]

    def test_sum_matches_total(self, engine):
        text = "Solar Eclipse"
        for scheme in CipherScheme:
            chars = engine.breakdown(text, scheme)
            assert len(chars) == len(text)
            assert sum(c.value for c in chars) == engine.compute(text, scheme)

    def test_unknown_scheme_is_empty(self, engine):
        assert engine.breakdown("abc", "Nonexistent") == []


def test_scheme_names_order():
    names = CipherEngine.scheme_names()
    assert len(names) == 19
    assert names[0] == "Ordinal"
    assert names[-1] == "Squares"
