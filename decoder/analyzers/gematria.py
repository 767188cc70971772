"""
Gematria Cipher Engine
=======================

Converts text into integer values under every scheme of
:class:`~decoder.core.models.CipherScheme`. Each scheme assigns a value
to each of the 26 Latin letters; a text's value is the sum over its
letters after lower-casing and discarding everything outside ``a-z``.

Per-letter tables are built once at import time, one 26-tuple per
scheme. Import fails if a scheme has no table, so the dispatch is
exhaustive over the enum.

Scheme rules (``o`` = ordinal position 1..26, ``i`` = o - 1):

    Ordinal             o
    Reverse Ordinal     27 - o
    Reduction           ((o - 1) mod 9) + 1     (no 11/22/33 exception)
    Reverse Reduction   Reduction of (27 - o)
    Chaldean            fixed table, values 1..8
    Septenary           1,2,3,4,5,6,7,6,5,4,3,2,1 repeating every 13
    Sumerian            6o
    Latin               A-I = 1..9, J = 600, K..Z classical progression
    Fibonacci           mirrored sequence 1,1,2,...,233,233,...,1,1
    Primes              the o-th prime
    Pi                  fixed 26-digit table
    Three Six Nine      o mod 3: 1 -> 3, 2 -> 6, 0 -> 9
    Keypad              telephone keypad digit
    Satanic             o + 35
    English Kabbalah    fixed table
    Trigrammaton        fixed table
    Trigonal            o(o + 1) / 2
    Standard            ((i mod 9) + 1) * 10^(i div 9)
    Squares             o^2

References:
    - Ifrah, G. (2000). The Universal History of Numbers. Wiley.
    - Cheiro (1926). Cheiro's Book of Numbers. Herbert Jenkins.
"""

from __future__ import annotations

import string
from typing import Callable, Union

from shared.math_utils import digital_root
from decoder.core.models import CharValue, CipherScheme


ALPHABET: str = string.ascii_lowercase
_LETTER_INDEX: dict[str, int] = {ch: idx for idx, ch in enumerate(ALPHABET)}


# ===================================================================== #
#  Reference tables (A..Z)
# ===================================================================== #

_PRIMES: tuple[int, ...] = (
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41,
    43, 47, 53, 59, 61, 67, 71, 73, 79, 83, 89, 97, 101,
)
_FIBONACCI_MIRRORED: tuple[int, ...] = (
    1, 1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144, 233,
    233, 144, 89, 55, 34, 21, 13, 8, 5, 3, 2, 1, 1,
)
_PI_DIGITS: tuple[int, ...] = (
    3, 1, 4, 4, 6, 0, 5, 5, 1, 1, 2, 9, 9,
    6, 9, 3, 1, 4, 4, 2, 7, 8, 2, 3, 4, 3,
)
_SEPTENARY_CYCLE: tuple[int, ...] = (1, 2, 3, 4, 5, 6, 7, 6, 5, 4, 3, 2, 1)
_CHALDEAN: tuple[int, ...] = (
    1, 2, 3, 4, 5, 8, 3, 5, 1, 1, 2, 3, 4,
    5, 7, 8, 1, 2, 3, 4, 6, 6, 6, 5, 1, 7,
)
_ENGLISH_KABBALAH: tuple[int, ...] = (
    1, 20, 13, 6, 25, 18, 11, 4, 23, 16, 9, 2, 21,
    14, 7, 26, 19, 12, 5, 24, 17, 10, 3, 22, 15, 8,
)
_TRIGRAMMATON: tuple[int, ...] = (
    5, 20, 2, 23, 13, 12, 11, 3, 0, 7, 17, 1, 21,
    24, 10, 4, 16, 14, 15, 9, 25, 22, 8, 6, 18, 19,
)
_KEYPAD: tuple[int, ...] = (
    2, 2, 2, 3, 3, 3, 4, 4, 4, 5, 5, 5, 6,
    6, 6, 7, 7, 7, 7, 8, 8, 8, 9, 9, 9, 9,
)
# J is the anomalous 600; K..Z do not increase monotonically.
_LATIN: tuple[int, ...] = (
    1, 2, 3, 4, 5, 6, 7, 8, 9, 600, 10, 20, 30,
    40, 50, 60, 70, 80, 90, 100, 200, 700, 900, 300, 400, 500,
)


def _three_six_nine(ordinal: int) -> int:
    return {1: 3, 2: 6, 0: 9}[ordinal % 3]


# Per-letter rule, given the ordinal position 1..26.
_RULES: dict[CipherScheme, Callable[[int], int]] = {
    CipherScheme.ORDINAL: lambda o: o,
    CipherScheme.REVERSE_ORDINAL: lambda o: 27 - o,
    CipherScheme.REDUCTION: digital_root,
    CipherScheme.REVERSE_REDUCTION: lambda o: digital_root(27 - o),
    CipherScheme.CHALDEAN: lambda o: _CHALDEAN[o - 1],
    CipherScheme.SEPTENARY: lambda o: _SEPTENARY_CYCLE[(o - 1) % 13],
    CipherScheme.SUMERIAN: lambda o: o * 6,
    CipherScheme.LATIN: lambda o: _LATIN[o - 1],
    CipherScheme.FIBONACCI: lambda o: _FIBONACCI_MIRRORED[o - 1],
    CipherScheme.PRIMES: lambda o: _PRIMES[o - 1],
    CipherScheme.PI: lambda o: _PI_DIGITS[o - 1],
    CipherScheme.THREE_SIX_NINE: _three_six_nine,
    CipherScheme.KEYPAD: lambda o: _KEYPAD[o - 1],
    CipherScheme.SATANIC: lambda o: o + 35,
    CipherScheme.ENGLISH_KABBALAH: lambda o: _ENGLISH_KABBALAH[o - 1],
    CipherScheme.TRIGRAMMATON: lambda o: _TRIGRAMMATON[o - 1],
    CipherScheme.TRIGONAL: lambda o: o * (o + 1) // 2,
    CipherScheme.STANDARD: lambda o: ((o - 1) % 9 + 1) * 10 ** ((o - 1) // 9),
    CipherScheme.SQUARES: lambda o: o * o,
}

_missing = [scheme.value for scheme in CipherScheme if scheme not in _RULES]
if _missing:
    raise RuntimeError(f"No letter rule defined for schemes: {_missing}")

LETTER_VALUES: dict[CipherScheme, tuple[int, ...]] = {
    scheme: tuple(_RULES[scheme](pos) for pos in range(1, 27))
    for scheme in CipherScheme
}


def clean_text(text: str) -> str:
    """Lower-case *text* and keep only the letters ``a-z``."""
    return "".join(ch for ch in text.lower() if ch in _LETTER_INDEX)


SchemeLike = Union[CipherScheme, str]


class CipherEngine:
    """Computes gematria values of text under every cipher scheme.

    Stateless apart from the module-level tables; one instance can be
    shared freely.

    Usage::

        engine = CipherEngine()
        totals = engine.compute_all("Decrypted")
        totals[CipherScheme.ORDINAL]        # 100
        engine.breakdown("A b!", "Ordinal")  # A=1, ' '=0, b=2, '!'=0
    """

    def compute_all(self, text: str) -> dict[CipherScheme, int]:
        """Return the total of *text* under every scheme.

        Empty or letter-free input yields 0 for every scheme.
        """
        indices = [_LETTER_INDEX[ch] for ch in clean_text(text)]
        return {
            scheme: sum(table[idx] for idx in indices)
            for scheme, table in LETTER_VALUES.items()
        }

    def compute(self, text: str, scheme: SchemeLike) -> int:
        """Return the total of *text* under a single *scheme*.

        Raises:
            ValueError: If *scheme* is not a known scheme name.
        """
        table = LETTER_VALUES[CipherScheme(scheme)]
        return sum(table[_LETTER_INDEX[ch]] for ch in clean_text(text))

    def breakdown(self, text: str, scheme: SchemeLike) -> list[CharValue]:
        """Per-character values aligned 1:1 with *text*.

        Case, spaces and punctuation are preserved; every character that
        is not a Latin letter is valued 0. An unrecognised scheme name
        yields an empty list.
        """
        try:
            table = LETTER_VALUES[CipherScheme(scheme)]
        except ValueError:
            return []

        result: list[CharValue] = []
        for ch in text:
            idx = _LETTER_INDEX.get(ch.lower())
            result.append(CharValue(char=ch, value=table[idx] if idx is not None else 0))
        return result

    @staticmethod
    def scheme_names() -> list[str]:
        """Display names of all schemes in declaration order."""
        return [scheme.value for scheme in CipherScheme]
