"""
Decoder Exceptions
===================

Exception hierarchy for the decoder engine. Pure computations only
raise :class:`InvalidInputError`; the match index raises the
:class:`MatchIndexError` family from ``load``.
"""

from __future__ import annotations


class DecoderError(Exception):
    """Base class for all decoder errors."""


class InvalidInputError(DecoderError, ValueError):
    """An input cannot be analysed (e.g. zero for the number classifier)."""


class MatchIndexError(DecoderError):
    """Base class for match-index failures."""


class MatchIndexLoadError(MatchIndexError):
    """Downloading or parsing the match dataset failed.

    The previously loaded index, if any, remains in place.
    """


class LoadSupersededError(MatchIndexError):
    """A newer ``load`` call started before this one finished.

    The superseded load never replaces the index.
    """
