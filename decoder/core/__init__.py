"""
Decoder Core Module
====================

Data models and exceptions shared by every decoder component. The
facade lives in :mod:`decoder.core.engine`.
"""

from decoder.core.errors import (
    DecoderError,
    InvalidInputError,
    LoadSupersededError,
    MatchIndexError,
    MatchIndexLoadError,
)
from decoder.core.models import (
    CharValue,
    CipherScheme,
    Confidence,
    DatedEvent,
    DayCountRow,
    EntityChronology,
    MatchEntry,
    NumberReport,
)

__all__ = [
    "CharValue",
    "CipherScheme",
    "Confidence",
    "DatedEvent",
    "DayCountRow",
    "DecoderError",
    "EntityChronology",
    "InvalidInputError",
    "LoadSupersededError",
    "MatchEntry",
    "MatchIndexError",
    "MatchIndexLoadError",
    "NumberReport",
]
