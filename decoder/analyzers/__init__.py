"""
Decoder Analyzers
==================

Pure, synchronous analysis components: gematria ciphers, number-theory
classification, chronology matching and calendar helpers.
"""

from decoder.analyzers.gematria import CipherEngine
from decoder.analyzers.number_theory import NumberTheoryClassifier
from decoder.analyzers.chronology import ChronologyMatcher

__all__ = [
    "CipherEngine",
    "NumberTheoryClassifier",
    "ChronologyMatcher",
]
