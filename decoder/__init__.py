"""
DecoderCore -- Symbolic-Value Computation Engine
=================================================

Converts text into gematria values, classifies integers, matches day
spans between dated facts against a watchlist of control numbers, and
indexes a word/value dataset for reverse lookups.

Modules:
    - decoder.core.engine: Central facade wiring the components
    - decoder.core.models: Pydantic data models
    - decoder.core.errors: Exception hierarchy
    - decoder.analyzers: Cipher, number-theory, chronology and date analyzers
    - decoder.collectors: Match-dataset index loader
    - decoder.output: Console and report output
    - decoder.cli: Click-based command-line interface
"""

__version__ = "1.0.0"
__tool_name__ = "decoder"
