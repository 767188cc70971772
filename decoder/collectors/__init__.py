"""
Decoder Collectors
===================

I/O-bound components that pull external datasets into memory.
"""

from decoder.collectors.match_index import MatchDatabaseIndex

__all__ = ["MatchDatabaseIndex"]
