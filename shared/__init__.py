"""
DecoderCore Shared Module
==========================

Configuration, logging, console, networking and integer utilities
shared by the decoder packages.
"""

from shared.config import DecoderConfig, get_config

__all__ = ["DecoderConfig", "get_config"]
