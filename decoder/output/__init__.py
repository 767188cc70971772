"""
Decoder Output Module
======================

Console display and JSON report generation for decoder results.
"""

from decoder.output.console import DecoderConsoleOutput
from decoder.output.report import DecoderReportGenerator

__all__ = [
    "DecoderConsoleOutput",
    "DecoderReportGenerator",
]
