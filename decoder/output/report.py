"""
Decoder Report Generator
=========================

Builds machine-readable JSON reports from decoder results. Every report
carries a metadata header (command, subject, generation time, version)
and a ``result`` body holding the serialised models.

Pydantic models are dumped in JSON mode; enum dictionary keys (such as
:class:`~decoder.core.models.CipherScheme`) become their display names.
"""

from __future__ import annotations

import enum
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from decoder import __version__


def to_jsonable(value: Any) -> Any:
    """Recursively convert models, enums and containers to JSON types."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, dict):
        return {
            (k.value if isinstance(k, enum.Enum) else str(k)): to_jsonable(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


class DecoderReportGenerator:
    """JSON report builder for CLI output.

    Usage::

        reporter = DecoderReportGenerator()
        report = reporter.build("gematria", "Solar Eclipse", totals)
        reporter.generate_json(report, Path("out.json"))
    """

    def build(self, command: str, subject: str, result: Any) -> dict[str, Any]:
        """Assemble a report dictionary for one command invocation."""
        return {
            "report_metadata": {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "command": command,
                "subject": subject,
                "version": __version__,
            },
            "result": to_jsonable(result),
        }

    def render_json(self, report: dict[str, Any]) -> str:
        """Serialise *report* as indented JSON text."""
        return json.dumps(report, indent=2, ensure_ascii=False, default=str)

    def generate_json(self, report: dict[str, Any], output_path: Path) -> Path:
        """Write *report* to *output_path*, creating parent directories.

        Returns:
            Path to the generated JSON file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render_json(report), encoding="utf-8")
        return output_path
