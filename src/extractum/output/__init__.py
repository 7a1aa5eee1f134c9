"""Output handlers for extractum."""

from extractum.output.console import Console
from extractum.output.json_writer import build_report, write_json_report

__all__ = [
    "build_report",
    "write_json_report",
    "Console",
]
