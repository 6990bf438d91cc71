"""`rosterflow_io` top-level package exports the workbook and rules-table I/O helpers."""

# Module responsibilities:
# - Re-export template loading, rules-table reading and output saving so the roster service
#   has a stable API surface.
# - Provide package version placeholder for future packaging.

from __future__ import annotations

from .excel_reader import TemplateWorkbook, load_template, read_table
from .excel_writer import output_filename, save_workbook

__all__ = [
    "TemplateWorkbook",
    "load_template",
    "read_table",
    "output_filename",
    "save_workbook",
]

__version__ = "0.1.0"
