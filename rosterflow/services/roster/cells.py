"""Normalized read/write helpers over openpyxl cells.

Every pattern match in the detector and renderers works on :func:`read_display_text`,
never on raw cell internals. Formula results come from a second copy of the workbook
loaded with ``data_only=True``.
"""

from __future__ import annotations

from copy import copy
import logging
from typing import Any, Iterator, Optional

from openpyxl.cell.cell import Cell, MergedCell
from openpyxl.cell.rich_text import CellRichText
from openpyxl.styles import PatternFill
from openpyxl.worksheet.formula import ArrayFormula, DataTableFormula
from openpyxl.worksheet.worksheet import Worksheet

LOGGER = logging.getLogger(__name__)

YELLOW = "FFFFFF00"
WHITE = "FFFFFFFF"


def _run_text(run: Any) -> str:
    if isinstance(run, str):
        return run
    return getattr(run, "text", "") or ""


def rich_text_runs(value: Any) -> Iterator[str]:
    """Yield the text of each rich-text run; nothing for other values."""

    if isinstance(value, CellRichText):
        for run in value:
            yield _run_text(run)


def is_formula(value: Any) -> bool:
    if isinstance(value, (ArrayFormula, DataTableFormula)):
        return True
    return isinstance(value, str) and value.startswith("=") and len(value) > 1


def read_display_text(value: Any, cached: Any = None) -> str:
    """Project a raw cell value onto its displayed string.

    Args:
        value: Raw value as loaded with ``rich_text=True``.
        cached: Cached formula result, used only when ``value`` is a formula.
    """

    if value is None:
        return ""
    if is_formula(value):
        if cached is None or is_formula(cached):
            return ""
        return read_display_text(cached)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, CellRichText):
        return "".join(rich_text_runs(value))
    return str(value)


class SheetReader:
    """Display-text view over a worksheet and its cached-value twin."""

    def __init__(self, worksheet: Worksheet, cached_worksheet: Optional[Worksheet] = None) -> None:
        self.worksheet = worksheet
        self.cached_worksheet = cached_worksheet

    def cached_value(self, row: int, column: int) -> Any:
        if self.cached_worksheet is None:
            return None
        return self.cached_worksheet.cell(row=row, column=column).value

    def text_of(self, cell: Cell | MergedCell) -> str:
        value = cell.value
        cached = self.cached_value(cell.row, cell.column) if is_formula(value) else None
        return read_display_text(value, cached)

    def text(self, row: int, column: int) -> str:
        return self.text_of(self.worksheet.cell(row=row, column=column))


def write_value(cell: Cell | MergedCell, value: Any) -> None:
    """Assign ``value`` unless the cell is a covered part of a merged range."""

    if isinstance(cell, MergedCell):
        LOGGER.debug("Skipping value write on merged cell %s", cell.coordinate)
        return
    cell.value = value


def clear_value(cell: Cell | MergedCell) -> None:
    write_value(cell, None)


def apply_solid_fill(cell: Cell | MergedCell, argb: str) -> None:
    cell.fill = PatternFill(fill_type="solid", fgColor=argb, bgColor=argb)


def remove_fill(cell: Cell | MergedCell) -> None:
    cell.fill = PatternFill(fill_type=None)


def merge_font_color(cell: Cell | MergedCell, argb: str) -> None:
    """Change only the font colour, keeping name, size, weight and the rest."""

    font = copy(cell.font)
    font.color = argb
    cell.font = font
