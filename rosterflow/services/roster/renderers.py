"""Region renderers that rewrite a detected roster worksheet in place.

Each renderer touches one semantic region and leaves every other cell (values, formulas,
styles) alone. Callers check the prerequisite fields of the
:class:`~rosterflow.services.roster.models.StructureDescriptor` before invoking them.
"""

from __future__ import annotations

from copy import copy
from datetime import date
import logging
import math
import re
from typing import Any, Mapping, Sequence

from openpyxl.styles import Font
from openpyxl.utils import quote_sheetname
from openpyxl.worksheet.worksheet import Worksheet

from .cells import (
    WHITE,
    YELLOW,
    SheetReader,
    apply_solid_fill,
    clear_value,
    is_formula,
    merge_font_color,
    remove_fill,
    rich_text_runs,
    write_value,
)
from .models import StaffRow, StructureDescriptor
from .structure import TOTAL_LABELS, WEEKDAY_NAMES

LOGGER = logging.getLogger(__name__)

BANNER_ROWS = 10
MAX_DAYS = 31
# 31 day columns plus the trailing summary cells of a staff row.
STAFF_AREA_WIDTH = 35

GREEN = "FF008000"
RED = "FFFF0000"
BLACK = "FF000000"
BLUE = "FF0000FF"

LUNAR_FONT_NAME = "細明體-ExtB"
LUNAR_FONT_SIZE = 11
LUNAR_TEXT_ROTATION = 255

_YEAR_MONTH_RE = re.compile(r"\d{4}\s*年\s*\d{1,2}\s*月")
_YEAR_DOT_MONTH_RE = re.compile(r"\d{4}\.\d{1,2}")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def _looks_like_year_month(text: str) -> bool:
    return bool(_YEAR_MONTH_RE.search(text) or _YEAR_DOT_MONTH_RE.search(text))


def banner_text(year: int, month: int) -> str:
    return f"{year}年{month}月"


def banner_formula(first_sheet_name: str, coordinate: str) -> str:
    """Formula pointing at the same cell on the first sheet, converted to half-width."""

    return f"=ASC({quote_sheetname(first_sheet_name)}!{coordinate})"


def _is_banner_cell(reader: SheetReader, cell: Any) -> bool:
    value = cell.value
    if is_formula(value):
        return _looks_like_year_month(reader.text_of(cell))
    runs = list(rich_text_runs(value))
    if runs:
        return _looks_like_year_month("".join(runs)) or any(_looks_like_year_month(run) for run in runs)
    if isinstance(value, str):
        return _looks_like_year_month(value)
    return False


def render_banner(
    reader: SheetReader,
    year: int,
    month: int,
    *,
    is_first_sheet: bool,
    first_sheet_name: str,
) -> list[str]:
    """Rewrite the year/month banner cells found in the first rows.

    On the first sheet the banner becomes the literal ``YYYY年M月`` text. Other sheets get
    a formula referencing the same address on the first sheet. Returns the rewritten
    coordinates.
    """

    ws = reader.worksheet
    touched: list[str] = []
    last_row = min(BANNER_ROWS, ws.max_row)
    for row in ws.iter_rows(min_row=1, max_row=last_row, min_col=1, max_col=ws.max_column):
        for cell in row:
            if not _is_banner_cell(reader, cell):
                continue
            if is_first_sheet:
                write_value(cell, banner_text(year, month))
            else:
                write_value(cell, banner_formula(first_sheet_name, cell.coordinate))
            LOGGER.info("Banner %s updated (first sheet: %s)", cell.coordinate, is_first_sheet)
            touched.append(cell.coordinate)
            break
    if not touched:
        LOGGER.info("No year/month banner found in sheet %s", ws.title)
    return touched


def _style_for_weekday(cell: Any, weekday: int) -> None:
    # date.weekday(): Monday == 0 ... Sunday == 6
    if weekday == 5:
        merge_font_color(cell, GREEN)
        remove_fill(cell)
    elif weekday == 6:
        merge_font_color(cell, RED)
        apply_solid_fill(cell, YELLOW)
    else:
        merge_font_color(cell, BLACK)
        remove_fill(cell)


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[(day.weekday() + 1) % 7]


def render_date_row(ws: Worksheet, structure: StructureDescriptor, year: int, month: int, days_in_month: int) -> None:
    row, start = structure.date_row, structure.date_start_col
    assert row is not None and start is not None
    for day in range(1, MAX_DAYS + 1):
        cell = ws.cell(row=row, column=start + day - 1)
        if day <= days_in_month:
            write_value(cell, day)
            _style_for_weekday(cell, date(year, month, day).weekday())
        else:
            clear_value(cell)
            remove_fill(cell)
    LOGGER.info("Date row %s rendered with %d days", row, days_in_month)


def render_weekday_row(ws: Worksheet, structure: StructureDescriptor, year: int, month: int, days_in_month: int) -> None:
    row, start = structure.weekday_row, structure.date_start_col
    assert row is not None and start is not None
    for day in range(1, MAX_DAYS + 1):
        cell = ws.cell(row=row, column=start + day - 1)
        if day <= days_in_month:
            current = date(year, month, day)
            write_value(cell, weekday_name(current))
            _style_for_weekday(cell, current.weekday())
        else:
            clear_value(cell)
            remove_fill(cell)
    LOGGER.info("Weekday row %s rendered", row)


def render_staff_rows(
    ws: Worksheet,
    staff_rows: Sequence[StaffRow],
    staff_names: Sequence[str],
    date_start_col: int | None,
) -> None:
    """Zip detected staff rows with configured names and reset their marking area.

    Populated rows alternate white/yellow starting with white; unpopulated rows are
    cleared and filled white.
    """

    for index, staff_row in enumerate(staff_rows):
        has_staff = index < len(staff_names)
        banded = has_staff and (index + 1) % 2 == 0
        colour = YELLOW if banded else WHITE

        name_cell = ws.cell(row=staff_row.row, column=staff_row.name_column)
        write_value(name_cell, staff_names[index] if has_staff else None)
        apply_solid_fill(name_cell, colour)

        if date_start_col is not None:
            for col in range(date_start_col, date_start_col + STAFF_AREA_WIDTH):
                cell = ws.cell(row=staff_row.row, column=col)
                clear_value(cell)
                apply_solid_fill(cell, colour)

        if has_staff:
            LOGGER.info("Staff row %s -> %s", staff_row.row, staff_names[index])
        else:
            LOGGER.info("Staff row %s cleared", staff_row.row)


def render_lunar_row(
    ws: Worksheet,
    structure: StructureDescriptor,
    days_in_month: int,
    holidays: Mapping[int, str],
) -> None:
    row, start = structure.lunar_row, structure.date_start_col
    assert row is not None and start is not None
    for day in range(1, MAX_DAYS + 1):
        cell = ws.cell(row=row, column=start + day - 1)
        label = holidays.get(day) if day <= days_in_month else None
        if not label:
            clear_value(cell)
            apply_solid_fill(cell, WHITE)
            continue
        write_value(cell, label)
        apply_solid_fill(cell, YELLOW)
        cell.font = Font(name=LUNAR_FONT_NAME, size=LUNAR_FONT_SIZE, color=BLUE)
        alignment = copy(cell.alignment)
        alignment.textRotation = LUNAR_TEXT_ROTATION
        alignment.vertical = "center"
        alignment.horizontal = "center"
        alignment.wrap_text = True
        cell.alignment = alignment
    LOGGER.info("Lunar row %s rendered with %d labels", row, sum(1 for d in holidays if d <= days_in_month))


def coerce_total(value: Any) -> Any:
    """Integer when the value starts with an integer, otherwise the raw value."""

    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else value
    if value is None:
        return ""
    match = _LEADING_INT_RE.match(str(value))
    if match:
        return int(match.group(1))
    return value


def render_total(reader: SheetReader, total_leave_days: Any) -> str | None:
    """Write the total below the first cell reading exactly ``合計`` or ``合 計``.

    Cells that merely contain the label (notes, remarks) are not anchors. Returns the
    written coordinate, or ``None`` when the sheet has no such label.
    """

    ws = reader.worksheet
    for row in ws.iter_rows(min_row=1, max_row=ws.max_row, min_col=1, max_col=ws.max_column):
        for cell in row:
            if reader.text_of(cell).strip() not in TOTAL_LABELS:
                continue
            target = ws.cell(row=cell.row + 1, column=cell.column)
            write_value(target, coerce_total(total_leave_days))
            LOGGER.info("Total leave days written to %s: %s", target.coordinate, total_leave_days)
            return target.coordinate
    LOGGER.info("No 合計 label in sheet %s, total left unchanged", ws.title)
    return None


__all__ = [
    "render_banner",
    "render_date_row",
    "render_weekday_row",
    "render_staff_rows",
    "render_lunar_row",
    "render_total",
    "banner_text",
    "banner_formula",
    "coerce_total",
    "weekday_name",
]
