"""Content-driven structure detection for user-authored roster templates.

The template layout is not declared anywhere. A single pass over the worksheet looks
for the date row, the weekday row below it, staff rows, the lunar-calendar row and the
"合計" label, purely by matching the display text of cells.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from openpyxl.cell.cell import Cell, MergedCell
from openpyxl.worksheet.worksheet import Worksheet

from .cells import SheetReader
from .models import StaffRow, StructureDescriptor

LOGGER = logging.getLogger(__name__)

WEEKDAY_NAMES = ("日", "一", "二", "三", "四", "五", "六")
LUNAR_LABELS = ("農曆", "農 曆")
TOTAL_LABELS = ("合計", "合 計")

MAX_DAY_SPAN = 31
NAME_COLUMNS = range(2, 6)
DEFAULT_NAME_COLUMN = 2
LUNAR_LABEL_COLUMNS = 3
STAFF_WINDOW = 10

_STAFF_INDEX_RE = re.compile(r"^[1-9]$")
_CJK_NAME_RE = re.compile(r"[一-龥]{2,}")
_DAY_RE = re.compile(r"^\d+$")


def _is_day_number(text: str) -> bool:
    text = text.strip()
    return bool(_DAY_RE.match(text)) and 1 <= int(text) <= MAX_DAY_SPAN


def _find_name_column(reader: SheetReader, row: Sequence[Cell | MergedCell]) -> Optional[int]:
    for col in NAME_COLUMNS:
        if col > len(row):
            break
        if _CJK_NAME_RE.search(reader.text_of(row[col - 1])):
            return col
    return None


class StructureDetector:
    """Infer a :class:`StructureDescriptor` from one worksheet.

    The detector keeps no state between calls to :meth:`detect`; a new descriptor is
    built for every worksheet.
    """

    def __init__(self, reader: SheetReader) -> None:
        self.reader = reader

    @classmethod
    def for_worksheet(cls, worksheet: Worksheet, cached_worksheet: Worksheet | None = None) -> "StructureDetector":
        return cls(SheetReader(worksheet, cached_worksheet))

    def detect(self) -> StructureDescriptor:
        ws = self.reader.worksheet
        structure = StructureDescriptor()
        staff_rows: List[StaffRow] = []
        seen_rows: set[int] = set()

        for row in ws.iter_rows(min_row=1, max_row=ws.max_row, min_col=1, max_col=ws.max_column):
            if not row:
                continue
            row_number = row[0].row
            texts = [self.reader.text_of(cell) for cell in row]

            if structure.date_row is None:
                self._match_date_row(structure, row_number, texts)
            elif row_number == structure.date_row + 1:
                self._match_weekday_row(structure, row_number, texts)

            if _STAFF_INDEX_RE.match(texts[0].strip()):
                name_col = _find_name_column(self.reader, row) or DEFAULT_NAME_COLUMN
                if row_number not in seen_rows:
                    staff_rows.append(StaffRow(row=row_number, name_column=name_col))
                    seen_rows.add(row_number)
                    LOGGER.debug("Staff row %s (name column %s)", row_number, name_col)

            weekday_row = structure.weekday_row
            if weekday_row is not None and weekday_row < row_number < weekday_row + STAFF_WINDOW:
                name_col = _find_name_column(self.reader, row)
                if name_col is not None and row_number not in seen_rows:
                    staff_rows.append(StaffRow(row=row_number, name_column=name_col))
                    seen_rows.add(row_number)
                    LOGGER.debug("Additional staff row %s (name column %s)", row_number, name_col)

            if structure.lunar_row is None:
                for text in texts[:LUNAR_LABEL_COLUMNS]:
                    if any(label in text for label in LUNAR_LABELS):
                        structure.lunar_row = row_number
                        LOGGER.debug("Lunar row %s", row_number)
                        break

            if structure.total_header_row is None:
                for idx, text in enumerate(texts, start=1):
                    if any(label in text for label in TOTAL_LABELS):
                        structure.total_header_row = row_number
                        structure.total_column = idx
                        LOGGER.debug("Total label at row %s col %s", row_number, idx)
                        break

        structure.staff_rows = sorted(staff_rows, key=lambda s: s.row)
        return structure

    def _match_date_row(self, structure: StructureDescriptor, row_number: int, texts: List[str]) -> None:
        for idx in range(len(texts) - 1):
            if texts[idx].strip() == "1" and texts[idx + 1].strip() == "2":
                start_col = idx + 1
                end_col = start_col
                for offset in range(1, MAX_DAY_SPAN):
                    pos = idx + offset
                    if pos >= len(texts) or not _is_day_number(texts[pos]):
                        break
                    end_col = start_col + offset
                structure.date_row = row_number
                structure.date_start_col = start_col
                structure.date_end_col = end_col
                LOGGER.debug("Date row %s, columns %s-%s", row_number, start_col, end_col)
                return

    def _match_weekday_row(self, structure: StructureDescriptor, row_number: int, texts: List[str]) -> None:
        start = structure.date_start_col
        if start is None:
            return
        end = structure.date_end_col or start + MAX_DAY_SPAN
        for text in texts[start - 1 : end]:
            if text.strip() in WEEKDAY_NAMES:
                structure.weekday_row = row_number
                LOGGER.debug("Weekday row %s", row_number)
                return


def detect_structure(worksheet: Worksheet, cached_worksheet: Worksheet | None = None) -> StructureDescriptor:
    """Run a fresh detection pass over ``worksheet``."""

    return StructureDetector.for_worksheet(worksheet, cached_worksheet).detect()


__all__ = ["StructureDetector", "detect_structure", "WEEKDAY_NAMES"]
