"""Sequential per-worksheet detection and rendering."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field, replace
import logging
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from openpyxl.worksheet.worksheet import Worksheet

from rosterflow_io.excel_reader import TemplateWorkbook

from .cells import SheetReader
from .holidays import parse_holiday_notes
from .models import GenerationContext, SheetConfig, SheetSelection, StructureDescriptor
from .renderers import (
    render_banner,
    render_date_row,
    render_lunar_row,
    render_staff_rows,
    render_total,
    render_weekday_row,
)
from .rules import MonthRule
from .structure import StructureDetector

LOGGER = logging.getLogger(__name__)

ProgressCB = Callable[[str, float], None]

SHEET_PROGRESS_SHARE = 80.0


@dataclass(slots=True)
class WorkbookRun:
    """What happened to each selected worksheet during one run."""

    processed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    structures: Dict[str, StructureDescriptor] = field(default_factory=dict)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def build_context(
    year: int,
    month: int,
    rule: Optional[MonthRule],
    first_sheet_name: str,
    holidays: Optional[Mapping[int, str]] = None,
) -> GenerationContext:
    """Build the run-wide context; per-sheet fields are filled in with ``replace``."""

    notes = rule.notes if rule else ""
    return GenerationContext(
        year=year,
        month=month,
        days_in_month=days_in_month(year, month),
        total_leave_days=(rule.total_leave_days if rule else "") or "",
        holidays=dict(holidays) if holidays is not None else parse_holiday_notes(notes, month),
        sheet_config=SheetConfig(),
        is_first_sheet=True,
        first_sheet_name=first_sheet_name,
    )


def process_worksheet(
    worksheet: Worksheet,
    context: GenerationContext,
    cached_worksheet: Optional[Worksheet] = None,
) -> StructureDescriptor:
    """Detect the worksheet layout, then run every renderer whose region was found."""

    reader = SheetReader(worksheet, cached_worksheet)
    structure = StructureDetector(reader).detect()
    LOGGER.info("Sheet %s structure: %s", worksheet.title, structure.to_dict())

    render_banner(
        reader,
        context.year,
        context.month,
        is_first_sheet=context.is_first_sheet,
        first_sheet_name=context.first_sheet_name,
    )

    if structure.has_date_row:
        render_date_row(worksheet, structure, context.year, context.month, context.days_in_month)
    else:
        LOGGER.info("Sheet %s: no date row, date/weekday rendering skipped", worksheet.title)

    if structure.has_weekday_row:
        render_weekday_row(worksheet, structure, context.year, context.month, context.days_in_month)

    render_staff_rows(
        worksheet,
        structure.staff_rows,
        context.sheet_config.valid_staff(),
        structure.date_start_col,
    )

    if structure.has_lunar_row:
        render_lunar_row(worksheet, structure, context.days_in_month, context.holidays)
    else:
        LOGGER.info("Sheet %s: no lunar row, holiday rendering skipped", worksheet.title)

    render_total(reader, context.total_leave_days)

    return structure


def generate_workbook(
    template: TemplateWorkbook,
    selections: Sequence[SheetSelection],
    context: GenerationContext,
    progress_cb: Optional[ProgressCB] = None,
) -> WorkbookRun:
    """Process the selected worksheets in order, mutating ``template.workbook`` in place.

    The first selection is the authoritative sheet for the banner; its name is used in the
    cross-sheet formulas of every later sheet. Exceptions propagate and leave already
    processed sheets mutated.
    """

    run = WorkbookRun()
    total = len(selections)
    for index, selection in enumerate(selections):
        worksheet = template.worksheet(selection.name)
        if worksheet is None:
            LOGGER.warning("Worksheet %s not found in template, skipped", selection.name)
            run.skipped.append(selection.name)
            continue

        if progress_cb:
            progress_cb(f"處理中: {selection.name}", (index + 1) / total * SHEET_PROGRESS_SHARE)

        sheet_context = replace(
            context,
            sheet_config=selection.config,
            is_first_sheet=index == 0,
        )
        structure = process_worksheet(worksheet, sheet_context, template.cached_worksheet(selection.name))
        run.structures[selection.name] = structure
        run.processed.append(selection.name)
    return run


__all__ = [
    "ProgressCB",
    "WorkbookRun",
    "build_context",
    "days_in_month",
    "generate_workbook",
    "process_worksheet",
]
