"""Public API for the roster generator service."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Sequence
import logging

from pydantic import BaseModel, ConfigDict

from rosterflow.core.errors import GenerationError
from rosterflow_io.excel_reader import TemplateWorkbook, load_template
from rosterflow_io.excel_writer import DEFAULT_TITLE, save_workbook

from .models import SheetSelection
from .orchestrator import ProgressCB, build_context, generate_workbook
from .report import generate_report
from .rules import RulesTable, load_rules

LOGGER = logging.getLogger(__name__)


class GenerationResult(BaseModel):
    """Aggregated outcome returned to callers."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    output_path: str
    year: int
    month: int
    days_in_month: int
    total_leave_days: Any
    notes: str
    holidays: Dict[int, str]
    processed_sheets: list[str]
    skipped_sheets: list[str]
    structures: Dict[str, Dict[str, Any]]
    report_path: str | None = None


def generate_roster(
    template_path: Path,
    rules: Path | RulesTable,
    year: int,
    month: int,
    selections: Sequence[SheetSelection],
    output_dir: Optional[Path] = None,
    *,
    title: str = DEFAULT_TITLE,
    write_report: bool = False,
    progress_cb: Optional[ProgressCB] = None,
) -> GenerationResult:
    """Fill the selected template sheets for ``year``/``month`` and save the workbook."""

    if not selections:
        raise ValueError("no worksheets selected")

    def progress(text: str, percent: float) -> None:
        if progress_cb:
            progress_cb(text, percent)
        LOGGER.info("%s (%.0f%%)", text, percent)

    table = rules if isinstance(rules, RulesTable) else load_rules(Path(rules))
    rule = table.lookup(month)
    if rule is None:
        LOGGER.warning("No rules row for month %s; total and holidays left empty", month)

    template: TemplateWorkbook = load_template(Path(template_path))
    try:
        context = build_context(year, month, rule, first_sheet_name=selections[0].name)
        try:
            run = generate_workbook(template, selections, context, progress_cb=progress)
        except Exception as e:  # noqa: BLE001
            LOGGER.error("Generation aborted: %s", e, exc_info=True)
            raise GenerationError(f"生成 Excel 時發生錯誤：{e}") from e

        progress("生成檔案中...", 90)
        output_path = save_workbook(
            template.workbook,
            year,
            month,
            out_dir=output_dir,
            title=title,
            template_path=Path(template_path),
        )
    finally:
        template.close()

    report_path: Path | None = None
    if write_report:
        report_path = generate_report(
            output_path,
            year=year,
            month=month,
            sheets=[s.name for s in selections],
            skipped=run.skipped,
            total_leave_days=context.total_leave_days,
            notes=rule.notes if rule else "",
            holidays=context.holidays,
            structures=run.structures,
        )
    progress("完成!", 100)

    LOGGER.info(
        "Generated %s (%d sheets processed / %d skipped)",
        output_path,
        len(run.processed),
        len(run.skipped),
    )

    return GenerationResult(
        output_path=str(output_path),
        year=year,
        month=month,
        days_in_month=context.days_in_month,
        total_leave_days=context.total_leave_days,
        notes=rule.notes if rule else "",
        holidays=dict(context.holidays),
        processed_sheets=run.processed,
        skipped_sheets=run.skipped,
        structures={name: s.to_dict() for name, s in run.structures.items()},
        report_path=str(report_path) if report_path else None,
    )
