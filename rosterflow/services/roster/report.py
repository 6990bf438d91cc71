"""Markdown run summary for generated rosters."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from .models import StructureDescriptor


def _fmt(value: object) -> str:
    return "-" if value is None or value == "" else str(value)


def generate_report(
    output_path: Path,
    *,
    year: int,
    month: int,
    sheets: list[str],
    skipped: list[str],
    total_leave_days: object,
    notes: str,
    holidays: Mapping[int, str],
    structures: Mapping[str, StructureDescriptor],
) -> Path:
    """Write ``<output stem>_report.md`` next to the generated workbook."""

    report_path = output_path.with_name(f"{output_path.stem}_report.md")

    lines = ["# 輪休表生成摘要", ""]
    lines.append(f"- 目標年月: {year} 年 {month} 月")
    lines.append(f"- 選取場域: {', '.join(sheets) if sheets else '-'}")
    if skipped:
        lines.append(f"- 未找到的工作表: {', '.join(skipped)}")
    lines.append(f"- 可休總天數: {_fmt(total_leave_days)}")
    lines.append(f"- 備註說明: {notes or '無'}")
    lines.append("")

    if holidays:
        lines.append("## 節日標註")
        for day in sorted(holidays):
            lines.append(f"- {month}/{day}: {holidays[day]}")
        lines.append("")

    if structures:
        lines.append("## Detected structure")
        for name, structure in structures.items():
            lines.append(f"- **{name}**")
            lines.append(
                f"  - Date row: {_fmt(structure.date_row)} "
                f"(columns {_fmt(structure.date_start_col)}-{_fmt(structure.date_end_col)})"
            )
            lines.append(f"  - Weekday row: {_fmt(structure.weekday_row)}")
            rows = ", ".join(str(s.row) for s in structure.staff_rows)
            lines.append(f"  - Staff rows: {rows or '-'}")
            lines.append(f"  - Lunar row: {_fmt(structure.lunar_row)}")
            lines.append(
                f"  - Total label: row {_fmt(structure.total_header_row)}, column {_fmt(structure.total_column)}"
            )
        lines.append("")

    report_path.write_text("\n".join(lines), encoding="utf-8")
    return report_path
