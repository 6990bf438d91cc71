"""CLI demo for roster generation."""

# Module responsibilities:
# - Build a sample two-sheet roster template and a rules CSV when the paths do not exist.
# - Run the generator for the requested month and print where the workbook went.

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from openpyxl import Workbook

from rosterflow.core.errors import RosterFlowError
from rosterflow.core.logger import get_logger
from rosterflow.services.roster import SheetConfig, SheetSelection, generate_roster

logger = get_logger().getChild("demo_roster")

SAMPLE_RULES = (
    "月份,可休總天數,備註說明\n"
    "一,8,1/1元旦\n"
    "二,10,春節2/15(小年夜)~2/19(初三);2/20補休(2/15小年夜週日);2/28和平紀念日\n"
    "三,9,\n"
    "四,9,4/3兒童節補假;4/4兒童節(清明)\n"
    "五,8,5/1勞動節\n"
    "六,8,6/19端午節\n"
    "七,9,\n"
    "八,9,\n"
    "九,8,9/25中秋節\n"
    "十,8,10/10國慶日\n"
    "十一,9,\n"
    "十二,9,12/25行憲紀念日\n"
    "合計,104,\n"
)


def _fill_sample_sheet(ws, staff: list[str]) -> None:
    ws["A1"] = "工程人員輪休表"
    ws["H2"] = "2025年12月"
    ws["A4"] = "編號"
    ws["B4"] = "姓名"
    for day in range(1, 32):
        ws.cell(row=4, column=2 + day, value=day)
        ws.cell(row=5, column=2 + day, value="日一二三四五六"[day % 7])
    ws.cell(row=4, column=34, value="合計")
    for offset, name in enumerate(staff):
        ws.cell(row=6 + offset, column=1, value=offset + 1)
        ws.cell(row=6 + offset, column=2, value=name)
    ws.cell(row=6 + len(staff) + 1, column=1, value="農曆")


def _generate_template_example(path: Path) -> None:
    wb = Workbook()
    wb.active.title = "北區"
    _fill_sample_sheet(wb.active, ["王大明", "李小華", "張三豐"])
    _fill_sample_sheet(wb.create_sheet("南區"), ["陳美麗", "林志明"])
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    logger.info("Generated example template workbook", extra={"path": str(path)})


def ensure_examples(template: Path, rules: Path) -> None:
    if not template.exists():
        _generate_template_example(template)
    if not rules.exists():
        rules.parent.mkdir(parents=True, exist_ok=True)
        rules.write_text(SAMPLE_RULES, encoding="utf-8")
        logger.info("Generated example rules table", extra={"path": str(rules)})


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Roster generation demo")
    parser.add_argument("--template", type=Path, default=Path("examples/roster_template.xlsx"))
    parser.add_argument("--rules", type=Path, default=Path("examples/roster_rules.csv"))
    parser.add_argument("--year", type=int, default=2026)
    parser.add_argument("--month", type=int, default=2)
    parser.add_argument("--out", type=Path, default=None, help="Output directory")
    parser.add_argument("--report", action="store_true", help="Also write the Markdown summary")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])

    try:
        ensure_examples(args.template, args.rules)
        selections = [
            SheetSelection(name="北區", config=SheetConfig(staff_list=["周一", "吳二", "鄭三"])),
            SheetSelection(name="南區", config=SheetConfig(staff_list=["王四"])),
        ]
        result = generate_roster(
            args.template,
            args.rules,
            args.year,
            args.month,
            selections,
            args.out,
            write_report=args.report,
            progress_cb=lambda text, pct: print(f"[{pct:3.0f}%] {text}"),
        )
    except RosterFlowError as exc:
        logger.error("Roster demo failed", extra={"error": str(exc)})
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Sheets processed: {', '.join(result.processed_sheets)}")
    print(f"Output: {result.output_path}")
    if result.report_path:
        print(f"Report: {result.report_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
