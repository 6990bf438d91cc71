from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from types import SimpleNamespace
from typing import Callable, Iterable, Optional, Sequence

import pytest
from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep log files out of the home directory and the source tree.
_LOG_SANDBOX = Path(tempfile.mkdtemp(prefix="rosterflow-tests-"))
os.environ.setdefault("ROSTERFLOW_LOG_DIR", str(_LOG_SANDBOX / "logs"))
os.environ.setdefault("ROSTERFLOW_ROOT", str(_LOG_SANDBOX))

DATE_ROW = 4
WEEKDAY_ROW = 5
FIRST_STAFF_ROW = 6
LUNAR_ROW = 11
DATE_START_COL = 3
TOTAL_COL = DATE_START_COL + 31
BANNER_CELL = "H2"
OLD_STAFF = ("王大明", "李小華", "張三豐", "陳美麗")
WEEKDAYS = "日一二三四五六"

RULES_CSV = (
    "月份,可休總天數,備註說明\n"
    "一,8,1/1元旦\n"
    "二,10,春節2/15(小年夜)~2/19(初三);2/20補休(2/15小年夜週日);2/28和平紀念日\n"
    "三,9,\n"
    "合計,100,\n"
)


def fill_roster_sheet(
    ws: Worksheet,
    *,
    banner: Optional[str] = "2025年12月",
    days: int = 31,
    staff: Sequence[str] = OLD_STAFF,
    lunar: bool = True,
    total: bool = True,
) -> Worksheet:
    """Lay out a typical roster template on ``ws``."""

    ws["A1"] = "工程人員輪休表"
    if banner is not None:
        ws[BANNER_CELL] = banner
    ws.cell(row=DATE_ROW, column=1, value="編號")
    ws.cell(row=DATE_ROW, column=2, value="姓名")
    for day in range(1, days + 1):
        ws.cell(row=DATE_ROW, column=DATE_START_COL + day - 1, value=day)
        ws.cell(row=WEEKDAY_ROW, column=DATE_START_COL + day - 1, value=WEEKDAYS[day % 7])
    if total:
        ws.cell(row=DATE_ROW, column=TOTAL_COL, value="合計")
        ws.cell(row=WEEKDAY_ROW, column=TOTAL_COL, value=7)
    for offset, name in enumerate(staff):
        row = FIRST_STAFF_ROW + offset
        ws.cell(row=row, column=1, value=offset + 1)
        ws.cell(row=row, column=2, value=name)
        ws.cell(row=row, column=DATE_START_COL + 2, value="休")
    if lunar:
        ws.cell(row=LUNAR_ROW, column=1, value="農曆")
        ws.cell(row=LUNAR_ROW, column=DATE_START_COL + 9, value="冬至")
    ws["A20"] = "=SUM(C6:C9)"
    return ws


@pytest.fixture()
def layout() -> SimpleNamespace:
    return SimpleNamespace(
        date_row=DATE_ROW,
        weekday_row=WEEKDAY_ROW,
        first_staff_row=FIRST_STAFF_ROW,
        lunar_row=LUNAR_ROW,
        date_start_col=DATE_START_COL,
        total_col=TOTAL_COL,
        banner_cell=BANNER_CELL,
        old_staff=OLD_STAFF,
    )


@pytest.fixture()
def roster_workbook() -> Callable[..., Workbook]:
    def _build(sheet_names: Iterable[str] = ("A",), **kwargs: object) -> Workbook:
        wb = Workbook()
        wb.remove(wb.active)
        for name in sheet_names:
            fill_roster_sheet(wb.create_sheet(title=name), **kwargs)  # type: ignore[arg-type]
        return wb

    return _build


@pytest.fixture()
def template_file(tmp_path: Path, roster_workbook: Callable[..., Workbook]) -> Path:
    path = tmp_path / "template.xlsx"
    roster_workbook(("A", "B")).save(path)
    return path


@pytest.fixture()
def rules_file(tmp_path: Path) -> Path:
    path = tmp_path / "rules.csv"
    path.write_text(RULES_CSV, encoding="utf-8")
    return path
