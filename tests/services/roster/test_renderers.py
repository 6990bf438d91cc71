from __future__ import annotations

import calendar
from datetime import date

import pytest
from openpyxl import Workbook
from openpyxl.cell.rich_text import CellRichText, TextBlock
from openpyxl.cell.text import InlineFont
from openpyxl.styles import Font

from rosterflow.services.roster.cells import SheetReader
from rosterflow.services.roster.models import StaffRow, StructureDescriptor
from rosterflow.services.roster.renderers import (
    banner_formula,
    coerce_total,
    render_banner,
    render_date_row,
    render_lunar_row,
    render_staff_rows,
    render_total,
    render_weekday_row,
    weekday_name,
)
from rosterflow.services.roster.structure import detect_structure

YELLOW = "FFFFFF00"
WHITE = "FFFFFFFF"


def _expected_style(year: int, month: int, day: int) -> tuple[str, str | None]:
    weekday = date(year, month, day).weekday()
    if weekday == 5:
        return "FF008000", None
    if weekday == 6:
        return "FFFF0000", YELLOW
    return "FF000000", None


def _fill_of(cell) -> str | None:
    if cell.fill.fill_type != "solid":
        return None
    return cell.fill.fgColor.rgb


@pytest.mark.parametrize(
    ("year", "month"),
    [(2026, 2), (2024, 2), (2026, 4), (2026, 3)],
)
def test_date_and_weekday_rows_follow_calendar(roster_workbook, layout, year: int, month: int) -> None:
    ws = roster_workbook()["A"]
    structure = detect_structure(ws)
    days = calendar.monthrange(year, month)[1]

    render_date_row(ws, structure, year, month, days)
    render_weekday_row(ws, structure, year, month, days)

    for day in range(1, 32):
        col = layout.date_start_col + day - 1
        date_cell = ws.cell(row=layout.date_row, column=col)
        weekday_cell = ws.cell(row=layout.weekday_row, column=col)
        if day > days:
            assert date_cell.value is None
            assert weekday_cell.value is None
            assert date_cell.fill.fill_type is None
            continue
        colour, fill = _expected_style(year, month, day)
        assert date_cell.value == day
        assert weekday_cell.value == "日一二三四五六"[(date(year, month, day).weekday() + 1) % 7]
        for cell in (date_cell, weekday_cell):
            assert cell.font.color.rgb == colour
            assert _fill_of(cell) == fill


def test_march_2026_starts_on_sunday(roster_workbook, layout) -> None:
    ws = roster_workbook()["A"]
    structure = detect_structure(ws)

    render_weekday_row(ws, structure, 2026, 3, 31)

    start = layout.date_start_col
    assert ws.cell(row=layout.weekday_row, column=start).value == "日"
    assert ws.cell(row=layout.weekday_row, column=start + 6).value == "六"
    assert weekday_name(date(2026, 3, 2)) == "一"


def test_date_row_merges_existing_font(roster_workbook, layout) -> None:
    ws = roster_workbook()["A"]
    ws.cell(row=layout.date_row, column=layout.date_start_col).font = Font(name="標楷體", size=14, bold=True)
    structure = detect_structure(ws)

    render_date_row(ws, structure, 2026, 3, 31)

    font = ws.cell(row=layout.date_row, column=layout.date_start_col).font
    assert font.bold is True
    assert font.size == 14
    assert font.name == "標楷體"
    assert font.color.rgb == "FFFF0000"


def test_staff_rows_zip_names_and_band(roster_workbook, layout) -> None:
    ws = roster_workbook()["A"]
    structure = detect_structure(ws)

    render_staff_rows(ws, structure.staff_rows, ["林一", "林二", "林三"], structure.date_start_col)

    rows = [layout.first_staff_row + i for i in range(4)]
    assert [ws.cell(row=r, column=2).value for r in rows] == ["林一", "林二", "林三", None]
    assert [_fill_of(ws.cell(row=r, column=2)) for r in rows] == [WHITE, YELLOW, WHITE, WHITE]
    for r, colour in zip(rows, [WHITE, YELLOW, WHITE, WHITE]):
        for col in range(layout.date_start_col, layout.date_start_col + 35):
            cell = ws.cell(row=r, column=col)
            assert cell.value is None
            assert _fill_of(cell) == colour


def test_staff_rows_more_names_than_rows(roster_workbook, layout) -> None:
    ws = roster_workbook(staff=("王大明", "李小華"))["A"]
    structure = detect_structure(ws)

    render_staff_rows(ws, structure.staff_rows, ["甲乙", "丙丁", "戊己"], structure.date_start_col)

    assert ws.cell(row=layout.first_staff_row, column=2).value == "甲乙"
    assert ws.cell(row=layout.first_staff_row + 1, column=2).value == "丙丁"
    assert ws.cell(row=layout.first_staff_row + 2, column=2).value is None


def test_staff_rows_without_date_anchor_only_touch_name_cells() -> None:
    wb = Workbook()
    ws = wb.active
    ws["C5"] = "保留"

    render_staff_rows(ws, [StaffRow(row=5, name_column=2)], ["王小明"], None)

    assert ws["B5"].value == "王小明"
    assert ws["C5"].value == "保留"


def test_lunar_row_writes_labels_with_style(roster_workbook, layout) -> None:
    ws = roster_workbook()["A"]
    structure = detect_structure(ws)
    holidays = {15: "春節(小年夜)", 16: "春節", 30: "不存在"}

    render_lunar_row(ws, structure, 28, holidays)

    start = layout.date_start_col
    labelled = ws.cell(row=layout.lunar_row, column=start + 14)
    assert labelled.value == "春節(小年夜)"
    assert _fill_of(labelled) == YELLOW
    assert labelled.font.name == "細明體-ExtB"
    assert labelled.font.size == 11
    assert labelled.font.color.rgb == "FF0000FF"
    assert labelled.alignment.textRotation == 255
    assert labelled.alignment.vertical == "center"
    assert labelled.alignment.horizontal == "center"
    assert labelled.alignment.wrap_text is True

    old_label = ws.cell(row=layout.lunar_row, column=start + 9)
    assert old_label.value is None
    assert _fill_of(old_label) == WHITE

    beyond = ws.cell(row=layout.lunar_row, column=start + 29)
    assert beyond.value is None
    assert _fill_of(beyond) == WHITE


def test_total_written_below_label(roster_workbook, layout) -> None:
    ws = roster_workbook()["A"]

    coordinate = render_total(SheetReader(ws), "9")

    assert ws.cell(row=layout.date_row + 1, column=layout.total_col).value == 9
    assert coordinate == ws.cell(row=layout.date_row + 1, column=layout.total_col).coordinate


def test_total_skips_cells_that_only_mention_the_label() -> None:
    wb = Workbook()
    ws = wb.active
    ws["B2"] = "備註：合計欄為本月可休天數"
    ws["B3"] = "保留說明"
    ws["F5"] = "合 計"
    ws["F6"] = 7

    coordinate = render_total(SheetReader(ws), "9")

    assert coordinate == "F6"
    assert ws["F6"].value == 9
    assert ws["B3"].value == "保留說明"
    # the detector still reports the first mention for inspection
    assert detect_structure(ws).total_header_row == 2


def test_total_without_exact_label_changes_nothing() -> None:
    wb = Workbook()
    ws = wb.active
    ws["C1"] = "月合計"
    ws["C2"] = "原值"

    assert render_total(SheetReader(ws), "9") is None
    assert ws["C2"].value == "原值"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("9", 9), (" 12 ", 12), ("8天", 8), ("0", 0), (7, 7), (7.0, 7), ("未定", "未定"), ("", "")],
)
def test_coerce_total(raw, expected) -> None:
    assert coerce_total(raw) == expected


def _banner_sheet(value) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = "A"
    ws["A1"] = "工程人員輪休表"
    ws["H2"] = value
    ws["J2"] = "2025.12"
    ws["B12"] = "2025年12月"
    return wb


def test_banner_first_sheet_gets_literal_text() -> None:
    wb = _banner_sheet("2025年 12月")
    reader = SheetReader(wb["A"])

    touched = render_banner(reader, 2026, 3, is_first_sheet=True, first_sheet_name="A")

    assert touched == ["H2"]
    assert wb["A"]["H2"].value == "2026年3月"
    # only the first qualifying cell per row, and only the first ten rows
    assert wb["A"]["J2"].value == "2025.12"
    assert wb["A"]["B12"].value == "2025年12月"


def test_banner_other_sheet_gets_formula_to_first_sheet() -> None:
    wb = _banner_sheet("2025.12")
    reader = SheetReader(wb["A"])

    render_banner(reader, 2026, 3, is_first_sheet=False, first_sheet_name="總表")

    value = wb["A"]["H2"].value
    assert value == banner_formula("總表", "H2")
    assert value.startswith("=ASC(")
    assert "總表" in value
    assert value.endswith("!H2)")


def test_banner_rich_text_and_cached_formula() -> None:
    wb = Workbook()
    ws = wb.active
    ws["B1"] = CellRichText([TextBlock(InlineFont(b=True), "2025年"), "12月"])
    ws["C3"] = '=TEXT(TODAY(),"yyyy年m月")'
    ws["C4"] = "=NOW()"
    cached = Workbook()
    cached.active["C3"] = "2025年12月"

    render_banner(SheetReader(ws, cached.active), 2026, 1, is_first_sheet=True, first_sheet_name="Sheet")

    assert ws["B1"].value == "2026年1月"
    assert ws["C3"].value == "2026年1月"
    assert ws["C4"].value == "=NOW()"


def test_banner_ignores_numbers() -> None:
    wb = Workbook()
    ws = wb.active
    ws["A1"] = 2025.12

    assert render_banner(SheetReader(ws), 2026, 1, is_first_sheet=True, first_sheet_name="Sheet") == []
    assert ws["A1"].value == 2025.12


def test_empty_descriptor_has_no_prerequisites() -> None:
    structure = StructureDescriptor()
    assert not structure.has_date_row
    assert not structure.has_weekday_row
    assert not structure.has_lunar_row
    assert not structure.has_total
