"""Unit tests for workbook and rules-table I/O utilities."""

# Module responsibilities:
# - Validate template loading (editable copy plus cached-value copy).
# - Assert the rules table is read as text and output naming never clobbers the template.

from __future__ import annotations

from pathlib import Path

import pytest
from openpyxl import Workbook, load_workbook

from rosterflow.core.errors import TemplateLoadError
from rosterflow_io.excel_reader import load_template, read_table
from rosterflow_io.excel_writer import output_filename, save_workbook
from rosterflow_io.utils.paths import default_output_dir, prepare_output_path


def test_load_template_exposes_both_copies(template_file: Path) -> None:
    template = load_template(template_file)
    try:
        assert template.sheet_names == ["A", "B"]
        assert template.worksheet("A") is not None
        assert template.worksheet("missing") is None
        assert template.cached_worksheet("B") is not None
        assert template.workbook is not template.cached
        assert template.source == template_file
    finally:
        template.close()


def test_load_template_missing_or_corrupt(tmp_path: Path) -> None:
    with pytest.raises(TemplateLoadError, match="無法讀取 Excel 範本檔案"):
        load_template(tmp_path / "none.xlsx")

    corrupt = tmp_path / "corrupt.xlsx"
    corrupt.write_text("hello", encoding="utf-8")
    with pytest.raises(TemplateLoadError):
        load_template(corrupt)


def test_load_template_wraps_read_errors(tmp_path: Path) -> None:
    unreadable = tmp_path / "folder.xlsx"
    unreadable.mkdir()

    with pytest.raises(TemplateLoadError, match="無法讀取 Excel 範本檔案"):
        load_template(unreadable)


def test_read_table_csv_keeps_text(tmp_path: Path) -> None:
    path = tmp_path / "rules.csv"
    path.write_text("\ufeff月份 ,可休總天數,備註說明\n一,08,\n", encoding="utf-8")

    df = read_table(path)

    assert df.columns.tolist() == ["月份", "可休總天數", "備註說明"]
    assert df.iloc[0].tolist() == ["一", "08", ""]


def test_read_table_excel(tmp_path: Path) -> None:
    wb = Workbook()
    ws = wb.active
    ws.append(["月份", "可休總天數"])
    ws.append(["五", 9])
    path = tmp_path / "rules.xlsx"
    wb.save(path)

    df = read_table(path)

    assert df.iloc[0]["月份"] == "五"
    assert df.iloc[0]["可休總天數"] == "9"


def test_read_table_rejects_unknown_suffix(tmp_path: Path) -> None:
    path = tmp_path / "rules.json"
    path.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError):
        read_table(path)
    with pytest.raises(FileNotFoundError):
        read_table(tmp_path / "absent.csv")


def test_output_filename() -> None:
    assert output_filename(2026, 3) == "工程人員輪休表 (2026.3).xlsx"
    assert output_filename(2026, 12, "值班表") == "值班表 (2026.12).xlsx"


def test_save_workbook_never_overwrites_template(tmp_path: Path) -> None:
    template = tmp_path / output_filename(2026, 3)
    Workbook().save(template)
    wb = Workbook()
    wb.active["A1"] = "新"

    target = save_workbook(wb, 2026, 3, out_dir=tmp_path, template_path=template)

    assert target.name == "工程人員輪休表 (2026.3)_generated.xlsx"
    assert load_workbook(target).active["A1"].value == "新"
    assert load_workbook(template).active["A1"].value is None


def test_save_workbook_dry_run(tmp_path: Path) -> None:
    target = save_workbook(Workbook(), 2026, 4, out_dir=tmp_path / "out", dry_run=True)

    assert target == tmp_path / "out" / output_filename(2026, 4)
    assert not target.exists()


def test_output_dirs_are_created(tmp_path: Path) -> None:
    assert default_output_dir(tmp_path) == tmp_path / "out"
    assert (tmp_path / "out").is_dir()
    assert prepare_output_path("x.xlsx", tmp_path / "nested") == tmp_path / "nested" / "x.xlsx"
