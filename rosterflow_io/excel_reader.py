"""Workbook and rules-table input helpers."""

# Module responsibilities:
# - Load a roster template twice (formulas/rich text for editing, cached values for reading)
#   and wrap both copies in a TemplateWorkbook.
# - Provide a thin wrapper around pandas readers for the rules table.
# - Emit structured logs for traceability.

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd
from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from rosterflow.core.errors import TemplateLoadError

logger = logging.getLogger(__name__)

SheetType = Union[str, int]

TEMPLATE_LOAD_MESSAGE = "無法讀取 Excel 範本檔案，請確認格式正確。"


@dataclass
class TemplateWorkbook:
    """A template loaded for in-place editing plus its cached-value twin.

    Attributes:
        workbook: Loaded with ``rich_text=True``; this is the copy that gets mutated and saved.
        cached: Loaded with ``data_only=True``; holds the last computed formula results.
        source: Where the template came from, for logging.
    """

    workbook: Workbook
    cached: Optional[Workbook] = None
    source: Optional[Path] = None

    @property
    def sheet_names(self) -> List[str]:
        return list(self.workbook.sheetnames)

    def worksheet(self, name: str) -> Optional[Worksheet]:
        if name not in self.workbook.sheetnames:
            return None
        return self.workbook[name]

    def cached_worksheet(self, name: str) -> Optional[Worksheet]:
        if self.cached is None or name not in self.cached.sheetnames:
            return None
        return self.cached[name]

    def close(self) -> None:
        self.workbook.close()
        if self.cached is not None:
            self.cached.close()


def load_template(path: Path) -> TemplateWorkbook:
    """Load a template workbook.

    Raises:
        TemplateLoadError: When the file is missing or is not a readable workbook.
    """

    if not path.exists():
        raise TemplateLoadError(f"{TEMPLATE_LOAD_MESSAGE} ({path})")

    logger.info("Loading template workbook", extra={"path": str(path)})
    try:
        data = path.read_bytes()
        workbook = load_workbook(BytesIO(data), rich_text=True)
        cached = load_workbook(BytesIO(data), data_only=True)
    except Exception as exc:  # noqa: BLE001 - any read or parser failure means an unusable template
        logger.error("Failed to load template workbook", extra={"path": str(path), "error": str(exc)})
        raise TemplateLoadError(f"{TEMPLATE_LOAD_MESSAGE} ({exc})") from exc

    logger.info(
        "Template workbook loaded",
        extra={"path": str(path), "sheets": workbook.sheetnames},
    )
    return TemplateWorkbook(workbook=workbook, cached=cached, source=path)


def read_table(path: Path, sheet: SheetType = 0) -> pd.DataFrame:
    """Load a table from a CSV file or an Excel workbook with every cell as text.

    Args:
        path: Path to the ``.csv``/``.xlsx``/``.xls`` file.
        sheet: Sheet name or index for Excel files; defaults to the first sheet.

    Returns:
        DataFrame with string cells; blanks become empty strings.

    Raises:
        FileNotFoundError: When the file does not exist.
        ValueError: When pandas fails to parse the file or the suffix is unsupported.
    """

    if not path.exists():
        raise FileNotFoundError(f"Source table not found: {path}")

    logger.info("Reading table", extra={"path": str(path), "sheet": sheet})

    suffix = path.suffix.lower()
    try:
        if suffix == ".csv":
            df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True, encoding="utf-8-sig")
        elif suffix in {".xlsx", ".xls"}:
            df = pd.read_excel(path, sheet_name=sheet, dtype=str, keep_default_na=False)
        else:
            raise ValueError(f"unsupported table file: {path}")
    except ValueError as exc:
        logger.error("Failed to read table", extra={"error": str(exc)})
        raise

    if isinstance(df, dict):
        raise ValueError("read_table expects a single sheet; received multiple sheets")

    df.columns = [str(col).strip() for col in df.columns]
    logger.info(
        "Table loaded",
        extra={"rows": len(df.index), "columns": df.columns.tolist()},
    )
    return df
