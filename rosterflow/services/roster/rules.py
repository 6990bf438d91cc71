"""Monthly rules table: allowed leave days and holiday notes per month."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

import pandas as pd

from rosterflow.core.errors import RulesError
from rosterflow_io.excel_reader import read_table

LOGGER = logging.getLogger(__name__)

MONTH_COLUMN = "月份"
TOTAL_DAYS_COLUMN = "可休總天數"
NOTES_COLUMN = "備註說明"
SUMMARY_LABEL = "合計"

MONTH_LABELS: Dict[str, int] = {
    "一": 1,
    "二": 2,
    "三": 3,
    "四": 4,
    "五": 5,
    "六": 6,
    "七": 7,
    "八": 8,
    "九": 9,
    "十": 10,
    "十一": 11,
    "十二": 12,
}


def month_number(label: object) -> Optional[int]:
    """Map a month label such as ``十一`` to 11; unknown labels give ``None``."""

    if not isinstance(label, str):
        return None
    return MONTH_LABELS.get(label.strip())


@dataclass(frozen=True, slots=True)
class MonthRule:
    """One row of the rules table."""

    label: str
    total_leave_days: str
    notes: str
    extra: Mapping[str, str]

    @property
    def month(self) -> Optional[int]:
        return month_number(self.label)


class RulesTable:
    """Ordered rules rows with month lookup."""

    def __init__(self, rows: Iterable[MonthRule]) -> None:
        self.rows: List[MonthRule] = list(rows)

    def __len__(self) -> int:
        return len(self.rows)

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "RulesTable":
        if MONTH_COLUMN not in frame.columns:
            raise RulesError(f"規則表缺少欄位: {MONTH_COLUMN}")
        rows: List[MonthRule] = []
        for record in frame.to_dict(orient="records"):
            cleaned = {str(k).strip(): _cell_text(v) for k, v in record.items()}
            rows.append(
                MonthRule(
                    label=cleaned.get(MONTH_COLUMN, ""),
                    total_leave_days=cleaned.get(TOTAL_DAYS_COLUMN, ""),
                    notes=cleaned.get(NOTES_COLUMN, ""),
                    extra={
                        k: v
                        for k, v in cleaned.items()
                        if k not in {MONTH_COLUMN, TOTAL_DAYS_COLUMN, NOTES_COLUMN}
                    },
                )
            )
        unknown = [r.label for r in rows if r.month is None and r.label != SUMMARY_LABEL]
        if unknown:
            LOGGER.warning("Rules rows with unrecognised month labels ignored: %s", unknown)
        return cls(rows)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, object]]) -> "RulesTable":
        return cls.from_frame(pd.DataFrame(list(records)).fillna(""))

    def lookup(self, month: int) -> Optional[MonthRule]:
        """Return the first row whose label maps to ``month``."""

        for row in self.rows:
            if row.month == month:
                return row
        return None

    def preview_rows(self) -> List[MonthRule]:
        """Rows for display, without the trailing 合計 summary row."""

        return [row for row in self.rows if row.label.strip() != SUMMARY_LABEL]


def _cell_text(value: object) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    text = str(value).strip()
    if text.endswith(".0") and text[:-2].lstrip("-").isdigit():
        return text[:-2]
    return text


def load_rules(path: Path) -> RulesTable:
    """Read a CSV/Excel rules table.

    Raises:
        RulesError: When the file is missing or cannot be parsed.
    """

    try:
        frame = read_table(path)
    except (FileNotFoundError, ValueError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise RulesError(f"無法讀取規則 CSV 檔案，請確認格式正確。({exc})") from exc
    return RulesTable.from_frame(frame)


__all__ = ["MonthRule", "RulesTable", "load_rules", "month_number", "MONTH_LABELS"]
