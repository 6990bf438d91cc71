"""Data models used by the roster generator service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True, slots=True)
class StaffRow:
    """A worksheet row holding one person's leave markings."""

    row: int
    name_column: int


@dataclass(slots=True)
class StructureDescriptor:
    """Inferred coordinates of the semantic regions of one worksheet.

    Every field is optional; a region that could not be found stays ``None`` (or an empty
    list for staff rows) and the renderers depending on it are skipped.
    """

    date_row: Optional[int] = None
    weekday_row: Optional[int] = None
    date_start_col: Optional[int] = None
    date_end_col: Optional[int] = None
    staff_rows: List[StaffRow] = field(default_factory=list)
    lunar_row: Optional[int] = None
    total_column: Optional[int] = None
    total_header_row: Optional[int] = None

    @property
    def has_date_row(self) -> bool:
        return self.date_row is not None and self.date_start_col is not None

    @property
    def has_weekday_row(self) -> bool:
        return self.weekday_row is not None and self.date_start_col is not None

    @property
    def has_lunar_row(self) -> bool:
        return self.lunar_row is not None and self.date_start_col is not None

    @property
    def has_total(self) -> bool:
        return self.total_header_row is not None and self.total_column is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date_row": self.date_row,
            "weekday_row": self.weekday_row,
            "date_start_col": self.date_start_col,
            "date_end_col": self.date_end_col,
            "staff_rows": [{"row": s.row, "name_column": s.name_column} for s in self.staff_rows],
            "lunar_row": self.lunar_row,
            "total_column": self.total_column,
            "total_header_row": self.total_header_row,
        }


class SheetConfig(BaseModel):
    """Per-worksheet input supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    staff_list: List[str] = Field(default_factory=lambda: [""])
    department_manager: str = ""
    site_manager: str = ""
    creator: str = ""

    def valid_staff(self) -> List[str]:
        """Return staff names with blank entries removed, order preserved."""

        return [name for name in self.staff_list if name and name.strip()]


@dataclass(frozen=True, slots=True)
class SheetSelection:
    """One entry of the ordered worksheet selection; the first entry is the first sheet."""

    name: str
    config: SheetConfig = field(default_factory=SheetConfig)


@dataclass(frozen=True, slots=True)
class GenerationContext:
    """Immutable bundle handed to every renderer for one worksheet."""

    year: int
    month: int
    days_in_month: int
    total_leave_days: Any
    holidays: Mapping[int, str]
    sheet_config: SheetConfig
    is_first_sheet: bool
    first_sheet_name: str


__all__ = [
    "StaffRow",
    "StructureDescriptor",
    "SheetConfig",
    "SheetSelection",
    "GenerationContext",
]
