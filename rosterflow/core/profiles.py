from __future__ import annotations

import os
from pathlib import Path
import sys
from typing import Any, List

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from rosterflow.services.roster.models import SheetConfig, SheetSelection
from rosterflow_io.excel_writer import DEFAULT_TITLE


class SheetProfile(BaseModel):
    """One selected worksheet inside a run profile.

    Attributes:
        name: Worksheet name in the template.
        staff: Ordered staff names; blanks are tolerated and filtered later.
        department_manager: 處主管.
        site_manager: 工地主管.
        creator: 製表人.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    staff: List[str] = Field(default_factory=lambda: [""])
    department_manager: str = ""
    site_manager: str = ""
    creator: str = ""

    def to_selection(self) -> SheetSelection:
        return SheetSelection(
            name=self.name,
            config=SheetConfig(
                staff_list=list(self.staff),
                department_manager=self.department_manager,
                site_manager=self.site_manager,
                creator=self.creator,
            ),
        )


class RunProfile(BaseModel):
    """A complete generation run described in YAML."""

    model_config = ConfigDict(extra="forbid")

    template: Path
    rules: Path
    year: int = Field(ge=1900, le=9999)
    month: int = Field(ge=1, le=12)
    title: str = DEFAULT_TITLE
    output_dir: Path | None = None
    report: bool = False
    sheets: List[SheetProfile] = Field(min_length=1)

    @field_validator("sheets")
    @classmethod
    def _unique_sheet_names(cls, value: List[SheetProfile]) -> List[SheetProfile]:
        seen: set[str] = set()
        for sheet in value:
            if sheet.name in seen:
                raise ValueError(f"duplicate sheet: {sheet.name}")
            seen.add(sheet.name)
        return value

    def selections(self) -> list[SheetSelection]:
        return [sheet.to_selection() for sheet in self.sheets]


def _is_frozen() -> bool:
    return getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS")


def _app_dir_writable_base() -> Path:
    """Writable base for runtime files (work/logs/out).

    - ROSTERFLOW_ROOT when set
    - Frozen: alongside the executable
    - Source: repository root
    """
    env = os.getenv("ROSTERFLOW_ROOT")
    if env:
        return Path(env)
    if _is_frozen():
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[2]


def _work_dir() -> Path:
    return _app_dir_writable_base() / "rosterflow" / "work"


def ensure_work_dirs() -> dict[str, Path]:
    base = _work_dir()
    out = base / "out"
    logs = base / "logs"
    for p in (out, logs):
        p.mkdir(parents=True, exist_ok=True)
    return {"out": out, "logs": logs}


def _resolve_relative(path: Path | None, base: Path) -> Path | None:
    if path is None or path.is_absolute():
        return path
    return base / path


def load_run_profile(path: str | Path) -> RunProfile:
    """Load a run profile YAML file.

    Relative ``template``/``rules``/``output_dir`` entries are resolved against the
    directory holding the profile.
    """
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise ConfigError(f"找不到設定檔: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        try:
            data: Any = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"設定檔格式錯誤: {cfg_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("設定檔必須是字典結構")
    try:
        profile = RunProfile.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"設定錯誤: {cfg_path}: {e}") from e

    base = cfg_path.resolve().parent
    return profile.model_copy(
        update={
            "template": _resolve_relative(profile.template, base),
            "rules": _resolve_relative(profile.rules, base),
            "output_dir": _resolve_relative(profile.output_dir, base),
        }
    )
