"""Excel output helpers for generated roster workbooks."""

# Module responsibilities:
# - Name output files by the "<title> (<year>.<month>).xlsx" convention.
# - Save the mutated template without touching the original file.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from openpyxl import Workbook

from .utils.paths import prepare_output_path

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "工程人員輪休表"


def output_filename(year: int, month: int, title: str = DEFAULT_TITLE) -> str:
    return f"{title} ({year}.{month}).xlsx"


def save_workbook(
    workbook: Workbook,
    year: int,
    month: int,
    *,
    out_dir: Optional[Path] = None,
    title: str = DEFAULT_TITLE,
    template_path: Optional[Path] = None,
    dry_run: bool = False,
) -> Path:
    """Write ``workbook`` into ``out_dir`` under the conventional file name.

    Args:
        workbook: Mutated template workbook.
        year: Target year used in the file name.
        month: Target month used in the file name.
        out_dir: Output directory; defaults to ``~/RosterFlow/out``.
        title: Fixed title prefix of the file name.
        template_path: Source template; never overwritten.
        dry_run: When True, skip actual file emission and only log the plan.

    Returns:
        The output path (planned path for dry runs).
    """

    target = prepare_output_path(output_filename(year, month, title), out_dir, protect=template_path)
    if dry_run:
        logger.info("Dry run: would write workbook", extra={"output": str(target)})
        return target

    workbook.save(target)
    logger.info("Workbook written", extra={"output": str(target), "sheets": workbook.sheetnames})
    return target
