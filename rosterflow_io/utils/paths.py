"""Filesystem helpers for generated roster workbooks."""

# Module responsibilities:
# - Define the default ~/RosterFlow/out directory and create it on demand.
# - Offer a helper that never hands back the template path as an output target.

from __future__ import annotations

from pathlib import Path
from typing import Optional

DEFAULT_BASE = Path.home() / "RosterFlow"


def default_output_dir(base: Optional[Path] = None) -> Path:
    """Return ``<base>/out``, creating it when missing."""

    out_dir = (base or DEFAULT_BASE) / "out"
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir


def prepare_output_path(
    filename: str,
    out_dir: Optional[Path] = None,
    *,
    protect: Optional[Path] = None,
) -> Path:
    """Prepare an output path for ``filename``.

    Args:
        filename: Desired file name.
        out_dir: Target directory; defaults to ``~/RosterFlow/out``.
        protect: A path that must not be overwritten (the template). When the target
            resolves to it, a ``_generated`` suffix is appended to the stem.

    Returns:
        Final output path; the parent directory exists.
    """

    directory = out_dir or default_output_dir()
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / filename
    if protect is not None and target.resolve() == protect.resolve():
        target = target.with_name(f"{target.stem}_generated{target.suffix}")
    return target
