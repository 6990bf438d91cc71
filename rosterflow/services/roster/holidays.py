"""Free-text holiday note parsing.

Notes come from the rules table, for example::

    1/1元旦;春節2/15(小年夜)~2/19(初三);2/20補休(2/15小年夜週日)

Each fragment is matched against three patterns in priority order (range, single day
with a parenthetical, single day). Fragments that match nothing are dropped. Range days
are absolute day numbers of the target month.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List

LOGGER = logging.getLogger(__name__)

HolidayMap = Dict[int, str]

_SPLIT_RE = re.compile(r"[;\n]")
_RANGE_RE = re.compile(r"(.+?)(\d+)/(\d+)\((.+?)\)~(\d+)/(\d+)\((.+?)\)")
_SINGLE_RE = re.compile(r"(\d+)/(\d+)(.+?)(?:\(|（)")
_SIMPLE_RE = re.compile(r"(\d+)/(\d+)(.+)")


def split_fragments(notes: str) -> List[str]:
    return [part.strip() for part in _SPLIT_RE.split(notes) if part.strip()]


def _apply_range(match: re.Match[str], month: int, holidays: HolidayMap) -> None:
    name, start_month, start_day, start_note, end_month, end_day, end_note = match.groups()
    name = name.strip()
    if int(start_month) != month and int(end_month) != month:
        return
    first, last = int(start_day), int(end_day)
    for day in range(first, last + 1):
        if day == first:
            holidays[day] = f"{name}({start_note})"
        elif day == last:
            holidays[day] = f"{name}({end_note})"
        else:
            holidays[day] = name


def parse_holiday_notes(notes: str | None, month: int) -> HolidayMap:
    """Build the day -> label map for ``month`` from the month's notes.

    Later fragments overwrite earlier ones on the same day.
    """

    holidays: HolidayMap = {}
    if not notes:
        return holidays

    for part in split_fragments(notes):
        range_match = _RANGE_RE.search(part)
        if range_match:
            _apply_range(range_match, month, holidays)
            continue

        single_match = _SINGLE_RE.search(part)
        if single_match:
            m, d, name = single_match.groups()
            if int(m) == month:
                holidays[int(d)] = name.strip()
            continue

        simple_match = _SIMPLE_RE.search(part)
        if simple_match:
            m, d, name = simple_match.groups()
            if int(m) == month:
                holidays[int(d)] = name.strip()
            continue

        LOGGER.debug("Unmatched holiday fragment dropped: %s", part)

    LOGGER.info("Parsed %d holiday labels for month %s", len(holidays), month)
    return holidays


__all__ = ["HolidayMap", "parse_holiday_notes", "split_fragments"]
