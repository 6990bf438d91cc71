"""Roster generator service package."""

from .api import GenerationResult, generate_roster
from .holidays import parse_holiday_notes
from .models import GenerationContext, SheetConfig, SheetSelection, StaffRow, StructureDescriptor
from .rules import RulesTable, load_rules
from .structure import detect_structure

__all__ = [
    "GenerationContext",
    "GenerationResult",
    "RulesTable",
    "SheetConfig",
    "SheetSelection",
    "StaffRow",
    "StructureDescriptor",
    "detect_structure",
    "generate_roster",
    "load_rules",
    "parse_holiday_notes",
]
