"""
Header detection for curriculum sheets.

Both the phase header row of a CP sheet and the column header row of an
ATP sheet are scanned with the same rule table: an ordered list of
(role, predicate over normalised header text).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from .constants import PHASES
from .errors import InvalidSheetStructure, NoPhaseHeaderDetected
from .helpers import cell_text
from .models import Cell, ColumnRole


@dataclass(frozen=True)
class HeaderRule:
    role: ColumnRole
    matches: Callable[[str], bool]


@dataclass(frozen=True)
class RuleTable:
    rules: Tuple[HeaderRule, ...]
    normalise: Callable[[str], str]
    # exclusive: a cell gets the first matching role only
    exclusive: bool = False
    # later columns override earlier ones for the same role
    last_wins: bool = False
    text_only: bool = False

    def scan(self, row: Sequence[Cell]) -> Dict[ColumnRole, int]:
        found: Dict[ColumnRole, int] = {}
        for idx, cell in enumerate(row or []):
            if self.text_only and not isinstance(cell, str):
                continue
            text = cell_text(cell)
            if not text:
                continue
            header = self.normalise(text)
            for rule in self.rules:
                if not rule.matches(header):
                    continue
                if self.last_wins or rule.role not in found:
                    found[rule.role] = idx
                if self.exclusive:
                    break
        return found


def _phase_rule(phase: str) -> HeaderRule:
    return HeaderRule(
        ColumnRole(f"phase_{phase.lower()}"),
        lambda h, p=phase: h == p or f"FASE {p}" in h,
    )


PHASE_HEADER_RULES = RuleTable(
    rules=tuple(_phase_rule(p) for p in PHASES),
    normalise=lambda s: s.upper().strip(),
    exclusive=True,
    last_wins=True,
    text_only=True,
)

OBJECTIVE_HEADER_RULES = RuleTable(
    rules=(
        HeaderRule(ColumnRole.OBJECTIVE, lambda h: "tujuan pembelajaran" in h),
        HeaderRule(ColumnRole.GRADE, lambda h: h == "kelas"),
        HeaderRule(ColumnRole.SEMESTER, lambda h: h == "semester"),
        HeaderRule(ColumnRole.CRITERIA, lambda h: "kktp" in h),
    ),
    normalise=lambda s: s.lower().strip(),
)


def detect_phases(row: Sequence[Cell]) -> Dict[str, int]:
    """Map phase label -> column index. Raises NoPhaseHeaderDetected if none."""
    found = PHASE_HEADER_RULES.scan(row)
    mapping = {
        p: found[ColumnRole(f"phase_{p.lower()}")]
        for p in PHASES
        if ColumnRole(f"phase_{p.lower()}") in found
    }
    if not mapping:
        raise NoPhaseHeaderDetected(row)
    return mapping


@dataclass(frozen=True)
class ObjectiveColumns:
    objective: int
    grade: int
    semester: Optional[int] = None
    criteria: Optional[int] = None


def detect_objective_columns(headers: Sequence[Cell]) -> ObjectiveColumns:
    found = OBJECTIVE_HEADER_RULES.scan(headers)
    if ColumnRole.OBJECTIVE not in found or ColumnRole.GRADE not in found:
        raise InvalidSheetStructure(
            headers, "Invalid sheet structure (objective or class column not found)"
        )
    return ObjectiveColumns(
        objective=found[ColumnRole.OBJECTIVE],
        grade=found[ColumnRole.GRADE],
        semester=found.get(ColumnRole.SEMESTER),
        criteria=found.get(ColumnRole.CRITERIA),
    )
