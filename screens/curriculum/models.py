# screens/curriculum/models.py
"""
Data models for curriculum documents: phase descriptors (CP), objective
sheets (ATP) and filtered learning objectives (TP).
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Union
from dataclasses import dataclass, field
from enum import Enum

import pandas as pd

from .errors import InvalidPhase


# ============================================================================
# CELLS
# ============================================================================

# A spreadsheet cell is text, a number or empty (None).
Cell = Union[str, int, float, None]
Row = List[Cell]
Grid = List[Row]
Record = Dict[str, Any]


# ============================================================================
# ENUMS
# ============================================================================

class Phase(str, Enum):
    """Curriculum stage under which learning outcomes are grouped."""
    A = "A"
    B = "B"
    C = "C"

    @classmethod
    def parse(cls, raw: Any) -> "Phase":
        try:
            return cls(str(raw or "").strip().upper())
        except ValueError:
            raise InvalidPhase(raw) from None


class ColumnRole(str, Enum):
    """Semantic role of a header cell."""
    PHASE_A = "phase_a"
    PHASE_B = "phase_b"
    PHASE_C = "phase_c"
    OBJECTIVE = "objective"
    GRADE = "grade"
    SEMESTER = "semester"
    CRITERIA = "criteria"


# ============================================================================
# STORE ROWS
# ============================================================================

@dataclass
class Subject:
    id: int
    name: str


@dataclass
class ClassInfo:
    """A school class and the semester label of its academic term."""
    id: int
    name: str
    term_semester: Optional[str] = None


@dataclass
class DocumentRef:
    """Where the spreadsheet for a (subject, phase) pair is stored."""
    document_path: str
    subject_name: str


@dataclass
class PhaseDescriptor:
    subject_id: int
    phase: Phase
    description: str
    document_path: Optional[str] = None
    id: Optional[int] = None


# ============================================================================
# RESULTS
# ============================================================================

@dataclass
class ImportResult:
    """Results of a curriculum document import."""
    subject_id: int
    subject_name: str
    document_path: str
    phases: Dict[str, int] = field(default_factory=dict)
    success: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        msg = f"Import finished. {self.success} learning outcome(s) updated."
        if self.failed:
            msg += f" {self.failed} phase(s) failed."
        return msg


@dataclass
class ObjectiveSheet:
    """One phase's objective sheet, projected into records."""
    subject_name: str
    phase: str
    sheet_name: str
    headers: List[str] = field(default_factory=list)
    records: List[Record] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.records)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.records, columns=self.headers)


@dataclass
class ObjectiveRow:
    order: int
    objective: Cell
    semester: Cell = None
    criteria: Cell = None
    grade_cell: Cell = None


@dataclass
class ObjectiveFilterResult:
    subject_name: str
    phase: str
    class_name: str
    grade_level: int
    semester: Optional[int]
    semester_text: str
    objectives: List[ObjectiveRow] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.objectives)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "order": o.order,
                    "objective": o.objective,
                    "semester": o.semester,
                    "criteria": o.criteria,
                    "grade": o.grade_cell,
                }
                for o in self.objectives
            ],
            columns=["order", "objective", "semester", "criteria", "grade"],
        )
