"""
Learning objective (TP) filtering by class grade level and semester.
"""

from __future__ import annotations
from typing import List, Optional, Sequence
import logging
import re

from .columns import ObjectiveColumns, detect_objective_columns
from .constants import SEMESTER_TEXT, SEMESTER_TEXT_ALL, TERM_ODD
from .errors import InvalidClassNameFormat
from .helpers import cell_text, digit_runs, is_empty, parse_int
from .models import Cell, ObjectiveRow, Record

logger = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"^(\d+)")


def grade_level(class_name: str) -> int:
    """'3 Calakan' -> 3."""
    m = _LEADING_DIGITS.match(class_name or "")
    if not m:
        raise InvalidClassNameFormat(class_name)
    return int(m.group(1))


def effective_semester(explicit: Optional[int], term_semester: Optional[str]) -> Optional[int]:
    """
    Explicit semester wins. Otherwise 'Ganjil' is 1 and any other term
    label is 2. None when neither is known, meaning no semester filter.
    """
    if explicit:
        return int(explicit)
    if term_semester:
        return 1 if term_semester.strip().lower() == TERM_ODD else 2
    return None


def semester_text(semester: Optional[int]) -> str:
    if semester is None:
        return SEMESTER_TEXT_ALL
    return SEMESTER_TEXT.get(semester, str(semester))


def semester_matches(cell: Cell, semester: int) -> bool:
    """
    '1 dan 2', '1,2', '1-2', '1 & 2' and '1/2' all cover both semesters.
    Cells without digits fall back to a plain integer comparison.
    """
    numbers = digit_runs(cell)
    if numbers:
        return semester in numbers
    return parse_int(cell) == semester


def _cell(row: Sequence[Cell], idx: Optional[int]) -> Cell:
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def select_objectives(headers: Sequence[Cell], rows: Sequence[Sequence[Cell]],
                      grade: int, semester: Optional[int],
                      columns: Optional[ObjectiveColumns] = None) -> List[ObjectiveRow]:
    """
    Keep rows of the given grade with a non-empty objective, and, when a
    semester is given, whose semester cell is empty or covers it.
    Kept rows are numbered from 1 in sheet order.
    """
    columns = columns or detect_objective_columns(headers)
    selected: List[ObjectiveRow] = []
    for row in rows:
        grade_cell = _cell(row, columns.grade)
        objective = _cell(row, columns.objective)
        sem_cell = _cell(row, columns.semester)

        if is_empty(grade_cell) or parse_int(grade_cell) != grade:
            continue
        if not cell_text(objective).strip():
            continue
        if semester and columns.semester is not None and not is_empty(sem_cell):
            if not semester_matches(sem_cell, semester):
                continue

        selected.append(ObjectiveRow(
            order=len(selected) + 1,
            objective=objective,
            semester=None if is_empty(sem_cell) else sem_cell,
            criteria=None if is_empty(_cell(row, columns.criteria)) else _cell(row, columns.criteria),
            grade_cell=grade_cell,
        ))
    return selected


def records_to_rows(headers: Sequence[str], records: Sequence[Record]) -> List[List[Cell]]:
    return [[r.get(h) for h in headers] for r in records]
