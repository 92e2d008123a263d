"""
Finds the objective (ATP) sheet of a subject/phase inside a workbook.
"""

from __future__ import annotations
from typing import Iterable

from .errors import SheetNotFound

DEFAULT_SHEET_TEMPLATE = "ATP {subject} Fase {phase}"


def target_sheet_name(subject_name: str, phase: str,
                      template: str = DEFAULT_SHEET_TEMPLATE) -> str:
    return template.format(subject=subject_name, phase=phase)


def locate_sheet(sheet_names: Iterable[str], subject_name: str, phase: str,
                 template: str = DEFAULT_SHEET_TEMPLATE) -> str:
    """
    Case-insensitive exact match of 'ATP <subject> Fase <phase>'.
    Returns the sheet name as stored in the workbook.
    """
    names = list(sheet_names)
    target = target_sheet_name(subject_name, phase, template)
    wanted = target.lower()
    for name in names:
        if name.lower() == wanted:
            return name
    raise SheetNotFound(target, names)
