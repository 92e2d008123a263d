"""
Failures raised by the curriculum engine.

Every failure derives from CurriculumError so the page layer can report it
without knowing the concrete kind. Database and OS errors are not wrapped.
"""

from __future__ import annotations
from typing import List, Optional, Sequence


class CurriculumError(Exception):
    """Base class for curriculum document failures."""


class SubjectNotFound(CurriculumError):
    def __init__(self, subject: str):
        self.subject = subject
        super().__init__(f"Subject '{subject}' not found")


class ClassNotFound(CurriculumError):
    def __init__(self, class_id: int):
        self.class_id = class_id
        super().__init__(f"Class {class_id} not found")


class MalformedMetadataRows(CurriculumError):
    pass


class NoPhaseHeaderDetected(CurriculumError):
    def __init__(self, row: Optional[Sequence] = None):
        self.row = list(row or [])
        super().__init__(
            "No phase header (A/B/C) found in row 5. "
            "Expected a column headed 'Fase A', 'Fase B' or 'Fase C'"
        )


class InvalidSheetStructure(CurriculumError):
    def __init__(self, headers: Sequence, message: str = "Objective or class column not found"):
        self.headers = list(headers)
        super().__init__(message)


class InvalidClassNameFormat(CurriculumError):
    def __init__(self, class_name: str):
        self.class_name = class_name
        super().__init__(f"Class name '{class_name}' must start with a grade number")


class SheetNotFound(CurriculumError):
    def __init__(self, sheet_name: str, available_sheets: List[str]):
        self.sheet_name = sheet_name
        self.available_sheets = list(available_sheets)
        super().__init__(f"Sheet \"{sheet_name}\" not found in workbook")


class UnknownColumn(CurriculumError):
    def __init__(self, unknown_keys: List[str], valid_headers: List[str]):
        self.unknown_keys = list(unknown_keys)
        self.valid_headers = list(valid_headers)
        super().__init__(f"Unknown columns in data: {', '.join(self.unknown_keys)}")


class InvalidPhase(CurriculumError):
    def __init__(self, phase):
        self.phase = phase
        super().__init__(f"Unknown phase '{phase}'. Expected A, B or C")


class DocumentNotFound(CurriculumError):
    def __init__(self, subject_id: int, phase: str):
        self.subject_id = subject_id
        self.phase = phase
        super().__init__(f"No curriculum document for subject {subject_id}, phase {phase}")


class StorageFailure(CurriculumError):
    def __init__(self, path: str, message: str = "Stored document is missing"):
        self.path = path
        super().__init__(f"{message}: {path}")


class UnsupportedUpload(CurriculumError):
    pass
