# screens/curriculum/manager.py
"""
Curriculum Manager - operations on curriculum documents.
Import of CP workbooks, browsing and editing ATP sheets, and TP filtering
for a class.
"""

from __future__ import annotations
from typing import Callable, List, Optional, Sequence, Tuple
import logging

from core.settings import CurriculumConfig, StorageConfig

from . import codec
from .columns import detect_objective_columns
from .errors import ClassNotFound, DocumentNotFound, StorageFailure
from .file_store import FileStore
from .importer import now_ms, import_document
from .locator import locate_sheet
from .models import (
    Grid, ImportResult, ObjectiveFilterResult, ObjectiveSheet, Phase, PhaseDescriptor, Record,
)
from .objectives import (
    effective_semester, grade_level, records_to_rows, select_objectives, semester_text,
)
from .projector import project, unproject
from .store import CurriculumStore

logger = logging.getLogger(__name__)


class CurriculumManager:
    """Main manager for curriculum document operations."""

    def __init__(self, store: CurriculumStore, files: FileStore,
                 storage: Optional[StorageConfig] = None,
                 curriculum: Optional[CurriculumConfig] = None,
                 clock: Callable[[], int] = now_ms):
        self.store = store
        self.files = files
        self.storage = storage or StorageConfig()
        self.curriculum = curriculum or CurriculumConfig()
        self.clock = clock

    # ========================================================================
    # IMPORT
    # ========================================================================

    def import_document(self, data: bytes, file_name: str) -> ImportResult:
        return import_document(self.store, self.files, data, file_name,
                               storage=self.storage, curriculum=self.curriculum,
                               clock=self.clock)

    def list_learning_outcomes(self, subject_id: int) -> List[PhaseDescriptor]:
        return self.store.list_learning_outcomes(subject_id)

    # ========================================================================
    # ATP SHEETS
    # ========================================================================

    def _load_sheet(self, subject_id: int, phase: str) -> Tuple[str, str, str, bytes, Grid]:
        """Returns (subject name, path, sheet name, file bytes, grid)."""
        phase = Phase.parse(phase).value
        ref = self.store.find_phase_descriptor(subject_id, phase)
        if ref is None:
            raise DocumentNotFound(subject_id, phase)
        if not self.files.exists(ref.document_path):
            raise StorageFailure(ref.document_path)

        data = self.files.read_bytes(ref.document_path)
        sheets = codec.decode_workbook(data, default="")
        sheet_name = locate_sheet(sheets.keys(), ref.subject_name, phase,
                                  self.curriculum.sheet_name_template)
        return ref.subject_name, ref.document_path, sheet_name, data, sheets[sheet_name]

    def get_objectives_by_phase(self, subject_id: int, phase: str) -> ObjectiveSheet:
        subject_name, _, sheet_name, _, grid = self._load_sheet(subject_id, phase)
        headers, records = project(grid)
        return ObjectiveSheet(
            subject_name=subject_name,
            phase=Phase.parse(phase).value,
            sheet_name=sheet_name,
            headers=headers,
            records=records,
        )

    def update_objectives_by_phase(self, subject_id: int, phase: str,
                                   records: Sequence[Record]) -> int:
        """
        Replace the data rows of the phase's ATP sheet. Rows 1-5 of the sheet
        and all other sheets stay as they are. Returns the rows written.
        """
        _, path, sheet_name, data, grid = self._load_sheet(subject_id, phase)
        headers, _ = project(grid)
        new_grid = unproject(headers, records, grid)

        self.files.write_bytes(path, codec.replace_sheet(data, sheet_name, new_grid))
        logger.info("Updated sheet '%s' of %s: %d row(s)", sheet_name, path, len(records))
        return len(records)

    # ========================================================================
    # TP FILTER
    # ========================================================================

    def filter_objectives(self, subject_id: int, phase: str, class_id: int,
                          semester: Optional[int] = None) -> ObjectiveFilterResult:
        klass = self.store.find_class_by_id(class_id)
        if klass is None:
            raise ClassNotFound(class_id)

        grade = grade_level(klass.name)
        sem = effective_semester(semester, klass.term_semester)

        sheet = self.get_objectives_by_phase(subject_id, phase)
        columns = detect_objective_columns(sheet.headers)
        objectives = select_objectives(
            sheet.headers, records_to_rows(sheet.headers, sheet.records),
            grade, sem, columns=columns,
        )
        logger.info("TP filter %s phase %s class %r (grade %d, semester %s): %d of %d rows",
                    sheet.subject_name, sheet.phase, klass.name, grade, sem,
                    len(objectives), sheet.total_rows)

        return ObjectiveFilterResult(
            subject_name=sheet.subject_name,
            phase=sheet.phase,
            class_name=klass.name,
            grade_level=grade,
            semester=sem,
            semester_text=semester_text(sem),
            objectives=objectives,
        )
