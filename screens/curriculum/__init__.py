"""
Curriculum Documents Module

Imports curriculum (CP) workbooks, serves and edits the ATP sheets stored
inside them, and filters learning objectives (TP) for a class.

Main components:
- codec: xlsx bytes <-> grids
- columns: header rule tables (phase headers, ATP columns)
- importer: CP workbook import
- locator / projector: ATP sheet lookup and row <-> record conversion
- objectives: TP filtering by grade level and semester
- store / file_store: database and file storage
- manager: CurriculumManager for the operations above
- page: Streamlit UI (main entry point)

Usage:
    Programmatic access:
        from screens.curriculum.manager import CurriculumManager
        from screens.curriculum.store import SqlCurriculumStore
"""

from .errors import CurriculumError
from .file_store import LocalFileStore, MemoryFileStore
from .manager import CurriculumManager
from .models import ImportResult, ObjectiveFilterResult, ObjectiveSheet, Phase
from .store import SqlCurriculumStore

__all__ = [
    'CurriculumError',
    'CurriculumManager',
    'SqlCurriculumStore',
    'LocalFileStore',
    'MemoryFileStore',
    'ImportResult',
    'ObjectiveSheet',
    'ObjectiveFilterResult',
    'Phase',
]

__version__ = '1.0.0'
