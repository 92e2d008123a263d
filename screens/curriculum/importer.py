"""
Import of curriculum (CP) workbooks.

Expected layout of the first sheet:
    Row 2 (index 1): CAPAIAN PEMBELAJARAN <subject>
    Row 3 (index 2): TAHUN AJARAN 2025/2026
    Row 5 (index 4): [Fase A] [Fase B] [Fase C]
    Row 6 (index 5): [description A] [description B] [description C]

The uploaded bytes are stored verbatim; the ATP sheets inside the same file
are read later by the objective screens.
"""

from __future__ import annotations
from pathlib import PurePosixPath
from typing import Callable, Optional
import logging
import re
import time
from zipfile import BadZipFile

from openpyxl.utils.exceptions import InvalidFileException

from core.settings import CurriculumConfig, StorageConfig

from . import codec
from .columns import detect_phases
from .constants import (
    DOCUMENT_EXTENSION, PHASE_DESCRIPTION_ROW, PHASE_HEADER_ROW, TITLE_COL, TITLE_ROW,
)
from .errors import MalformedMetadataRows, SubjectNotFound, UnsupportedUpload
from .file_store import FileStore
from .helpers import cell_text
from .models import Grid, ImportResult
from .store import CurriculumStore

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def validate_upload(data: bytes, file_name: str, storage: StorageConfig):
    ext = PurePosixPath(file_name or "").suffix.lower()
    allowed = [e.lower() for e in storage.allowed_extensions]
    if ext not in allowed:
        raise UnsupportedUpload(
            f"Unsupported file type '{ext or file_name}'. Upload an Excel file ({', '.join(allowed)})"
        )
    if not data:
        raise UnsupportedUpload("Uploaded file is empty")
    max_bytes = storage.max_upload_mb * 1024 * 1024
    if len(data) > max_bytes:
        raise UnsupportedUpload(f"File is larger than {storage.max_upload_mb} MB")


def parse_subject_name(title: str, prefix: str = "CAPAIAN PEMBELAJARAN") -> str:
    """'CAPAIAN PEMBELAJARAN Life Skills' -> 'Life Skills'."""
    pattern = r"^" + r"\s+".join(re.escape(w) for w in prefix.split()) + r"\s+"
    return re.sub(pattern, "", title, count=1, flags=re.IGNORECASE).strip()


def read_title(grid: Grid) -> str:
    row = grid[TITLE_ROW] if len(grid) > TITLE_ROW else []
    title = cell_text(row[TITLE_COL] if len(row) > TITLE_COL else None).strip()
    if not title:
        raise MalformedMetadataRows("Title cell A2 is empty. Expected 'CAPAIAN PEMBELAJARAN <subject>'")
    return title


def document_path(subject_name: str, timestamp_ms: int,
                  storage: StorageConfig, curriculum: CurriculumConfig) -> str:
    slug = re.sub(r"\s+", "_", subject_name.lower())
    file_name = f"{curriculum.file_prefix}{slug}_{timestamp_ms}{DOCUMENT_EXTENSION}"
    return str(PurePosixPath(storage.upload_dir) / file_name)


def import_document(store: CurriculumStore, files: FileStore, data: bytes, file_name: str,
                    storage: Optional[StorageConfig] = None,
                    curriculum: Optional[CurriculumConfig] = None,
                    clock: Callable[[], int] = now_ms) -> ImportResult:
    """
    Import a CP workbook: store the file and upsert one learning outcome per
    detected phase. A failing phase is reported in the result; the others
    are still written.
    """
    storage = storage or StorageConfig()
    curriculum = curriculum or CurriculumConfig()

    validate_upload(data, file_name, storage)
    try:
        grid = codec.decode(data)
    except (BadZipFile, InvalidFileException, KeyError, ValueError) as e:
        # KeyError: a zip without the workbook parts, e.g. a renamed .docx
        raise UnsupportedUpload(f"'{file_name}' is not a readable Excel workbook") from e

    title = read_title(grid)
    subject_name = parse_subject_name(title, curriculum.title_prefix)
    logger.info("Importing '%s' (title=%r, subject=%r)", file_name, title, subject_name)

    subject_id = store.find_subject_id_by_name(subject_name)
    if subject_id is None:
        raise SubjectNotFound(subject_name)

    path = document_path(subject_name, clock(), storage, curriculum)
    files.write_bytes(path, data)

    if len(grid) <= PHASE_DESCRIPTION_ROW:
        raise MalformedMetadataRows(
            "Workbook layout not recognised. Phase headers must be on row 5 "
            "and descriptions on row 6"
        )

    phases = detect_phases(grid[PHASE_HEADER_ROW])
    logger.info("Phase mapping for %s: %s", subject_name, phases)

    result = ImportResult(subject_id=subject_id, subject_name=subject_name,
                          document_path=path, phases=phases)
    descriptions = grid[PHASE_DESCRIPTION_ROW]
    for phase, col in phases.items():
        description = cell_text(descriptions[col] if col < len(descriptions) else None)
        if not description.strip():
            continue
        try:
            store.upsert_phase_descriptor(subject_id, phase, description, path)
            result.success += 1
        except Exception as e:
            logger.error("Upsert failed for %s phase %s", subject_name, phase, exc_info=True)
            result.failed += 1
            result.errors.append(f"Error in phase {phase}: {e}")

    logger.info("%s (%s)", result.message, path)
    return result
