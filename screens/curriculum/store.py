"""
Relational store for subjects, classes and learning outcomes (CP).
"""

from __future__ import annotations
from typing import List, Optional, Protocol

from sqlalchemy.engine import Engine

from .helpers import exec_query, rows_to_dicts
from .models import ClassInfo, DocumentRef, Phase, PhaseDescriptor, Subject


class CurriculumStore(Protocol):
    def find_subject_id_by_name(self, name: str) -> Optional[int]: ...

    def upsert_phase_descriptor(self, subject_id: int, phase: str,
                                description: str, document_path: str) -> None: ...

    def find_phase_descriptor(self, subject_id: int, phase: str) -> Optional[DocumentRef]: ...

    def find_class_by_id(self, class_id: int) -> Optional[ClassInfo]: ...

    def list_learning_outcomes(self, subject_id: int) -> List[PhaseDescriptor]: ...


class SqlCurriculumStore:
    """CurriculumStore over SQLAlchemy. Every call runs in its own transaction."""

    def __init__(self, engine: Engine):
        self.engine = engine

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_subject_id_by_name(self, name: str) -> Optional[int]:
        with self.engine.connect() as conn:
            row = exec_query(conn, "SELECT id FROM subjects WHERE name = :n LIMIT 1",
                             {"n": name}).fetchone()
        return row[0] if row else None

    def find_phase_descriptor(self, subject_id: int, phase: str) -> Optional[DocumentRef]:
        with self.engine.connect() as conn:
            row = exec_query(conn, """
                SELECT lo.file_path, s.name AS subject_name
                FROM learning_outcomes lo
                JOIN subjects s ON lo.subject_id = s.id
                WHERE lo.subject_id = :sid AND lo.phase = :phase
            """, {"sid": subject_id, "phase": phase}).fetchone()
        if not row or not row.file_path:
            return None
        return DocumentRef(document_path=row.file_path, subject_name=row.subject_name)

    def find_class_by_id(self, class_id: int) -> Optional[ClassInfo]:
        with self.engine.connect() as conn:
            row = exec_query(conn, """
                SELECT c.id, c.name, t.semester
                FROM classes c
                LEFT JOIN academic_terms t ON c.term_id = t.id
                WHERE c.id = :cid
            """, {"cid": class_id}).fetchone()
        if not row:
            return None
        return ClassInfo(id=row.id, name=row.name, term_semester=row.semester)

    def list_learning_outcomes(self, subject_id: int) -> List[PhaseDescriptor]:
        with self.engine.connect() as conn:
            rows = exec_query(conn, """
                SELECT id, subject_id, phase, description, file_path
                FROM learning_outcomes
                WHERE subject_id = :sid
                ORDER BY phase
            """, {"sid": subject_id}).fetchall()
        return [
            PhaseDescriptor(
                id=r["id"],
                subject_id=r["subject_id"],
                phase=Phase(r["phase"]),
                description=r["description"],
                document_path=r["file_path"],
            )
            for r in rows_to_dicts(rows)
        ]

    def list_subjects(self) -> List[Subject]:
        with self.engine.connect() as conn:
            rows = exec_query(conn, "SELECT id, name FROM subjects ORDER BY name").fetchall()
        return [Subject(id=r.id, name=r.name) for r in rows]

    def list_classes(self) -> List[ClassInfo]:
        with self.engine.connect() as conn:
            rows = exec_query(conn, """
                SELECT c.id, c.name, t.semester
                FROM classes c
                LEFT JOIN academic_terms t ON c.term_id = t.id
                ORDER BY c.name
            """).fetchall()
        return [ClassInfo(id=r.id, name=r.name, term_semester=r.semester) for r in rows]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert_phase_descriptor(self, subject_id: int, phase: str,
                                description: str, document_path: str) -> None:
        with self.engine.begin() as conn:
            exec_query(conn, """
                INSERT INTO learning_outcomes (subject_id, phase, description, file_path)
                VALUES (:sid, :phase, :desc, :path)
                ON CONFLICT(subject_id, phase) DO UPDATE SET
                    description = excluded.description,
                    file_path = excluded.file_path,
                    updated_at = CURRENT_TIMESTAMP
            """, {"sid": subject_id, "phase": phase, "desc": description, "path": document_path})

    def add_subject(self, name: str) -> int:
        with self.engine.begin() as conn:
            result = exec_query(conn, "INSERT INTO subjects (name) VALUES (:n)", {"n": name})
            return result.lastrowid

    def add_term(self, year_label: str, semester: str) -> int:
        with self.engine.begin() as conn:
            result = exec_query(conn, """
                INSERT INTO academic_terms (year_label, semester) VALUES (:y, :s)
            """, {"y": year_label, "s": semester})
            return result.lastrowid

    def add_class(self, name: str, term_id: Optional[int] = None,
                  class_id: Optional[int] = None) -> int:
        with self.engine.begin() as conn:
            if class_id is None:
                result = exec_query(conn, "INSERT INTO classes (name, term_id) VALUES (:n, :t)",
                                    {"n": name, "t": term_id})
                return result.lastrowid
            exec_query(conn, "INSERT INTO classes (id, name, term_id) VALUES (:id, :n, :t)",
                       {"id": class_id, "n": name, "t": term_id})
            return class_id
