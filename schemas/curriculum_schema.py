# schemas/curriculum_schema.py
"""
Subjects, classes and learning outcome (CP) tables used by the curriculum
document engine. The phase descriptor row keeps the path of the spreadsheet
it was imported from.
"""

from __future__ import annotations
from sqlalchemy import text as sa_text
from sqlalchemy.engine import Engine
import logging

from core.schema_registry import register

logger = logging.getLogger(__name__)


def _exec(conn, sql: str, params: dict = None):
    """Execute SQL with parameters."""
    return conn.execute(sa_text(sql), params or {})


@register
def ensure_curriculum_schema(engine: Engine):
    """Ensures subjects, academic terms, classes and learning outcomes exist."""
    with engine.begin() as conn:
        _exec(conn, """
        CREATE TABLE IF NOT EXISTS subjects (
            id          INTEGER PRIMARY KEY AUTOINCREMENT,
            name        TEXT NOT NULL UNIQUE,
            created_at  DATETIME DEFAULT CURRENT_TIMESTAMP
        )""")

        # semester holds the term label: 'Ganjil' or 'Genap'
        _exec(conn, """
        CREATE TABLE IF NOT EXISTS academic_terms (
            id          INTEGER PRIMARY KEY AUTOINCREMENT,
            year_label  TEXT NOT NULL,
            semester    TEXT NOT NULL,
            UNIQUE(year_label, semester)
        )""")

        _exec(conn, """
        CREATE TABLE IF NOT EXISTS classes (
            id          INTEGER PRIMARY KEY AUTOINCREMENT,
            name        TEXT NOT NULL,
            term_id     INTEGER,
            FOREIGN KEY(term_id) REFERENCES academic_terms(id) ON DELETE SET NULL
        )""")

        _exec(conn, """
        CREATE TABLE IF NOT EXISTS learning_outcomes (
            id          INTEGER PRIMARY KEY AUTOINCREMENT,
            subject_id  INTEGER NOT NULL,
            phase       TEXT NOT NULL CHECK (phase IN ('A','B','C')),
            description TEXT NOT NULL,
            file_path   TEXT,
            updated_at  DATETIME DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(subject_id, phase),
            FOREIGN KEY(subject_id) REFERENCES subjects(id) ON DELETE CASCADE
        )""")

    logger.info("✓ Installed curriculum tables")
