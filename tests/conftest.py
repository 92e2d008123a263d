from __future__ import annotations
import io
import re
import zipfile

import pytest
from openpyxl import Workbook

from core.db import get_engine
from core.settings import StorageConfig
from schemas.curriculum_schema import ensure_curriculum_schema
from screens.curriculum.file_store import MemoryFileStore
from screens.curriculum.manager import CurriculumManager
from screens.curriculum.store import SqlCurriculumStore

NOW_MS = 1700000000000

ATP_HEADERS = ["Elemen", "CP", "Tujuan Pembelajaran", "KKTP", "Materi Pokok", "Kelas", "Semester"]

ATP_ROWS = [
    ["Bilangan", "cp1", "TP 3.1 ganjil", "K1", "M1", 3, 1],
    ["Bilangan", "cp1", "TP 3.2 both", "K2", "M2", "3", "1 dan 2"],
    ["Bilangan", "cp1", "TP 3.3 genap", "K3", "M3", 3, 2],
    ["Aljabar", "cp2", "TP 1.1", "K4", "M4", 1, 1],
    ["Aljabar", "cp2", "TP 3.4 any", "K5", "M5", 3, ""],
    ["Aljabar", "cp2", "", "K6", "M6", 3, 1],
    ["", "", "", "", "", "", ""],
    ["Geometri", "cp3", "TP 3.5 range", "K7", "M7", "3", "1-2"],
]


def build_workbook(sheets: dict) -> bytes:
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append([None if v == "" else v for v in row])
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def cache_formula_results(data: bytes, results: dict) -> bytes:
    """Store cached results for formula cells, the way Excel saves them."""
    src = zipfile.ZipFile(io.BytesIO(data))
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as dst:
        for item in src.infolist():
            body = src.read(item.filename)
            if item.filename.startswith("xl/worksheets/"):
                xml = body.decode("utf-8")
                for formula, value in results.items():
                    pattern = r"(<f>" + re.escape(formula.lstrip("=")) + r"</f>)<v\s*(?:/>|></v>)"
                    xml = re.sub(pattern, r"\g<1><v>" + str(value) + "</v>", xml)
                body = xml.encode("utf-8")
            dst.writestr(item, body)
    return buf.getvalue()


def cp_rows(subject: str, headers=("Fase A", "Fase B"), descriptions=("desc A", "desc B")):
    return [
        [""],
        [f"CAPAIAN PEMBELAJARAN {subject}"],
        ["TAHUN AJARAN 2025/2026"],
        [""],
        list(headers),
        list(descriptions),
    ]


def atp_rows(subject: str, phase: str, rows=ATP_ROWS, headers=ATP_HEADERS):
    return [
        ["ALUR TUJUAN PEMBELAJARAN"],
        [subject],
        [f"FASE {phase}"],
        [""],
        list(headers),
        *[list(r) for r in rows],
    ]


def curriculum_workbook(subject: str = "MATEMATIKA", **cp_kwargs) -> bytes:
    return build_workbook({
        "CP": cp_rows(subject, **cp_kwargs),
        f"ATP {subject} Fase A": atp_rows(subject, "A"),
        f"ATP {subject} Fase B": atp_rows(subject, "B", rows=ATP_ROWS[:2]),
    })


@pytest.fixture
def engine(tmp_path):
    eng = get_engine(f"sqlite:///{tmp_path / 'test.db'}")
    ensure_curriculum_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine):
    s = SqlCurriculumStore(engine)
    s.add_subject("MATEMATIKA")
    s.add_subject("Life Skills")
    s.add_subject("CITIZENSHIP")
    odd = s.add_term("2025/2026", "Ganjil")
    even = s.add_term("2025/2026", "Genap")
    s.add_class("3 Gentur", odd, class_id=7)
    s.add_class("3 Calakan", even, class_id=8)
    s.add_class("A Kelas", odd, class_id=9)
    s.add_class("3 Sunda", None, class_id=10)
    return s


@pytest.fixture
def files():
    return MemoryFileStore()


@pytest.fixture
def manager(store, files):
    return CurriculumManager(store, files, storage=StorageConfig(), clock=lambda: NOW_MS)


@pytest.fixture
def imported(manager):
    """MATEMATIKA workbook imported; returns (manager, subject id, result)."""
    result = manager.import_document(curriculum_workbook(), "cp_matematika.xlsx")
    return manager, result.subject_id, result
