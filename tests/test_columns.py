import pytest

from screens.curriculum.columns import detect_objective_columns, detect_phases
from screens.curriculum.errors import InvalidSheetStructure, NoPhaseHeaderDetected


def test_phase_headers_mixed_labels():
    assert detect_phases(["Fase A", "B", "", "FASE C"]) == {"A": 0, "B": 1, "C": 3}


def test_phase_headers_case_and_whitespace():
    assert detect_phases([" fase b ", None, "Capaian Fase c"]) == {"B": 0, "C": 2}


def test_phase_headers_later_column_wins():
    assert detect_phases(["A", "Fase A"]) == {"A": 1}


def test_phase_headers_ignore_numbers():
    with pytest.raises(NoPhaseHeaderDetected):
        detect_phases([1, 2.0])


def test_phase_headers_all_empty():
    with pytest.raises(NoPhaseHeaderDetected):
        detect_phases(["", "", None])


def test_phase_headers_missing_labels_are_absent():
    assert detect_phases(["Elemen", "Fase C"]) == {"C": 1}


def test_objective_columns():
    cols = detect_objective_columns(
        ["Elemen", "CP", "Tujuan Pembelajaran (TP)", "KKTP", "Materi Pokok", "Kelas", "Semester"]
    )
    assert (cols.objective, cols.grade, cols.semester, cols.criteria) == (2, 5, 6, 3)


def test_objective_columns_first_match_wins():
    cols = detect_objective_columns(["Tujuan Pembelajaran", "Tujuan Pembelajaran 2", "KELAS"])
    assert cols.objective == 0
    assert cols.grade == 2
    assert cols.semester is None
    assert cols.criteria is None


def test_objective_columns_grade_must_be_exact():
    with pytest.raises(InvalidSheetStructure) as exc:
        detect_objective_columns(["Tujuan Pembelajaran", "Kelas 3"])
    assert exc.value.headers == ["Tujuan Pembelajaran", "Kelas 3"]


def test_objective_columns_require_objective():
    with pytest.raises(InvalidSheetStructure):
        detect_objective_columns(["Elemen", "Kelas", "Semester"])
