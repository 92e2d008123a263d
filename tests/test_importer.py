import io
import zipfile

import pytest

from core.settings import CurriculumConfig, StorageConfig
from screens.curriculum.errors import (
    MalformedMetadataRows, NoPhaseHeaderDetected, SubjectNotFound, UnsupportedUpload,
)
from screens.curriculum.importer import document_path, import_document, parse_subject_name

from .conftest import NOW_MS, build_workbook, cp_rows, curriculum_workbook


@pytest.mark.parametrize("title, subject", [
    ("CAPAIAN PEMBELAJARAN Life Skills", "Life Skills"),
    ("CAPAIAN PEMBELAJARAN CITIZENSHIP", "CITIZENSHIP"),
    ("capaian pembelajaran  MATEMATIKA ", "MATEMATIKA"),
    ("Capaian   Pembelajaran Bahasa Sunda", "Bahasa Sunda"),
])
def test_parse_subject_name(title, subject):
    assert parse_subject_name(title) == subject


def test_document_path():
    path = document_path("Life  Skills", 123, StorageConfig(), CurriculumConfig())
    assert path == "uploads/cp_life_skills_123.xlsx"


def test_import_creates_descriptor_per_phase(store, files):
    data = curriculum_workbook()
    result = import_document(store, files, data, "cp.xlsx", clock=lambda: NOW_MS)

    path = f"uploads/cp_matematika_{NOW_MS}.xlsx"
    assert result.document_path == path
    assert result.phases == {"A": 0, "B": 1}
    assert (result.success, result.failed, result.errors) == (2, 0, [])
    assert files.read_bytes(path) == data

    outcomes = store.list_learning_outcomes(result.subject_id)
    assert [(o.phase.value, o.description, o.document_path) for o in outcomes] == [
        ("A", "desc A", path),
        ("B", "desc B", path),
    ]


def test_reimport_updates_in_place(store, files):
    first = import_document(store, files, curriculum_workbook(), "cp.xlsx", clock=lambda: 1)
    second = import_document(
        store, files,
        curriculum_workbook(descriptions=("new A", "new B")), "cp.xlsx", clock=lambda: 2,
    )
    outcomes = store.list_learning_outcomes(second.subject_id)
    assert len(outcomes) == 2
    assert {o.document_path for o in outcomes} == {second.document_path}
    assert [o.description for o in outcomes] == ["new A", "new B"]
    # old file stays on disk
    assert files.exists(first.document_path)


def test_multi_word_subject(store, files):
    data = build_workbook({"CP": cp_rows("Life Skills", headers=("Fase C",), descriptions=("life C",))})
    result = import_document(store, files, data, "ls.xlsx", clock=lambda: NOW_MS)
    assert result.subject_name == "Life Skills"
    assert result.document_path == f"uploads/cp_life_skills_{NOW_MS}.xlsx"
    assert result.success == 1


def test_unknown_subject_writes_nothing(store, files):
    data = build_workbook({"CP": cp_rows("FISIKA")})
    with pytest.raises(SubjectNotFound) as exc:
        import_document(store, files, data, "cp.xlsx", clock=lambda: NOW_MS)
    assert exc.value.subject == "FISIKA"
    assert files.files == {}


def test_missing_description_row(store, files):
    data = build_workbook({"CP": cp_rows("MATEMATIKA")[:5]})
    with pytest.raises(MalformedMetadataRows):
        import_document(store, files, data, "cp.xlsx", clock=lambda: NOW_MS)
    # the file is stored before the layout is checked
    assert list(files.files) == [f"uploads/cp_matematika_{NOW_MS}.xlsx"]


def test_missing_title(store, files):
    data = build_workbook({"CP": [["only one row"]]})
    with pytest.raises(MalformedMetadataRows):
        import_document(store, files, data, "cp.xlsx")


def test_no_phase_headers(store, files):
    data = build_workbook({"CP": cp_rows("MATEMATIKA", headers=("Elemen", "Capaian"))})
    with pytest.raises(NoPhaseHeaderDetected):
        import_document(store, files, data, "cp.xlsx")


def test_empty_description_is_skipped(store, files):
    import_document(store, files, curriculum_workbook(), "cp.xlsx", clock=lambda: 1)
    result = import_document(
        store, files, curriculum_workbook(descriptions=("   ", "changed B")), "cp.xlsx",
        clock=lambda: 2,
    )
    assert (result.success, result.failed) == (1, 0)
    outcomes = {o.phase.value: o for o in store.list_learning_outcomes(result.subject_id)}
    assert outcomes["A"].description == "desc A"
    assert outcomes["A"].document_path == "uploads/cp_matematika_1.xlsx"
    assert outcomes["B"].description == "changed B"


class FailingPhaseStore:
    def __init__(self, inner, phase):
        self.inner = inner
        self.phase = phase

    def __getattr__(self, name):
        return getattr(self.inner, name)

    def upsert_phase_descriptor(self, subject_id, phase, description, path):
        if phase == self.phase:
            raise RuntimeError("database is locked")
        self.inner.upsert_phase_descriptor(subject_id, phase, description, path)


def test_failed_phase_does_not_stop_others(store, files):
    data = curriculum_workbook(headers=("Fase A", "Fase B", "Fase C"), descriptions=("a", "b", "c"))
    result = import_document(FailingPhaseStore(store, "B"), files, data, "cp.xlsx")
    assert (result.success, result.failed) == (2, 1)
    assert result.errors == ["Error in phase B: database is locked"]
    assert "1 phase(s) failed" in result.message
    phases = [o.phase.value for o in store.list_learning_outcomes(result.subject_id)]
    assert phases == ["A", "C"]


def test_rejects_non_excel_upload(store, files):
    with pytest.raises(UnsupportedUpload):
        import_document(store, files, b"a,b\n", "cp.csv")


def test_rejects_oversized_upload(store, files):
    with pytest.raises(UnsupportedUpload):
        import_document(store, files, curriculum_workbook(), "cp.xlsx",
                        storage=StorageConfig(max_upload_mb=0))


def test_rejects_empty_upload(store, files):
    with pytest.raises(UnsupportedUpload):
        import_document(store, files, b"", "cp.xlsx")


def test_rejects_corrupt_workbook(store, files):
    with pytest.raises(UnsupportedUpload):
        import_document(store, files, b"not a zip file", "cp.xlsx")
    assert files.files == {}


def test_rejects_zip_that_is_not_a_workbook(store, files):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as z:
        z.writestr("word/document.xml", "<document/>")
    with pytest.raises(UnsupportedUpload):
        import_document(store, files, buf.getvalue(), "cp.xlsx")
    assert files.files == {}
