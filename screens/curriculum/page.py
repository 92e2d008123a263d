"""
Curriculum Documents screen - CP import, ATP editing and TP lookup
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

from core.db import get_engine, init_db
from core.settings import load_settings

from .errors import CurriculumError, SheetNotFound, UnknownColumn
from .file_store import LocalFileStore
from .helpers import is_empty
from .manager import CurriculumManager
from .models import Phase
from .store import SqlCurriculumStore


def _manager():
    if "curriculum_manager" not in st.session_state:
        settings = load_settings()
        engine = get_engine(settings.db.url)
        init_db(engine)
        st.session_state["curriculum_engine"] = engine
        st.session_state["curriculum_manager"] = CurriculumManager(
            SqlCurriculumStore(engine),
            LocalFileStore(settings.storage.root),
            storage=settings.storage,
            curriculum=settings.curriculum,
        )
    return st.session_state["curriculum_manager"]


def _show_error(e: CurriculumError):
    st.error(f"❌ {e}")
    if isinstance(e, SheetNotFound) and e.available_sheets:
        st.caption("Available sheets: " + ", ".join(e.available_sheets))
    if isinstance(e, UnknownColumn):
        st.caption("Valid columns: " + ", ".join(e.valid_headers))


def _pick_subject(manager: CurriculumManager, key: str):
    subjects = manager.store.list_subjects()
    if not subjects:
        st.info("No subjects yet.")
        return None
    return st.selectbox("Subject", subjects, format_func=lambda s: s.name, key=key)


def render_import(manager: CurriculumManager):
    st.subheader("📥 Import Capaian Pembelajaran")
    st.info(
        "**Expected format:**\n\n"
        "Row 2: CAPAIAN PEMBELAJARAN <subject>\n\n"
        "Row 5: phase headers (Fase A / Fase B / Fase C)\n\n"
        "Row 6: description of each phase"
    )
    uploaded = st.file_uploader("Upload Excel", type=[e.lstrip(".") for e in manager.storage.allowed_extensions],
                                key="cp_import_file")
    if uploaded is None:
        return
    if st.button("Import", key="cp_import_btn"):
        try:
            result = manager.import_document(uploaded.getvalue(), uploaded.name)
        except CurriculumError as e:
            _show_error(e)
            return
        st.success(f"✅ {result.message}")
        st.caption(f"Stored as {result.document_path}")
        for err in result.errors:
            st.warning(err)

    subject = _pick_subject(manager, "cp_list_subject")
    if subject is not None:
        outcomes = manager.list_learning_outcomes(subject.id)
        if outcomes:
            st.dataframe(
                pd.DataFrame([{"Phase": o.phase.value, "Description": o.description} for o in outcomes]),
                hide_index=True,
                use_container_width=True,
            )


def render_atp(manager: CurriculumManager):
    st.subheader("📝 Alur Tujuan Pembelajaran")
    subject = _pick_subject(manager, "atp_subject")
    if subject is None:
        return
    phase = st.selectbox("Phase", [p.value for p in Phase], key="atp_phase")
    try:
        sheet = manager.get_objectives_by_phase(subject.id, phase)
    except CurriculumError as e:
        _show_error(e)
        return

    st.caption(f"Sheet: {sheet.sheet_name} · {sheet.total_rows} row(s)")
    edited = st.data_editor(
        sheet.to_frame(),
        num_rows="dynamic",
        hide_index=True,
        use_container_width=True,
        key=f"atp_editor_{subject.id}_{phase}",
    )
    if st.button("💾 Save", key="atp_save"):
        records = [
            {k: ("" if is_empty(v) else v) for k, v in row.items()}
            for row in edited.to_dict(orient="records")
        ]
        try:
            count = manager.update_objectives_by_phase(subject.id, phase, records)
        except CurriculumError as e:
            _show_error(e)
            return
        st.success(f"✅ Saved {count} row(s)")


def render_tp(manager: CurriculumManager):
    st.subheader("🎯 Tujuan Pembelajaran per Class")
    subject = _pick_subject(manager, "tp_subject")
    if subject is None:
        return
    phase = st.selectbox("Phase", [p.value for p in Phase], key="tp_phase")
    classes = manager.store.list_classes()
    if not classes:
        st.info("No classes yet.")
        return
    klass = st.selectbox("Class", classes, format_func=lambda c: c.name, key="tp_class")
    choice = st.radio("Semester", ["From class term", "1 (Ganjil)", "2 (Genap)"],
                      horizontal=True, key="tp_semester")
    semester = {"1 (Ganjil)": 1, "2 (Genap)": 2}.get(choice)

    try:
        result = manager.filter_objectives(subject.id, phase, klass.id, semester)
    except CurriculumError as e:
        _show_error(e)
        return

    c1, c2, c3 = st.columns(3)
    c1.metric("Grade", result.grade_level)
    c2.metric("Semester", result.semester_text)
    c3.metric("Objectives", result.total)
    st.dataframe(result.to_frame(), hide_index=True, use_container_width=True)


def render():
    """Main render function for Curriculum Documents."""
    st.title("Curriculum Documents")
    manager = _manager()

    tab1, tab2, tab3 = st.tabs(["Import CP", "ATP", "TP by Class"])
    with tab1:
        render_import(manager)
    with tab2:
        render_atp(manager)
    with tab3:
        render_tp(manager)


if __name__ == "__main__":
    render()
