"""
Fixed layout of curriculum workbooks and labels shared by the engine.
"""

# Row/column indices are 0-based.
TITLE_ROW = 1
TITLE_COL = 0
PHASE_HEADER_ROW = 4
PHASE_DESCRIPTION_ROW = 5

# Objective (ATP) sheets
OBJECTIVE_HEADER_ROW = 4
OBJECTIVE_DATA_START_ROW = 5

PHASES = ("A", "B", "C")

DOCUMENT_EXTENSION = ".xlsx"

TERM_ODD = "ganjil"

SEMESTER_TEXT = {
    1: "Ganjil",
    2: "Genap",
}
SEMESTER_TEXT_ALL = "Semua"
