"""
Spreadsheet codec: xlsx bytes <-> ordered {sheet name: grid}.

Grids are lists of rows; every row of a sheet has the sheet's full width,
padded with the requested default. Sheet order is preserved.
"""

from __future__ import annotations
from typing import Dict
import io
import logging

from openpyxl import Workbook, load_workbook

from .errors import StorageFailure
from .file_store import FileStore
from .helpers import is_empty
from .models import Cell, Grid

logger = logging.getLogger(__name__)

WorkbookGrids = Dict[str, Grid]


def _sheet_grid(ws, default: Cell) -> Grid:
    grid: Grid = []
    for values in ws.iter_rows(values_only=True):
        grid.append([default if is_empty(v) else v for v in values])
    # formatting can push max_row past the last populated row
    while grid and all(is_empty(v) for v in grid[-1]):
        grid.pop()
    return grid


def decode_workbook(data: bytes, default: Cell = None) -> WorkbookGrids:
    """Decode every sheet. Missing cells become `default`."""
    wb = load_workbook(io.BytesIO(data), data_only=True)
    try:
        return {ws.title: _sheet_grid(ws, default) for ws in wb.worksheets}
    finally:
        wb.close()


def decode(data: bytes, default: Cell = None) -> Grid:
    """Decode the first sheet only."""
    wb = load_workbook(io.BytesIO(data), data_only=True)
    try:
        if not wb.worksheets:
            return []
        return _sheet_grid(wb.worksheets[0], default)
    finally:
        wb.close()


def _write_rows(ws, grid: Grid):
    for row in grid:
        ws.append([None if is_empty(v) else v for v in row])


def encode(workbook: WorkbookGrids) -> bytes:
    """Build a fresh xlsx file from named grids."""
    wb = Workbook()
    wb.remove(wb.active)
    for name, grid in workbook.items():
        _write_rows(wb.create_sheet(title=name), grid)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def replace_sheet(data: bytes, sheet_name: str, grid: Grid) -> bytes:
    """
    Rewrite one sheet of an existing xlsx file.

    Other sheets and the sheet's position in the workbook are kept. Formula
    cells are saved as their cached results, the values every read sees.
    """
    wb = load_workbook(io.BytesIO(data), data_only=True)
    if sheet_name not in wb.sheetnames:
        raise KeyError(sheet_name)
    old = wb[sheet_name]
    index = wb.sheetnames.index(sheet_name)
    wb.remove(old)
    _write_rows(wb.create_sheet(title=sheet_name, index=index), grid)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def read(files: FileStore, path: str, default: Cell = None) -> WorkbookGrids:
    if not files.exists(path):
        raise StorageFailure(path)
    return decode_workbook(files.read_bytes(path), default=default)


def write(files: FileStore, workbook: WorkbookGrids, path: str):
    data = encode(workbook)
    files.write_bytes(path, data)
    logger.info("Wrote workbook %s (%d sheet(s), %d bytes)", path, len(workbook), len(data))
