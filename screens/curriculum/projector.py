"""
Row projection for objective sheets.

Row 4 holds the column headers, rows 5+ hold data. `project` turns the data
rows into records keyed by header; `unproject` writes records back under the
untouched metadata rows.
"""

from __future__ import annotations
from typing import List, Sequence, Tuple

from .constants import OBJECTIVE_DATA_START_ROW, OBJECTIVE_HEADER_ROW
from .errors import UnknownColumn
from .helpers import cell_text, is_empty
from .models import Grid, Record


def header_keys(grid: Grid) -> List[str]:
    if len(grid) <= OBJECTIVE_HEADER_ROW:
        return []
    return [cell_text(h) for h in grid[OBJECTIVE_HEADER_ROW]]


def project(grid: Grid) -> Tuple[List[str], List[Record]]:
    headers = header_keys(grid)
    records: List[Record] = []
    for row in grid[OBJECTIVE_DATA_START_ROW:]:
        if all(is_empty(v) for v in row):
            continue
        record: Record = {}
        for idx, header in enumerate(headers):
            value = row[idx] if idx < len(row) else None
            record[header] = "" if is_empty(value) else value
        records.append(record)
    return headers, records


def check_columns(headers: Sequence[str], records: Sequence[Record]):
    """Keys of the first record must all be sheet headers."""
    if not records:
        return
    valid = set(headers)
    unknown = [k for k in records[0].keys() if k not in valid]
    if unknown:
        raise UnknownColumn(unknown, list(headers))


def unproject(headers: Sequence[str], records: Sequence[Record], original: Grid) -> Grid:
    check_columns(headers, records)
    head: Grid = [list(r) for r in original[:OBJECTIVE_DATA_START_ROW]]
    while len(head) < OBJECTIVE_DATA_START_ROW:
        head.append([])
    body: Grid = []
    for record in records:
        row = []
        for h in headers:
            value = record.get(h)
            row.append("" if is_empty(value) else value)
        body.append(row)
    return head + body
