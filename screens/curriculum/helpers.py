"""
Helper functions for cell conversion and SQL access
"""

from typing import Any, Dict, List, Optional
import math
import re

from sqlalchemy import text as sa_text

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_DIGIT_RUN = re.compile(r"\d+")


def is_empty(val: Any) -> bool:
    """True for None, NaN and blank strings."""
    if val is None:
        return True
    if isinstance(val, float) and math.isnan(val):
        return True
    if isinstance(val, str):
        return val == ""
    return False


def cell_text(val: Any) -> str:
    """Render a cell as text. Empty cells become '', whole floats lose '.0'."""
    if is_empty(val):
        return ""
    if isinstance(val, bool):
        return "TRUE" if val else "FALSE"
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val)


def parse_int(val: Any) -> Optional[int]:
    """
    Leading integer of a cell, or None.

    Numbers are truncated; text is read up to the first non-digit,
    so '3' and '3 SD' both give 3.
    """
    if is_empty(val) or isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        if isinstance(val, float) and math.isinf(val):
            return None
        return int(val)
    m = _LEADING_INT.match(str(val))
    return int(m.group(1)) if m else None


def digit_runs(val: Any) -> List[int]:
    """Every run of digits in a cell's text: '1 dan 2' -> [1, 2]."""
    return [int(d) for d in _DIGIT_RUN.findall(cell_text(val).strip())]


def exec_query(conn, sql: str, params: Dict[str, Any] = None):
    """Execute a SQL query using SQLAlchemy."""
    return conn.execute(sa_text(sql), params or {})


def rows_to_dicts(rows):
    """Convert list of SQLAlchemy rows to list of dictionaries."""
    return [dict(r._mapping) for r in rows] if rows else []
