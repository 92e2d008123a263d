# app/core/db.py
from __future__ import annotations
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from core.schema_registry import auto_discover, run_all

SCHEMAS_DIR = Path(__file__).resolve().parents[1] / "schemas"

def get_engine(db_url: str) -> Engine:
    if db_url.startswith("sqlite:///"):
        db_file = db_url.replace("sqlite:///", "")
        Path(db_file).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(db_url, future=True)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _sqlite_foreign_keys)
    return engine

def _sqlite_foreign_keys(dbapi_conn, _record):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys = ON")
    cur.close()

def init_db(engine: Engine):
    # 1) import schema modules so their @register installers are collected
    auto_discover(SCHEMAS_DIR)

    # 2) run all registered ensure_*_schema(engine) functions
    run_all(engine)
