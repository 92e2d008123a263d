from sqlalchemy import inspect

from core import schema_registry
from core.db import get_engine, init_db


def test_init_db_installs_curriculum_tables(tmp_path):
    engine = get_engine(f"sqlite:///{tmp_path / 'nested' / 'app.db'}")
    init_db(engine)
    tables = set(inspect(engine).get_table_names())
    assert {"subjects", "academic_terms", "classes", "learning_outcomes"} <= tables
    assert "ensure_curriculum_schema" in schema_registry.registered_names()
    engine.dispose()


def test_register_forms():
    calls = []

    @schema_registry.register("test_named_installer")
    def named(engine):
        calls.append("named")

    schema_registry.register("test_plain_installer", lambda engine: calls.append("plain"))
    # same name twice keeps the first installer
    schema_registry.register("test_plain_installer", lambda engine: calls.append("again"))

    names = schema_registry.registered_names()
    assert names.count("test_plain_installer") == 1
    assert "test_named_installer" in names
