import logging

from sqlalchemy import create_engine

from app.db import bootstrap
from app.db.base import Base


def test_missing_tables_reports_absent_schema():
    engine = create_engine("sqlite+pysqlite://")
    with engine.connect() as connection:
        assert bootstrap.missing_tables(connection) == list(bootstrap.REQUIRED_TABLES)

    Base.metadata.create_all(bind=engine)
    with engine.connect() as connection:
        assert bootstrap.missing_tables(connection) == []


def test_ensure_schema_only_warns_when_auto_create_is_disabled(monkeypatch, caplog):
    engine = create_engine("sqlite+pysqlite://")
    monkeypatch.setattr(bootstrap, "engine", engine)

    with caplog.at_level(logging.WARNING, logger="app.db.bootstrap"):
        bootstrap.ensure_schema(auto_create=False)
    assert "alembic upgrade head" in caplog.text
    with engine.connect() as connection:
        assert "lessons" in bootstrap.missing_tables(connection)

    bootstrap.ensure_schema(auto_create=True)
    with engine.connect() as connection:
        assert bootstrap.missing_tables(connection) == []
