"""Tests for the database setup."""

from sqlalchemy import inspect

from bireader.db import DB_PATH_ENV, create_engine_with_path, create_tables, get_db_path


class TestDatabase:
    def test_db_path_from_environment(self, monkeypatch, tmp_path):
        path = tmp_path / "custom.db"
        monkeypatch.setenv(DB_PATH_ENV, str(path))
        assert get_db_path() == path

    def test_create_tables(self, tmp_path):
        engine = create_engine_with_path(tmp_path / "nested" / "history.db")
        try:
            create_tables(engine)
            assert "document_history" in inspect(engine).get_table_names()
        finally:
            engine.dispose()
