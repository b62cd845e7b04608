"""
Tests for database.py - schema creation and connection management.
"""

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError

from jobly.database import get_engine, get_session, init_database, session_context


class TestDatabaseInit:
    """Test database initialization."""

    def test_init_creates_database_file(self, tmp_path):
        db_path = tmp_path / "test.db"
        assert not db_path.exists()

        init_database(f"sqlite:///{db_path}")

        assert db_path.exists()

    def test_init_creates_tables(self, db_url):
        tables = set(inspect(get_engine(db_url)).get_table_names())
        assert {"companies", "jobs"} <= tables

    def test_init_creates_parent_directories(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "test.db"
        assert not db_path.parent.exists()

        init_database(f"sqlite:///{db_path}")

        assert db_path.exists()

    def test_init_is_idempotent(self, db_url):
        init_database(db_url)


class TestEngine:
    """Test the shared engine cache."""

    def test_engine_reused_per_url(self, db_url):
        assert get_engine(db_url) is get_engine(db_url)

    def test_database_url_from_environment(self, tmp_path, monkeypatch):
        url = f"sqlite:///{tmp_path / 'env.db'}"
        monkeypatch.setenv("JOBLY_DATABASE_URL", url)
        assert get_engine() is get_engine(url)

    def test_foreign_keys_enforced(self, db_url):
        session = get_session(db_url)
        with pytest.raises(IntegrityError):
            session.execute(
                text(
                    "INSERT INTO jobs (title, salary, equity, company_handle) "
                    "VALUES ('orphan', 1, 0, 'missing')"
                )
            )
            session.commit()
        session.close()

    def test_check_constraints(self, seeded_url):
        session = get_session(seeded_url)
        with pytest.raises(IntegrityError):
            session.execute(text("UPDATE jobs SET equity = 1.5"))
        session.close()


class TestSessionContext:
    """Test session lifecycle helper."""

    def test_rollback_on_error(self, seeded_url):
        with pytest.raises(RuntimeError):
            with session_context(seeded_url) as session:
                session.execute(text("DELETE FROM jobs"))
                raise RuntimeError("boom")

        with session_context(seeded_url) as session:
            assert session.execute(text("SELECT COUNT(*) FROM jobs")).scalar() == 4
