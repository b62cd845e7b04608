"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Any, Dict

from sqlalchemy import text

from jobly.database import dispose_engines, get_session, init_database
from jobly.logger import reset_logger


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep logs and configuration inside the test's temp directory."""
    monkeypatch.setenv("JOBLY_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("JOBLY_DATABASE_URL", raising=False)
    monkeypatch.delenv("JOBLY_ENV", raising=False)
    reset_logger()
    yield
    reset_logger()
    dispose_engines()


@pytest.fixture
def db_url(tmp_path) -> str:
    """Initialized, empty SQLite database."""
    url = f"sqlite:///{tmp_path / 'jobly_test.db'}"
    init_database(url)
    return url


@pytest.fixture
def seeded_url(db_url) -> str:
    """
    Database with three companies and four jobs, all at c1:

    c1 (1 employee), c2 (2), c3 (3)
    j0 salary 1 equity 0, j1 100/0.1, j2 200/0.2, j3 300/0.3
    """
    session = get_session(db_url)
    session.execute(
        text(
            """INSERT INTO companies (handle, name, num_employees, description, logo_url)
               VALUES ('c1', 'C1', 1, 'Desc1', 'http://c1.img'),
                      ('c2', 'C2', 2, 'Desc2', 'http://c2.img'),
                      ('c3', 'C3', 3, 'Desc3', 'http://c3.img')"""
        )
    )
    session.execute(
        text(
            """INSERT INTO jobs (title, salary, equity, company_handle)
               VALUES ('j0', 1, 0, 'c1'),
                      ('j1', 100, 0.1, 'c1'),
                      ('j2', 200, 0.2, 'c1'),
                      ('j3', 300, 0.3, 'c1')"""
        )
    )
    session.commit()
    session.close()
    return db_url


@pytest.fixture
def session(seeded_url):
    """Session on the seeded database."""
    s = get_session(seeded_url)
    yield s
    s.close()


@pytest.fixture
def job_ids(session) -> Dict[str, int]:
    """Job ids keyed by title."""
    rows = session.execute(text("SELECT id, title FROM jobs")).all()
    return {title: job_id for job_id, title in rows}


@pytest.fixture
def new_company() -> Dict[str, Any]:
    return {
        "handle": "new",
        "name": "New",
        "description": "New Description",
        "numEmployees": 1,
        "logoUrl": "http://new.img",
    }


@pytest.fixture
def new_job() -> Dict[str, Any]:
    return {
        "title": "new",
        "salary": 999,
        "equity": 0.05,
        "companyHandle": "c1",
    }
