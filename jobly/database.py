"""
Database schema and connection management.

Uses SQLAlchemy over SQLite by default. One engine (and so one connection
pool) is kept per database URL.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generator, Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .env import get_database_url

Base = declarative_base()


class Company(Base):
    """Company table. Rows are read and written through raw SQL in repositories."""

    __tablename__ = "companies"
    __table_args__ = (CheckConstraint("num_employees >= 0", name="ck_companies_num_employees"),)

    handle = Column(String(25), primary_key=True)
    name = Column(Text, nullable=False, unique=True)
    num_employees = Column(Integer)
    description = Column(Text, nullable=False)
    logo_url = Column(Text)


class Job(Base):
    """Job table."""

    __tablename__ = "jobs"
    __table_args__ = (
        CheckConstraint("salary >= 0", name="ck_jobs_salary"),
        CheckConstraint("equity <= 1.0", name="ck_jobs_equity"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    salary = Column(Integer)
    equity = Column(Numeric)
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
    )


_engines: Dict[str, Engine] = {}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Get the shared engine for a database URL, creating it on first use.

    Args:
        database_url: SQLAlchemy URL (default: from environment)

    Returns:
        SQLAlchemy engine
    """
    url = database_url or get_database_url()
    engine = _engines.get(url)
    if engine is None:
        engine = create_engine(url, future=True)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        _engines[url] = engine
    return engine


def dispose_engines() -> None:
    """Close every pooled connection and forget cached engines."""
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()


def init_database(database_url: Optional[str] = None) -> None:
    """
    Initialize database and create tables.

    Args:
        database_url: SQLAlchemy URL (default: from environment). For SQLite
            files the parent directory is created if missing.
    """
    database_url = database_url or get_database_url()
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(get_engine(database_url))


def get_session(database_url: Optional[str] = None) -> Session:
    """Get a SQLAlchemy session (caller must close it)."""
    engine = get_engine(database_url)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)()


@contextmanager
def session_context(database_url: Optional[str] = None) -> Generator[Session, None, None]:
    """
    Context manager for SQLAlchemy sessions.

    Rolls back and re-raises on error, always closes. Repositories commit
    their own writes.

    Usage:
        with session_context(url) as session:
            companies.get(session, "acme")
    """
    session = get_session(database_url)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
