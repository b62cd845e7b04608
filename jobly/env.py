import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///data/jobly.db"
TEST_DATABASE_URL = "sqlite:///data/jobly_test.db"


def load_env() -> None:
    """Load .env from project root if present. Existing variables win."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def get_database_url() -> str:
    """
    Resolve the database URL.

    JOBLY_DATABASE_URL wins; otherwise the default SQLite file, or the
    test database when JOBLY_ENV=test.
    """
    url = os.getenv("JOBLY_DATABASE_URL")
    if url:
        return url
    if os.getenv("JOBLY_ENV") == "test":
        return TEST_DATABASE_URL
    return DEFAULT_DATABASE_URL


def get_log_level() -> str:
    return os.getenv("JOBLY_LOG_LEVEL", "INFO")


def get_log_dir() -> Path:
    return Path(os.getenv("JOBLY_LOG_DIR", "logs"))
