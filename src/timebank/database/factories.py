"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from timebank.database.base import SNAPSHOT_KEY
from timebank.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DB_DIR = ".timebank"
DEFAULT_DB_NAME = "timebank.db"


def default_database_path() -> Path:
    """Return ~/.timebank/timebank.db, creating the directory if needed."""
    db_dir = Path.home() / DEFAULT_DB_DIR
    db_dir.mkdir(exist_ok=True)
    return db_dir / DEFAULT_DB_NAME


def create_sqlite_database(
    database_path: Optional[str] = None, key: str = SNAPSHOT_KEY
) -> SQLAlchemyDatabase:
    """Create a SQLite snapshot store.

    Args:
        database_path: Path to SQLite database file. If None, checks the
            TIMEBANK_DB_PATH environment variable, then falls back to
            ~/.timebank/timebank.db
        key: Key the snapshot is stored under

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("TIMEBANK_DB_PATH")

    if database_path is None:
        database_path = str(default_database_path())

    return SQLAlchemyDatabase(f"sqlite:///{database_path}", key=key)


def create_memory_database(key: str = SNAPSHOT_KEY) -> SQLAlchemyDatabase:
    """Create a throwaway in-memory SQLite snapshot store."""
    return SQLAlchemyDatabase("sqlite://", key=key)
