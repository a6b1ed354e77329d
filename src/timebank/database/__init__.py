"""Database layer for timebank application."""

from timebank.database.base import SNAPSHOT_KEY, Database
from timebank.database.factories import create_memory_database, create_sqlite_database

__all__ = ["SNAPSHOT_KEY", "Database", "create_memory_database", "create_sqlite_database"]
