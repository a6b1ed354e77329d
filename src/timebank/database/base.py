"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from timebank.domain.entities import LedgerSnapshot

SNAPSHOT_KEY = "timeBankData"


class Database(ABC):
    """Abstract snapshot store for timebank.

    The ledger is persisted as one complete snapshot under a single key; every
    save replaces the previous snapshot wholesale.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def load_snapshot(self, today: date) -> Optional[LedgerSnapshot]:
        """Load the stored snapshot.

        Args:
            today: Date used for fields missing from the stored data

        Returns:
            The snapshot, or None if nothing has been stored yet

        Raises:
            CorruptSnapshotError: If stored data cannot be parsed
        """
        pass

    @abstractmethod
    def save_snapshot(self, snapshot: LedgerSnapshot) -> None:
        """Store the complete snapshot, replacing any previous one."""
        pass

    @abstractmethod
    def delete_snapshot(self) -> None:
        """Remove the stored snapshot if there is one."""
        pass

    @abstractmethod
    def load_payload(self) -> Optional[str]:
        """Return the raw stored payload, or None if nothing is stored."""
        pass
