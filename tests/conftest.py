"""Shared pytest fixtures for timebank tests."""

import logging
import tempfile
import os
from datetime import date, timedelta
import pytest

from timebank.database.factories import create_sqlite_database
from timebank.domain.ledger import LedgerService
from timebank.logging_config import LOGGER_NAME


class FakeClock:
    """Settable stand-in for date.today."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int = 1) -> date:
        self.today += timedelta(days=days)
        return self.today


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    """A clock fixed at 2024-03-01 that tests can move forward."""
    return FakeClock(date(2024, 3, 1))


@pytest.fixture
def ledger(temp_db, clock):
    """Create an opened LedgerService with a temporary database."""
    service = LedgerService(temp_db, clock=clock)
    service.open()
    return service


@pytest.fixture
def funded_ledger(ledger):
    """Ledger with a little history: +100, +50, -30 on the clock's day."""
    ledger.deposit(100)
    ledger.deposit(50)
    ledger.withdraw(30)
    return ledger


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers the CLI attaches so later tests see default logging."""
    logger = logging.getLogger(LOGGER_NAME)
    yield
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
