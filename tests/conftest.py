"""Shared pytest fixtures for all tests."""

import sqlite3
import pytest
from pathlib import Path

from config import Config, get_migrations_dir
from db.store import MemoryExpenseStore
from services.base import Services
from tests.helpers import run_migrations


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary database.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "duebook",
        db_data_dir=tmp_path / "duebook" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "duebook" / "logs",
    )


@pytest.fixture
def db_manager_with_schema(test_db):
    """Create a DatabaseManager with schema already set up.

    This fixture provides a DatabaseManager that uses an in-memory database
    with all migrations already applied.

    Args:
        test_db: In-memory database connection fixture.

    Returns:
        TestDatabaseManager: Database manager with schema ready.
    """
    run_migrations(test_db, get_migrations_dir())

    class TestDatabaseManager:
        """Test database manager that uses in-memory connection."""

        def __init__(self, conn):
            self.conn = conn

        def connect(self):
            """Return a context manager for the test connection."""
            return _TestConnectionContext(self.conn)

        def has_table(self, table_name):
            cursor = self.conn.execute(
                "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
                (table_name,),
            )
            return cursor.fetchone() is not None

        def get_db_path(self):
            """Return a fake path for the test database."""
            return Path(":memory:")

        def get_migrations_dir(self):
            """Get the migrations directory path."""
            return get_migrations_dir()

    class _TestConnectionContext:
        """Context manager for test database connections."""

        def __init__(self, conn):
            self.conn = conn

        def __enter__(self):
            return self.conn

        def __exit__(self, exc_type, exc_val, exc_tb):
            # Don't close the connection - let the fixture handle it
            pass

    return TestDatabaseManager(test_db)


@pytest.fixture
def sqlite_services(test_config, db_manager_with_schema):
    """Services container backed by the migrated in-memory SQLite database."""
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def memory_services(test_config, db_manager_with_schema):
    """Services container backed by a MemoryExpenseStore."""
    return Services(
        test_config, db_manager=db_manager_with_schema, store=MemoryExpenseStore()
    )


@pytest.fixture(params=["sqlite", "memory"])
def services(request, sqlite_services, memory_services):
    """Create a Services container for each store implementation.

    Tests using this fixture run once against SQLite and once against the
    in-memory store.

    Returns:
        Services: Services container for testing.
    """
    if request.param == "sqlite":
        return sqlite_services
    return memory_services
