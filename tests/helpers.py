"""Helper utilities for tests."""

from datetime import date
from decimal import Decimal
from pathlib import Path
import sqlite3

from cli.migrate import apply_migration, get_pending_migrations
from models.expense import ExpenseInput


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all pending SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    for migration_file in get_pending_migrations(conn, migrations_dir):
        apply_migration(conn, migrations_dir, migration_file)


def make_input(
    name: str = "Internet",
    value: str = "100.00",
    category: str = "Services",
    due_date: date = date(2025, 1, 10),
    **overrides,
) -> ExpenseInput:
    """Build an ExpenseInput with sensible defaults for tests."""
    return ExpenseInput(
        name=name,
        value=Decimal(value),
        category=category,
        due_date=due_date,
        **overrides,
    )
