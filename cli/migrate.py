#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()

MIGRATIONS_TABLE = "schema_migrations"


def init_schema_migrations_table(conn):
    conn.execute(f"""
        CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()


def get_applied_migrations(conn):
    cursor = conn.execute(
        f"SELECT migration_file FROM {MIGRATIONS_TABLE} ORDER BY migration_file"
    )
    return {row[0] for row in cursor.fetchall()}


def get_available_migrations(migrations_dir):
    if not migrations_dir.exists():
        return []
    return sorted(path.name for path in migrations_dir.glob("*.sql"))


def get_pending_migrations(conn, migrations_dir):
    """List migration files not yet recorded as applied, in apply order."""
    init_schema_migrations_table(conn)
    applied = get_applied_migrations(conn)
    return [m for m in get_available_migrations(migrations_dir) if m not in applied]


def apply_migration(conn, migrations_dir, migration_file):
    with open(migrations_dir / migration_file, "r") as f:
        sql = f.read()

    try:
        conn.executescript(sql)
        conn.execute(
            f"INSERT INTO {MIGRATIONS_TABLE} (migration_file) VALUES (?)",
            (migration_file,),
        )
        conn.commit()
        logger.info(f"Applied migration: {migration_file}")
    except Exception as e:
        conn.rollback()
        logger.error(f"Error applying migration {migration_file}: {e}")
        raise


def cmd_status(args, db_manager):
    """Show migration status."""
    if not db_manager.get_db_path().exists():
        logger.info(
            "Database does not exist. Run 'python -m cli migrate apply' to create it."
        )
        return

    migrations_dir = db_manager.get_migrations_dir()
    with db_manager.connect() as conn:
        pending = get_pending_migrations(conn, migrations_dir)
        available = get_available_migrations(migrations_dir)

        logger.info("Migration Status:")
        logger.info("================")

        if not available:
            logger.info("No migrations found.")
            return

        for migration in available:
            status_text = "PENDING" if migration in pending else "APPLIED"
            logger.info(f"{migration}: {status_text}")

        logger.info(f"\nTotal migrations: {len(available)}")
        logger.info(f"Applied: {len(available) - len(pending)}")
        logger.info(f"Pending: {len(pending)}")


def cmd_apply(args, db_manager):
    """Apply pending migrations."""
    migrations_dir = db_manager.get_migrations_dir()
    with db_manager.connect() as conn:
        pending = get_pending_migrations(conn, migrations_dir)

        if not pending:
            logger.info("No pending migrations.")
            return

        logger.info(f"Applying {len(pending)} migration(s)...")
        for migration in pending:
            apply_migration(conn, migrations_dir, migration)

        logger.info(f"Successfully applied {len(pending)} migration(s).")


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Database migrations",
        description="Manage the expense database schema",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration commands",
        dest="subcommand",
        required=True,
    )

    status_parser = migrate_subparsers.add_parser(
        "status", help="Show migration status"
    )
    status_parser.set_defaults(func=cmd_status)

    apply_parser = migrate_subparsers.add_parser(
        "apply", help="Apply pending migrations"
    )
    apply_parser.set_defaults(func=cmd_apply)
