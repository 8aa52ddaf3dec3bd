#!/usr/bin/env python3
"""
Duebook CLI - Command-line interface for tracking expenses and due dates.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    expenses     Manage expenses
    analytics    Totals, projections and the monthly dashboard
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli expenses add --name Rent --value 1200.00 --category Housing \\
        --due-date 2025-01-15 --type installment --installments 3
    python -m cli expenses list --status pending
    python -m cli analytics projection
"""

import sys
import argparse
from cli import analytics, expenses, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging, get_logger


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Duebook - Personal expense and due date tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    expenses.setup_parser(subparsers)
    analytics.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            if args.command == "migrate":
                # Migrate commands need db_manager for raw database operations
                args.func(args, DatabaseManager(config))
                return

            services = Services(config)
            if config.store_backend == "sqlite" and not services.db_manager.has_table(
                "expenses"
            ):
                get_logger().error(
                    "Database is not initialized. Run 'python -m cli migrate apply' first."
                )
                sys.exit(1)

            args.func(args, services)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
