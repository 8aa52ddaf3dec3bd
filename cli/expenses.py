#!/usr/bin/env python3

import sys
from datetime import date
from models.expense import (
    EXPENSE_STATUSES,
    EXPENSE_TYPES,
    ExpenseInput,
    ValidationError,
    parse_update,
)
from logger import get_logger

logger = get_logger()


def _log_expense(expense, indent=""):
    logger.info(f"{indent}ID: {expense.id}")
    logger.info(f"{indent}Name: {expense.name}")
    logger.info(f"{indent}Value: {expense.value}")
    logger.info(f"{indent}Category: {expense.category}")
    logger.info(f"{indent}Due date: {expense.due_date.isoformat()}")
    logger.info(f"{indent}Type: {expense.type}")
    if expense.type == "installment":
        logger.info(
            f"{indent}Installments: {expense.paid_installments}/"
            f"{expense.total_installments} paid"
        )
    logger.info(f"{indent}Status: {expense.status}")
    if expense.parent_expense_id:
        logger.info(f"{indent}Parent: {expense.parent_expense_id}")


def _parse_date_arg(value, flag):
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.error(f"Invalid date for {flag}: {value} (expected YYYY-MM-DD)")
        sys.exit(1)


def cmd_list(args, services):
    """List expenses, optionally filtered."""
    start_date = _parse_date_arg(args.start_date, "--from") if args.start_date else None
    end_date = _parse_date_arg(args.end_date, "--to") if args.end_date else None

    expenses = services.expenses.search(
        category=args.category,
        status=args.status,
        type=args.type,
        start_date=start_date,
        end_date=end_date,
    )

    if not expenses:
        logger.info("No expenses found.")
        return

    logger.info("\nExpenses:")
    logger.info("=" * 80)
    for expense in expenses:
        logger.info(
            f"{expense.due_date.isoformat()}  {expense.status:<8} "
            f"{expense.value:>12}  {expense.category:<15} {expense.name}"
        )
        logger.info(f"  ID: {expense.id}")

    logger.info("-" * 80)
    logger.info(f"Total expenses: {len(expenses)}")


def cmd_show(args, services):
    """Show a single expense and, for installment roots, its series."""
    expense = services.expenses.find(args.expense_id)
    if not expense:
        logger.error(f"Expense with ID {args.expense_id} not found.")
        sys.exit(1)

    _log_expense(expense)

    if expense.is_installment_root:
        children = services.expenses.find_children(expense.id)
        logger.info(f"\nGenerated installments ({len(children)}):")
        for child in children:
            logger.info(
                f"  {child.due_date.isoformat()}  {child.status:<8} {child.name}"
            )


def cmd_add(args, services):
    """Create an expense from command-line options."""
    payload = {
        "name": args.name,
        "value": args.value,
        "category": args.category,
        "due_date": args.due_date,
        "type": args.type,
        "total_installments": args.installments,
        "status": args.status,
        "paid_installments": args.paid_installments,
    }

    try:
        expense_input = ExpenseInput.from_dict(payload)
    except ValidationError as e:
        logger.error(f"Invalid expense: {e}")
        sys.exit(1)

    expense = services.expenses.create(expense_input)

    logger.info(f"\n✓ Expense created successfully with ID: {expense.id}")
    _log_expense(expense, indent="  ")
    if expense.type == "installment" and expense.total_installments > 1:
        logger.info(
            f"  {expense.total_installments - 1} more installment(s) scheduled monthly"
        )


def cmd_update(args, services):
    """Update fields of a single expense."""
    payload = {
        key: value
        for key, value in (
            ("name", args.name),
            ("value", args.value),
            ("category", args.category),
            ("due_date", args.due_date),
            ("status", args.status),
            ("paid_installments", args.paid_installments),
        )
        if value is not None
    }

    if not payload:
        logger.error("No fields to update.")
        sys.exit(1)

    try:
        fields = parse_update(payload)
    except ValidationError as e:
        logger.error(f"Invalid update: {e}")
        sys.exit(1)

    expense = services.expenses.update(args.expense_id, fields)
    if not expense:
        logger.error(f"Expense with ID {args.expense_id} not found.")
        sys.exit(1)

    logger.info(f"✓ Expense {expense.id} updated.")
    _log_expense(expense, indent="  ")


def cmd_delete(args, services):
    """Delete an expense by ID."""
    expense = services.expenses.find(args.expense_id)
    if not expense:
        logger.error(f"Expense with ID {args.expense_id} not found.")
        sys.exit(1)

    logger.info("\nExpense to delete:")
    _log_expense(expense, indent="  ")
    if expense.is_installment_root:
        children = services.expenses.find_children(expense.id)
        logger.info(f"  This also deletes {len(children)} generated installment(s).")

    if not args.yes:
        confirm = (
            input("\nAre you sure you want to delete this expense? (yes/no): ")
            .strip()
            .lower()
        )
        if confirm != "yes":
            logger.info("Deletion cancelled.")
            return

    if services.expenses.delete(expense.id):
        logger.info(f"✓ Expense '{expense.name}' deleted successfully.")
    else:
        logger.error("Failed to delete expense.")
        sys.exit(1)


def setup_parser(subparsers):
    """Setup expenses subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "expenses",
        help="Manage expenses",
        description="Record, update and delete expenses",
    )

    expenses_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available expense commands",
        dest="subcommand",
        required=True,
    )

    # expenses list
    list_parser = expenses_subparsers.add_parser(
        "list",
        help="List expenses",
        epilog="""
Examples:
  python -m cli expenses list
  python -m cli expenses list --status pending --from 2025-01-01 --to 2025-01-31
        """,
    )
    list_parser.add_argument("--category", help="Only this category")
    list_parser.add_argument("--status", choices=EXPENSE_STATUSES, help="Only this status")
    list_parser.add_argument("--type", choices=EXPENSE_TYPES, help="Only this type")
    list_parser.add_argument(
        "--from", dest="start_date", help="First due date, YYYY-MM-DD (inclusive)"
    )
    list_parser.add_argument(
        "--to", dest="end_date", help="Last due date, YYYY-MM-DD (inclusive)"
    )
    list_parser.set_defaults(func=cmd_list)

    # expenses show
    show_parser = expenses_subparsers.add_parser("show", help="Show an expense")
    show_parser.add_argument("expense_id", help="Expense ID")
    show_parser.set_defaults(func=cmd_show)

    # expenses add
    add_parser = expenses_subparsers.add_parser(
        "add",
        help="Add an expense",
        epilog="""
Examples:
  python -m cli expenses add --name Internet --value 99.90 --category Services --due-date 2025-01-10
  python -m cli expenses add --name Rent --value 1200.00 --category Housing \\
      --due-date 2025-01-15 --type installment --installments 3
        """,
    )
    add_parser.add_argument("--name", required=True, help="Expense name")
    add_parser.add_argument("--value", required=True, help="Amount, e.g. 1200.00")
    add_parser.add_argument("--category", required=True, help="Category label")
    add_parser.add_argument("--due-date", required=True, help="Due date, YYYY-MM-DD")
    add_parser.add_argument("--type", choices=EXPENSE_TYPES, default="fixed")
    add_parser.add_argument(
        "--installments",
        type=int,
        help="Number of monthly installments (required with --type installment)",
    )
    add_parser.add_argument("--status", choices=EXPENSE_STATUSES, default="pending")
    add_parser.add_argument("--paid-installments", type=int, default=0)
    add_parser.set_defaults(func=cmd_add)

    # expenses update
    update_parser = expenses_subparsers.add_parser(
        "update",
        help="Update an expense",
        description="Update a single expense. Other installments are not changed.",
    )
    update_parser.add_argument("expense_id", help="Expense ID")
    update_parser.add_argument("--name")
    update_parser.add_argument("--value")
    update_parser.add_argument("--category")
    update_parser.add_argument("--due-date")
    update_parser.add_argument("--status", choices=EXPENSE_STATUSES)
    update_parser.add_argument("--paid-installments", type=int)
    update_parser.set_defaults(func=cmd_update)

    # expenses delete
    delete_parser = expenses_subparsers.add_parser(
        "delete",
        help="Delete an expense",
        description="Delete an expense. Deleting the first installment deletes the series.",
    )
    delete_parser.add_argument("expense_id", help="Expense ID")
    delete_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    delete_parser.set_defaults(func=cmd_delete)
