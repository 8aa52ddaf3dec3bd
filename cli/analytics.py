#!/usr/bin/env python3

from tools.reports import (
    get_month_metrics,
    get_monthly_comparison,
    get_top_expenses,
    get_upcoming_expenses,
)
from logger import get_logger

logger = get_logger()


def _money(value):
    return f"{value:,.2f}"


def cmd_categories(args, services):
    """Show lifetime totals per category."""
    totals = services.analytics.aggregate_by_category()

    if not totals:
        logger.info("No expenses found.")
        return

    logger.info("\nTotals by category:")
    logger.info("=" * 80)
    for item in totals:
        logger.info(f"{item.category:<30} {_money(item.total):>15}")


def cmd_monthly(args, services):
    """Show totals for the most recent months with expenses."""
    months = args.months or services.config.monthly_months
    totals = services.analytics.aggregate_monthly(months)

    if not totals:
        logger.info("No expenses found.")
        return

    logger.info(f"\nMonthly totals (last {months} month(s) with expenses):")
    logger.info("=" * 80)
    for item in totals:
        logger.info(f"{item.month}  {_money(item.total):>15}")


def cmd_projection(args, services):
    """Show the six month spend projection."""
    projection = services.analytics.project_six_months()

    logger.info("\nProjected spend (fixed expenses and pending installments):")
    logger.info("=" * 80)
    for month in projection.months:
        logger.info(f"{month.label:<8} {_money(month.total):>15}")
    logger.info("-" * 80)
    logger.info(f"Total projected: {_money(projection.total)}")
    logger.info(f"Monthly average: {_money(projection.average)}")


def cmd_dashboard(args, services):
    """Show current month figures."""
    metrics = get_month_metrics(services)
    comparison = get_monthly_comparison(services)

    logger.info("\nThis month:")
    logger.info("=" * 80)
    logger.info(f"Total:   {_money(metrics['total']):>15}")
    logger.info(f"Paid:    {_money(metrics['paid']):>15}")
    logger.info(f"Pending: {_money(metrics['pending']):>15}")
    logger.info(f"Overdue: {_money(metrics['overdue']):>15}")
    logger.info(
        f"Last month: {_money(comparison['last_month'])} "
        f"({comparison['change']:+.1f}%)"
    )

    top = get_top_expenses(services)
    if top:
        logger.info("\nTop expenses:")
        for item in top:
            logger.info(
                f"  {item['name']:<30} {_money(item['value']):>12} "
                f"{item['percentage']:5.1f}%"
            )


def cmd_upcoming(args, services):
    """Show unpaid expenses due soon."""
    days = args.days if args.days is not None else services.config.upcoming_days
    upcoming = get_upcoming_expenses(services, days=days)

    if not upcoming:
        logger.info(f"Nothing due in the next {days} day(s).")
        return

    logger.info(f"\n{len(upcoming)} expense(s) due in the next {days} day(s):")
    logger.info("=" * 80)
    for expense in upcoming:
        logger.info(
            f"{expense.due_date.isoformat()}  {_money(expense.value):>12}  {expense.name}"
        )


def setup_parser(subparsers):
    """Setup analytics subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "analytics",
        help="Expense analytics",
        description="Aggregations and projections over all expenses",
    )

    analytics_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available analytics commands",
        dest="subcommand",
        required=True,
    )

    categories_parser = analytics_subparsers.add_parser(
        "categories", help="Totals by category"
    )
    categories_parser.set_defaults(func=cmd_categories)

    monthly_parser = analytics_subparsers.add_parser("monthly", help="Totals by month")
    monthly_parser.add_argument(
        "--months",
        type=int,
        help="Number of months to show (default from config)",
    )
    monthly_parser.set_defaults(func=cmd_monthly)

    projection_parser = analytics_subparsers.add_parser(
        "projection", help="Six month spend projection"
    )
    projection_parser.set_defaults(func=cmd_projection)

    dashboard_parser = analytics_subparsers.add_parser(
        "dashboard", help="Current month overview"
    )
    dashboard_parser.set_defaults(func=cmd_dashboard)

    upcoming_parser = analytics_subparsers.add_parser(
        "upcoming", help="Unpaid expenses due soon"
    )
    upcoming_parser.add_argument(
        "--days", type=int, help="Look-ahead window in days (default from config)"
    )
    upcoming_parser.set_defaults(func=cmd_upcoming)
