"""Dashboard and report tools built on the expense list."""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta

from models.expense import Expense


def _expenses_in_month(services, year: int, month: int) -> List[Expense]:
    return [
        e
        for e in services.expenses.find_all()
        if e.due_date.year == year and e.due_date.month == month
    ]


def _total(expenses: List[Expense]) -> Decimal:
    return sum((e.value for e in expenses), Decimal("0"))


def get_month_metrics(services, today: Optional[date] = None) -> Dict[str, Decimal]:
    """Get totals for expenses due in the current calendar month.

    Args:
        services: Services container with expense service.
        today: Reference date, defaults to date.today().

    Returns:
        Dictionary with:
        - "total": Sum of all expenses due this month
        - "paid": Sum of those with status 'paid'
        - "pending": Sum of those with status 'pending'
        - "overdue": Sum of those with status 'overdue'
    """
    today = today or date.today()
    month_expenses = _expenses_in_month(services, today.year, today.month)

    return {
        "total": _total(month_expenses),
        "paid": _total([e for e in month_expenses if e.status == "paid"]),
        "pending": _total([e for e in month_expenses if e.status == "pending"]),
        "overdue": _total([e for e in month_expenses if e.status == "overdue"]),
    }


def get_upcoming_expenses(
    services, days: int = 7, today: Optional[date] = None
) -> List[Expense]:
    """Get unpaid expenses due within the next `days` days (today included).

    Returns:
        List of Expense objects ordered by due date (soonest first).
    """
    today = today or date.today()

    upcoming = [
        e
        for e in services.expenses.find_all()
        if e.status != "paid" and 0 <= (e.due_date - today).days <= days
    ]
    return sorted(upcoming, key=lambda e: (e.due_date, e.id))


def get_monthly_comparison(services, today: Optional[date] = None) -> Dict[str, Decimal]:
    """Compare this month's total with the previous month's.

    Returns:
        Dictionary with "current_month", "last_month" and "change", the
        percentage change from last month (0 when last month had no spend).
    """
    today = today or date.today()
    last = today - relativedelta(months=1)

    current_total = _total(_expenses_in_month(services, today.year, today.month))
    last_total = _total(_expenses_in_month(services, last.year, last.month))

    change = Decimal("0")
    if last_total > 0:
        change = (current_total - last_total) / last_total * 100

    return {
        "current_month": current_total,
        "last_month": last_total,
        "change": change,
    }


def get_top_expenses(
    services, limit: int = 5, today: Optional[date] = None
) -> List[Dict]:
    """Get the largest expenses due this month and their share of the top list.

    Returns:
        List of dictionaries with "name", "category", "value" and
        "percentage", largest first.
    """
    today = today or date.today()
    top = sorted(
        _expenses_in_month(services, today.year, today.month),
        key=lambda e: e.value,
        reverse=True,
    )[:limit]

    total = _total(top)
    return [
        {
            "name": e.name,
            "category": e.category,
            "value": e.value,
            "percentage": e.value / total * 100 if total > 0 else Decimal("0"),
        }
        for e in top
    ]


def get_date_status(services, day: date, today: Optional[date] = None) -> Optional[str]:
    """Get the calendar status of a day from the expenses due on it.

    Pending expenses on a past day show as overdue. The result is for display
    only; stored statuses are not changed.

    Returns:
        'overdue', 'pending', 'paid', or None when nothing is due that day.
    """
    today = today or date.today()
    statuses = {e.status for e in services.expenses.find_all() if e.due_date == day}

    if not statuses:
        return None
    if "overdue" in statuses:
        return "overdue"
    if "pending" in statuses and day < today:
        return "overdue"
    if "pending" in statuses:
        return "pending"
    return "paid"
