"""Analytics service for expense aggregations and projections."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta

from models.analytics import CategoryTotal, MonthlyTotal, ProjectedMonth, Projection

PROJECTION_MONTHS = 6


class AnalyticsService:
    """Computes rollups over the full expense set on demand."""

    def __init__(self, store):
        """Initialize the analytics service.

        Args:
            store: Expense store the rollups read from.
        """
        self.store = store

    def aggregate_by_category(self) -> List[CategoryTotal]:
        """Lifetime totals per category, ordered by category name.

        Every stored record counts, including generated installments, and no
        date filter is applied.
        """
        totals: Dict[str, Decimal] = defaultdict(Decimal)
        for expense in self.store.list():
            totals[expense.category] += expense.value

        return [
            CategoryTotal(category=category, total=totals[category])
            for category in sorted(totals)
        ]

    def aggregate_monthly(self, month_count: int = 6) -> List[MonthlyTotal]:
        """Totals per due-date month, most recent first.

        Months without expenses are absent rather than reported as zero.

        Args:
            month_count: Maximum number of months to return.

        Returns:
            Up to month_count MonthlyTotal objects.

        Raises:
            ValueError: If month_count is not positive.
        """
        if month_count < 1:
            raise ValueError("month_count must be a positive integer")

        totals: Dict[str, Decimal] = defaultdict(Decimal)
        for expense in self.store.list():
            totals[expense.month_key] += expense.value

        # YYYY-MM sorts chronologically as text
        months = sorted(totals, reverse=True)[:month_count]
        return [MonthlyTotal(month=month, total=totals[month]) for month in months]

    def project_six_months(self, today: Optional[date] = None) -> Projection:
        """Project spend for the current month and the five after it.

        Each month starts from the sum of all fixed expenses, which recur
        monthly whatever their due date. Installment expenses that are not
        fully paid add value / remaining in month index i (0 = current month)
        when due_month + remaining > i and due_month <= i, due_month being the
        zero-based month of year of the due date. The window compares month
        of year against a relative index, so series crossing a year boundary
        are approximated.

        Args:
            today: Reference date, defaults to date.today().

        Returns:
            Projection with six months in chronological order.
        """
        today = today or date.today()
        expenses = self.store.list()

        fixed_total = sum(
            (e.value for e in expenses if e.type == "fixed"), Decimal("0")
        )

        open_series = [
            e
            for e in expenses
            if e.type == "installment"
            and e.total_installments
            and e.paid_installments != e.total_installments
        ]

        first_month = today.replace(day=1)
        projection = Projection()
        for i in range(PROJECTION_MONTHS):
            month_start = first_month + relativedelta(months=i)
            month_total = fixed_total

            for expense in open_series:
                remaining = expense.total_installments - (
                    expense.paid_installments or 0
                )
                due_month = expense.due_date.month - 1
                if due_month + remaining > i and due_month <= i:
                    month_total += expense.value / remaining

            projection.months.append(
                ProjectedMonth(
                    month=f"{month_start.year:04d}-{month_start.month:02d}",
                    label=month_start.strftime("%b/%y"),
                    total=month_total,
                )
            )

        return projection
