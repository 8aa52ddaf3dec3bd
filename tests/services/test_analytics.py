from datetime import date
from decimal import Decimal

import pytest

from models.expense import Expense
from tests.helpers import make_input


def _store_expense(services, expense_id, **fields):
    """Put a record straight into the store, bypassing installment expansion."""
    defaults = {
        "name": expense_id,
        "value": Decimal("0"),
        "category": "Other",
        "due_date": date(2025, 1, 1),
        "type": "fixed",
    }
    defaults.update(fields)
    return services.store.put(Expense(id=expense_id, **defaults))


class TestAggregateByCategory:
    """Tests for AnalyticsService.aggregate_by_category."""

    def test_empty(self, services):
        """Test no expenses gives no totals."""
        assert services.analytics.aggregate_by_category() == []

    def test_sums_per_category(self, services):
        """Test A: 10 + 5 and B: 20 give A=15, B=20."""
        services.expenses.create(make_input(value="10", category="A"))
        services.expenses.create(make_input(value="5", category="A"))
        services.expenses.create(make_input(value="20", category="B"))

        totals = {t.category: t.total for t in services.analytics.aggregate_by_category()}

        assert totals == {"A": Decimal("15"), "B": Decimal("20")}

    def test_counts_every_installment(self, services):
        """Test generated installments add their full value."""
        services.expenses.create(
            make_input(
                value="1200.00",
                category="Housing",
                type="installment",
                total_installments=3,
            )
        )

        totals = services.analytics.aggregate_by_category()

        assert len(totals) == 1
        assert totals[0].category == "Housing"
        assert totals[0].total == Decimal("3600.00")

    def test_keeps_decimal_precision(self, services):
        """Test cents are summed exactly."""
        for _ in range(3):
            services.expenses.create(make_input(value="0.10", category="Coffee"))

        totals = services.analytics.aggregate_by_category()

        assert totals[0].total == Decimal("0.30")

    def test_not_filtered_by_date(self, services):
        """Test totals cover all due dates."""
        services.expenses.create(make_input(value="1", due_date=date(2019, 5, 1)))
        services.expenses.create(make_input(value="2", due_date=date(2031, 5, 1)))

        assert services.analytics.aggregate_by_category()[0].total == Decimal("3")


class TestAggregateMonthly:
    """Tests for AnalyticsService.aggregate_monthly."""

    def test_returns_most_recent_months_first(self, services):
        """Test only the two latest of five months are returned."""
        for month in (1, 2, 4, 6, 9):
            services.expenses.create(
                make_input(value=str(month), due_date=date(2024, month, 10))
            )

        totals = services.analytics.aggregate_monthly(2)

        assert [(t.month, t.total) for t in totals] == [
            ("2024-09", Decimal("9")),
            ("2024-06", Decimal("6")),
        ]

    def test_empty_months_are_omitted(self, services):
        """Test gaps between months are not zero-filled."""
        services.expenses.create(make_input(value="10", due_date=date(2024, 1, 10)))
        services.expenses.create(make_input(value="30", due_date=date(2024, 3, 10)))

        totals = services.analytics.aggregate_monthly(6)

        assert [t.month for t in totals] == ["2024-03", "2024-01"]

    def test_sums_within_month(self, services):
        """Test records due in the same month are added together."""
        services.expenses.create(make_input(value="10.50", due_date=date(2024, 5, 1)))
        services.expenses.create(make_input(value="4.50", due_date=date(2024, 5, 31)))

        totals = services.analytics.aggregate_monthly(1)

        assert totals[0].month == "2024-05"
        assert totals[0].total == Decimal("15.00")

    def test_orders_across_years(self, services):
        """Test December of one year sorts before January of the next."""
        services.expenses.create(make_input(due_date=date(2024, 12, 10)))
        services.expenses.create(make_input(due_date=date(2025, 1, 10)))

        totals = services.analytics.aggregate_monthly(6)

        assert [t.month for t in totals] == ["2025-01", "2024-12"]

    def test_installments_spread_over_months(self, services):
        """Test each installment counts in its own month."""
        services.expenses.create(
            make_input(
                value="100",
                due_date=date(2024, 1, 15),
                type="installment",
                total_installments=3,
            )
        )

        totals = services.analytics.aggregate_monthly(12)

        assert [(t.month, t.total) for t in totals] == [
            ("2024-03", Decimal("100")),
            ("2024-02", Decimal("100")),
            ("2024-01", Decimal("100")),
        ]

    def test_month_count_must_be_positive(self, services):
        """Test a zero month count is rejected."""
        with pytest.raises(ValueError):
            services.analytics.aggregate_monthly(0)


class TestProjectSixMonths:
    """Tests for AnalyticsService.project_six_months."""

    def test_six_months_from_current_month(self, services):
        """Test month keys start at today's month and cross the year."""
        projection = services.analytics.project_six_months(today=date(2025, 11, 20))

        assert [m.month for m in projection.months] == [
            "2025-11",
            "2025-12",
            "2026-01",
            "2026-02",
            "2026-03",
            "2026-04",
        ]
        assert all(m.total == Decimal("0") for m in projection.months)
        assert projection.total == Decimal("0")
        assert projection.average == Decimal("0")

    def test_fixed_expenses_recur_every_month(self, services):
        """Test fixed expenses count in every month whatever their due date."""
        services.expenses.create(make_input(value="100", due_date=date(2020, 1, 1)))
        services.expenses.create(make_input(value="50", due_date=date(2030, 6, 1)))

        projection = services.analytics.project_six_months(today=date(2025, 1, 10))

        assert [m.total for m in projection.months] == [Decimal("150")] * 6
        assert projection.total == Decimal("900")
        assert projection.average == Decimal("150")

    def test_installment_window(self, services):
        """Test value / remaining is added while the window condition holds."""
        _store_expense(services, "fixed", value=Decimal("100"))
        _store_expense(
            services,
            "tv",
            value=Decimal("300"),
            due_date=date(2025, 2, 10),
            type="installment",
            total_installments=3,
            paid_installments=1,
        )

        projection = services.analytics.project_six_months(today=date(2025, 1, 10))

        # February is month 1 and two installments remain: months 1 and 2
        assert [m.total for m in projection.months] == [
            Decimal("100"),
            Decimal("250"),
            Decimal("250"),
            Decimal("100"),
            Decimal("100"),
            Decimal("100"),
        ]
        assert projection.total == Decimal("900")
        assert projection.average == Decimal("150")

    def test_fully_paid_installments_are_ignored(self, services):
        """Test series with every installment paid add nothing."""
        _store_expense(
            services,
            "paid-off",
            value=Decimal("300"),
            due_date=date(2025, 1, 10),
            type="installment",
            total_installments=3,
            paid_installments=3,
        )

        projection = services.analytics.project_six_months(today=date(2025, 1, 10))

        assert projection.total == Decimal("0")

    def test_installment_without_total_is_ignored(self, services):
        """Test installment records lacking a total are skipped."""
        _store_expense(
            services,
            "broken",
            value=Decimal("300"),
            due_date=date(2025, 1, 10),
            type="installment",
            total_installments=None,
        )

        projection = services.analytics.project_six_months(today=date(2025, 1, 10))

        assert projection.total == Decimal("0")

    def test_window_uses_month_of_year(self, services):
        """Test a December due date never falls in the first six indexes."""
        _store_expense(
            services,
            "december",
            value=Decimal("10"),
            due_date=date(2024, 12, 5),
            type="installment",
            total_installments=2,
        )

        projection = services.analytics.project_six_months(today=date(2024, 12, 1))

        assert projection.total == Decimal("0")

    def test_generated_installments_each_contribute(self, services):
        """Test every stored installment of a series is projected on its own."""
        services.expenses.create(
            make_input(
                value="300",
                due_date=date(2025, 1, 15),
                type="installment",
                total_installments=3,
            )
        )

        projection = services.analytics.project_six_months(today=date(2025, 1, 10))

        # Installments due in months 0, 1, 2, each spread over 3 indexes
        assert [m.total for m in projection.months] == [
            Decimal("100"),
            Decimal("200"),
            Decimal("300"),
            Decimal("200"),
            Decimal("100"),
            Decimal("0"),
        ]
