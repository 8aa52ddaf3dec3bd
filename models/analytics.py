"""Result types for expense aggregations and projections."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List


@dataclass
class CategoryTotal:
    """Lifetime total of a category.

    Attributes:
        category: Category label.
        total: Sum of every record value in the category.
    """

    category: str
    total: Decimal


@dataclass
class MonthlyTotal:
    """Sum of expenses due in one calendar month.

    Attributes:
        month: Month key in YYYY-MM format.
        total: Sum of record values due in that month.
    """

    month: str
    total: Decimal


@dataclass
class ProjectedMonth:
    """Projected spend for one month of a projection.

    Attributes:
        month: Month key in YYYY-MM format.
        label: Short display label, e.g. "Jan/25".
        total: Fixed expenses plus remaining installment amounts.
    """

    month: str
    label: str
    total: Decimal


@dataclass
class Projection:
    """Forward projection over consecutive months with summary figures."""

    months: List[ProjectedMonth] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((m.total for m in self.months), Decimal("0"))

    @property
    def average(self) -> Decimal:
        if not self.months:
            return Decimal("0")
        return self.total / len(self.months)
