"""Expense model and boundary validation for expense payloads."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

EXPENSE_TYPES = ("fixed", "installment")
EXPENSE_STATUSES = ("paid", "pending", "overdue")

# Payload keys accepted from API-style (camelCase) clients
_FIELD_ALIASES = {
    "dueDate": "due_date",
    "totalInstallments": "total_installments",
    "paidInstallments": "paid_installments",
    "parentExpenseId": "parent_expense_id",
    "createdAt": "created_at",
}

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "value",
        "category",
        "due_date",
        "type",
        "total_installments",
        "paid_installments",
        "status",
        "parent_expense_id",
    }
)


class ValidationError(ValueError):
    """Raised when an expense payload is rejected at the boundary."""


@dataclass
class Expense:
    """A stored expense record.

    Installment series are materialized as one record per installment. The
    first one is the root (parent_expense_id is None); the others point at it.

    Attributes:
        id: Unique identifier (uuid4 hex).
        name: Display label, e.g. "Rent (1/12)" for installments.
        value: Amount of this record. Never divided across installments.
        category: Free-text category label.
        due_date: Date the expense is due.
        type: 'fixed' or 'installment'.
        total_installments: Size of the series, None for fixed expenses.
        paid_installments: Bookkeeping counter, only meaningful on the root.
        status: 'paid', 'pending' or 'overdue'. Only ever set explicitly.
        parent_expense_id: Root id for generated installments, else None.
        created_at: Creation timestamp, never updated.
    """

    id: str
    name: str
    value: Decimal
    category: str
    due_date: date
    type: str
    total_installments: Optional[int] = None
    paid_installments: int = 0
    status: str = "pending"
    parent_expense_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_installment_root(self) -> bool:
        """True for the user-created record of an installment series."""
        return self.type == "installment" and self.parent_expense_id is None

    @property
    def month_key(self) -> str:
        """Calendar month of the due date as YYYY-MM."""
        return f"{self.due_date.year:04d}-{self.due_date.month:02d}"

    def to_dict(self) -> dict:
        """Convert expense to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "value": str(self.value),
            "category": self.category,
            "due_date": self.due_date.isoformat(),
            "type": self.type,
            "total_installments": self.total_installments,
            "paid_installments": self.paid_installments,
            "status": self.status,
            "parent_expense_id": self.parent_expense_id,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class ExpenseInput:
    """Validated payload for creating an expense."""

    name: str
    value: Decimal
    category: str
    due_date: date
    type: str = "fixed"
    total_installments: Optional[int] = None
    status: str = "pending"
    paid_installments: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExpenseInput":
        """Parse and validate a raw creation payload.

        Accepts both snake_case and camelCase keys (dueDate, totalInstallments,
        paidInstallments).

        Args:
            data: Raw mapping, typically decoded JSON or CLI arguments.

        Returns:
            A validated ExpenseInput.

        Raises:
            ValidationError: If any field is missing or malformed.
        """
        fields = _normalize_keys(data)

        expense_type = fields.get("type") or "fixed"
        if expense_type not in EXPENSE_TYPES:
            raise ValidationError(
                f"type must be one of: {', '.join(EXPENSE_TYPES)}"
            )

        total_installments = None
        if expense_type == "installment":
            if fields.get("total_installments") is None:
                raise ValidationError(
                    "total_installments is required for installment expenses"
                )
            total_installments = _parse_positive_int(
                "total_installments", fields["total_installments"]
            )

        status = fields.get("status") or "pending"
        _check_status(status)

        paid_installments = fields.get("paid_installments")
        paid_installments = (
            0
            if paid_installments is None
            else _parse_non_negative_int("paid_installments", paid_installments)
        )

        return cls(
            name=_parse_required_text("name", fields.get("name")),
            value=_parse_value(fields.get("value")),
            category=_parse_required_text("category", fields.get("category")),
            due_date=_parse_date(fields.get("due_date")),
            type=expense_type,
            total_installments=total_installments,
            status=status,
            paid_installments=paid_installments,
        )


def parse_update(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate a partial update payload.

    Only the keys present are validated and returned, converted to their
    model types and snake_case names.

    Raises:
        ValidationError: On unknown or immutable keys, or malformed values.
    """
    fields = _normalize_keys(data)
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(
            f"Fields cannot be updated: {', '.join(sorted(unknown))}"
        )

    parsed: Dict[str, Any] = {}
    for key, raw in fields.items():
        if key in ("name", "category"):
            parsed[key] = _parse_required_text(key, raw)
        elif key == "value":
            parsed[key] = _parse_value(raw)
        elif key == "due_date":
            parsed[key] = _parse_date(raw)
        elif key == "type":
            if raw not in EXPENSE_TYPES:
                raise ValidationError(
                    f"type must be one of: {', '.join(EXPENSE_TYPES)}"
                )
            parsed[key] = raw
        elif key == "status":
            _check_status(raw)
            parsed[key] = raw
        elif key == "total_installments":
            parsed[key] = None if raw is None else _parse_positive_int(key, raw)
        elif key == "paid_installments":
            parsed[key] = _parse_non_negative_int(key, raw)
        elif key == "parent_expense_id":
            parsed[key] = None if raw in (None, "") else str(raw)
    return parsed


def _normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {_FIELD_ALIASES.get(key, key): value for key, value in data.items()}


def _parse_required_text(name: str, raw: Any) -> str:
    if raw is None or not str(raw).strip():
        raise ValidationError(f"{name} is required")
    return str(raw).strip()


def _parse_value(raw: Any) -> Decimal:
    if raw is None or isinstance(raw, bool) or str(raw).strip() == "":
        raise ValidationError("value is required")
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationError(f"value is not a valid decimal: {raw!r}")
    if not value.is_finite():
        raise ValidationError(f"value is not a valid decimal: {raw!r}")
    return value


def _parse_date(raw: Any) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if raw is None or not str(raw).strip():
        raise ValidationError("due_date is required")
    try:
        return date.fromisoformat(str(raw).strip())
    except ValueError:
        raise ValidationError(f"due_date must be an ISO date (YYYY-MM-DD): {raw!r}")


def _parse_int(name: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValidationError(f"{name} must be an integer")
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def _parse_positive_int(name: str, raw: Any) -> int:
    value = _parse_int(name, raw)
    if value < 1:
        raise ValidationError(f"{name} must be a positive integer")
    return value


def _parse_non_negative_int(name: str, raw: Any) -> int:
    value = _parse_int(name, raw)
    if value < 0:
        raise ValidationError(f"{name} cannot be negative")
    return value


def _check_status(status: Any) -> None:
    if status not in EXPENSE_STATUSES:
        raise ValidationError(
            f"status must be one of: {', '.join(EXPENSE_STATUSES)}"
        )
