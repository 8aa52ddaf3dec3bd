"""Expense service: lifecycle of expense records and installment series."""

import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from dateutil.relativedelta import relativedelta

from logger import get_logger
from models.expense import UPDATABLE_FIELDS, Expense, ExpenseInput

logger = get_logger()


def _new_id() -> str:
    return uuid.uuid4().hex


def installment_name(name: str, number: int, total: int) -> str:
    """Label of one installment, e.g. installment_name("Rent", 1, 12) -> "Rent (1/12)"."""
    return f"{name} ({number}/{total})"


class ExpenseService:
    """Service for managing expenses."""

    def __init__(self, store):
        """Initialize the expense service.

        Args:
            store: Expense store (SqliteExpenseStore, MemoryExpenseStore, ...).
        """
        self.store = store

    def create(self, expense_input: ExpenseInput) -> Expense:
        """Create an expense, expanding installments into one record each.

        A fixed expense is stored as given. An installment expense with N
        installments is stored as N records written together: the returned
        root named "{name} (1/N)" and N-1 children due one calendar month
        apart, each carrying the full value and pointing at the root.

        Args:
            expense_input: Validated creation payload.

        Returns:
            The primary (first) record.

        Raises:
            Exception: If the store fails. No record of the series is kept.
        """
        created_at = datetime.now()
        primary = Expense(
            id=_new_id(),
            name=expense_input.name,
            value=expense_input.value,
            category=expense_input.category,
            due_date=expense_input.due_date,
            type=expense_input.type,
            total_installments=None,
            paid_installments=expense_input.paid_installments,
            status=expense_input.status,
            parent_expense_id=None,
            created_at=created_at,
        )

        if expense_input.type != "installment":
            self.store.put(primary)
            logger.debug(f"Created fixed expense {primary.id} ({primary.name})")
            return primary

        total = expense_input.total_installments
        primary.name = installment_name(expense_input.name, 1, total)
        primary.total_installments = total

        records = [primary]
        for i in range(1, total):
            records.append(
                Expense(
                    id=_new_id(),
                    name=installment_name(expense_input.name, i + 1, total),
                    value=expense_input.value,
                    category=expense_input.category,
                    due_date=expense_input.due_date + relativedelta(months=i),
                    type="installment",
                    total_installments=total,
                    paid_installments=0,
                    status="pending",
                    parent_expense_id=primary.id,
                    created_at=created_at,
                )
            )

        self.store.put_many(records)
        logger.info(
            f"Created installment series {primary.id} ({expense_input.name}) "
            f"with {total} installment(s)"
        )
        return primary

    def update(self, expense_id: str, fields: Dict[str, Any]) -> Optional[Expense]:
        """Apply a partial update to a single expense.

        Other installments of the same series are never touched.

        Args:
            expense_id: ID of the expense to update.
            fields: Field names (snake_case) mapped to their new values.

        Returns:
            The updated Expense, or None if the expense does not exist.

        Raises:
            ValueError: If unsupported field names are provided.
        """
        invalid_fields = set(fields) - UPDATABLE_FIELDS
        if invalid_fields:
            raise ValueError(f"Unsupported field names: {invalid_fields}")

        existing = self.store.get(expense_id)
        if existing is None:
            return None

        updated = replace(existing, **fields)
        self.store.put(updated)
        logger.debug(f"Updated expense {expense_id}: {', '.join(sorted(fields))}")
        return updated

    def delete(self, expense_id: str) -> bool:
        """Delete an expense.

        Deleting the root of an installment series also deletes all of its
        children. Deleting a child only removes that child.

        Args:
            expense_id: ID of the expense to delete.

        Returns:
            True if the expense was deleted, False if not found.
        """
        expense = self.store.get(expense_id)
        if expense is None:
            return False

        ids = [expense_id]
        if expense.is_installment_root:
            ids.extend(child.id for child in self.find_children(expense_id))

        removed = self.store.delete_many(ids)
        logger.info(f"Deleted expense {expense_id} ({removed} record(s) removed)")
        return removed > 0

    def find_all(self) -> List[Expense]:
        """Get all expenses ordered by due date (newest first)."""
        return self.store.list()

    def find(self, expense_id: str) -> Optional[Expense]:
        """Get a single expense by ID.

        Returns:
            Expense object if found, None otherwise.
        """
        return self.store.get(expense_id)

    def find_children(self, parent_id: str) -> List[Expense]:
        """Get the generated installments of a series, ordered by due date."""
        return _oldest_first(
            e for e in self.store.list() if e.parent_expense_id == parent_id
        )

    def find_by_date_range(self, start_date: date, end_date: date) -> List[Expense]:
        """Get expenses due between two dates, both inclusive.

        Args:
            start_date: First due date to include.
            end_date: Last due date to include.

        Returns:
            List of Expense objects ordered by due date (oldest first).
        """
        return _oldest_first(
            e for e in self.store.list() if start_date <= e.due_date <= end_date
        )

    def find_by_status(self, status: str) -> List[Expense]:
        """Get expenses with the given status, ordered by due date (oldest first)."""
        return _oldest_first(e for e in self.store.list() if e.status == status)

    def search(
        self,
        *,
        category: Optional[str] = None,
        status: Optional[str] = None,
        type: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Expense]:
        """Filter expenses; every criterion given must match.

        Returns:
            List of Expense objects ordered by due date (newest first).
        """
        results = []
        for expense in self.store.list():
            if category is not None and expense.category != category:
                continue
            if status is not None and expense.status != status:
                continue
            if type is not None and expense.type != type:
                continue
            if start_date is not None and expense.due_date < start_date:
                continue
            if end_date is not None and expense.due_date > end_date:
                continue
            results.append(expense)
        return results


def _oldest_first(expenses) -> List[Expense]:
    return sorted(expenses, key=lambda e: (e.due_date, e.id))
