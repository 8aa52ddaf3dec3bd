"""Record stores for expenses.

ExpenseService only talks to the small interface defined by ExpenseStore, so
it runs the same against SQLite or a plain in-memory dict.
"""

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Protocol

from models.expense import Expense

# SQL Query Constants
_EXPENSE_FIELDS = """id, name, value, category, due_date, type, total_installments,
    paid_installments, status, parent_expense_id, created_at"""

# Automatically generate placeholders from field count
_EXPENSE_PLACEHOLDERS = f"({', '.join(['?'] * len(_EXPENSE_FIELDS.split(',')))})"


class ExpenseStore(Protocol):
    """Storage operations required by the expense services."""

    def get(self, expense_id: str) -> Optional[Expense]: ...

    def list(self) -> List[Expense]: ...

    def put(self, expense: Expense) -> Expense: ...

    def put_many(self, expenses: List[Expense]) -> int: ...

    def delete(self, expense_id: str) -> bool: ...

    def delete_many(self, expense_ids: Iterable[str]) -> int: ...


class SqliteExpenseStore:
    """Expense store backed by the SQLite `expenses` table."""

    def __init__(self, db_manager):
        """Initialize the store.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def get(self, expense_id: str) -> Optional[Expense]:
        """Get a single expense by ID, or None if it does not exist."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_EXPENSE_FIELDS} FROM expenses WHERE id = ?",
                (expense_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_expense(row)
            return None

    def list(self) -> List[Expense]:
        """Get every stored expense ordered by due date (newest first)."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_EXPENSE_FIELDS}
                FROM expenses
                ORDER BY due_date DESC, id
                """
            )
            return [self._row_to_expense(row) for row in cursor.fetchall()]

    def put(self, expense: Expense) -> Expense:
        """Insert or replace a single expense."""
        self.put_many([expense])
        return expense

    def put_many(self, expenses: List[Expense]) -> int:
        """Insert or replace several expenses in a single transaction.

        Args:
            expenses: Expense objects to write.

        Returns:
            Number of expenses written.

        Raises:
            sqlite3.Error: If the write fails. Nothing is written in that case.
        """
        if not expenses:
            return 0

        with self.db_manager.connect() as conn:
            try:
                conn.executemany(
                    f"""
                    INSERT OR REPLACE INTO expenses ({_EXPENSE_FIELDS})
                    VALUES {_EXPENSE_PLACEHOLDERS}
                    """,
                    [self._expense_to_row(e) for e in expenses],
                )
                conn.commit()
            except Exception:
                conn.rollback()
                raise

        return len(expenses)

    def delete(self, expense_id: str) -> bool:
        """Delete an expense by ID.

        Returns:
            True if the expense was deleted, False if not found.
        """
        return self.delete_many([expense_id]) > 0

    def delete_many(self, expense_ids: Iterable[str]) -> int:
        """Delete several expenses in a single transaction.

        Returns:
            Number of rows removed.
        """
        ids = [(expense_id,) for expense_id in expense_ids]
        if not ids:
            return 0

        with self.db_manager.connect() as conn:
            try:
                cursor = conn.executemany("DELETE FROM expenses WHERE id = ?", ids)
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            return cursor.rowcount

    @staticmethod
    def _expense_to_row(expense: Expense) -> tuple:
        return (
            expense.id,
            expense.name,
            str(expense.value),
            expense.category,
            expense.due_date.isoformat(),
            expense.type,
            expense.total_installments,
            expense.paid_installments,
            expense.status,
            expense.parent_expense_id,
            expense.created_at.isoformat(),
        )

    @staticmethod
    def _row_to_expense(row) -> Expense:
        """Convert a database row to an Expense object."""
        return Expense(
            id=row[0],
            name=row[1],
            value=Decimal(row[2]),
            category=row[3],
            due_date=date.fromisoformat(row[4]),
            type=row[5],
            total_installments=row[6],
            paid_installments=row[7] or 0,
            status=row[8],
            parent_expense_id=row[9],
            created_at=datetime.fromisoformat(row[10]),
        )


class MemoryExpenseStore:
    """Expense store holding records in a dict, for tests and throwaway runs."""

    def __init__(self):
        self._records: Dict[str, Expense] = {}

    def get(self, expense_id: str) -> Optional[Expense]:
        expense = self._records.get(expense_id)
        return replace(expense) if expense else None

    def list(self) -> List[Expense]:
        # Two stable sorts give due date descending with id as tie-break
        records = sorted(
            (replace(e) for e in self._records.values()), key=lambda e: e.id
        )
        return sorted(records, key=lambda e: e.due_date, reverse=True)

    def put(self, expense: Expense) -> Expense:
        self._records[expense.id] = replace(expense)
        return expense

    def put_many(self, expenses: List[Expense]) -> int:
        for expense in expenses:
            self._records[expense.id] = replace(expense)
        return len(expenses)

    def delete(self, expense_id: str) -> bool:
        return self._records.pop(expense_id, None) is not None

    def delete_many(self, expense_ids: Iterable[str]) -> int:
        return sum(1 for expense_id in expense_ids if self.delete(expense_id))
