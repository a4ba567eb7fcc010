"""Expense repository protocol."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol

from ...models.category import Category
from ...models.expense import Expense

ExpenseRow = tuple[Expense, Optional[Category]]


class ExpenseRepository(Protocol):
    """Repository for expenses; read methods return rows joined with their category."""

    def get_by_id(self, expense_id: int, *, user_id: int) -> Optional[Expense]:
        """Retrieve an expense by ID."""
        ...

    def get_row(self, expense_id: int, *, user_id: int) -> Optional[ExpenseRow]:
        """Retrieve an expense together with its category."""
        ...

    def search(
        self,
        *,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        expense_type: Optional[str] = None,
        payment_method: Optional[str] = None,
        is_business_credit_paid: Optional[bool] = None,
    ) -> list[ExpenseRow]:
        """Filter expenses, newest first."""
        ...

    def list_unpaid_business_credits(self, *, user_id: int) -> list[ExpenseRow]:
        """Business expenses paid with store credit that are not settled yet."""
        ...

    def create(self, expense: Expense, *, user_id: int) -> Expense:
        """Create a new expense."""
        ...

    def update(self, expense: Expense, *, user_id: int) -> Expense:
        """Persist changes to an existing expense."""
        ...

    def delete(self, expense_id: int, *, user_id: int) -> bool:
        """Delete an expense by ID; returns False when nothing matched."""
        ...

    def mark_credits_paid(
        self,
        expense_ids: Iterable[int],
        *,
        user_id: int,
        paid_with_method: Optional[str],
        paid_at: datetime,
    ) -> int:
        """Atomically settle the qualifying unpaid business credits; returns rows changed."""
        ...
