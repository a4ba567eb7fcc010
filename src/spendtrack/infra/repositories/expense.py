"""SQLModel implementation of Expense repository."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import update
from sqlmodel import select

from ...constants import ExpenseType, PaymentMethod, is_storable_id
from ...domain.repositories.expense import ExpenseRow
from ...models.category import Category
from ...models.expense import Expense
from ..database import SessionFactory


class SQLModelExpenseRepository:
    """SQLModel-based expense repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    @staticmethod
    def _joined():
        return select(Expense, Category).join(
            Category, Category.id == Expense.category_id, isouter=True  # type: ignore
        )

    def get_by_id(self, expense_id: int, *, user_id: int) -> Optional[Expense]:
        """Retrieve an expense by ID."""
        if not is_storable_id(expense_id):
            return None
        with self.session_factory() as session:
            obj = session.exec(
                select(Expense).where(Expense.id == expense_id).where(Expense.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_row(self, expense_id: int, *, user_id: int) -> Optional[ExpenseRow]:
        """Retrieve an expense and its (possibly missing) category."""
        if not is_storable_id(expense_id):
            return None
        with self.session_factory() as session:
            row = session.exec(
                self._joined().where(Expense.id == expense_id).where(Expense.user_id == user_id)
            ).first()
            session.expunge_all()
            if row is None:
                return None
            return row[0], row[1]

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
        """Filter expenses; both date bounds are inclusive calendar days."""
        with self.session_factory() as session:
            statement = self._joined().where(Expense.user_id == user_id)

            if start_date is not None:
                statement = statement.where(Expense.spent_on >= start_date)
            if end_date is not None:
                statement = statement.where(Expense.spent_on <= end_date)
            if category_id is not None:
                statement = statement.where(Expense.category_id == category_id)
            if expense_type:
                statement = statement.where(Expense.expense_type == expense_type)
            if payment_method:
                statement = statement.where(Expense.payment_method == payment_method)
            if is_business_credit_paid is not None:
                statement = statement.where(
                    Expense.is_business_credit_paid == is_business_credit_paid
                )

            statement = statement.order_by(
                Expense.spent_on.desc(),  # type: ignore
                Expense.created_at.desc(),  # type: ignore
                Expense.id.desc(),  # type: ignore
            )
            rows = [(expense, category) for expense, category in session.exec(statement).all()]
            session.expunge_all()
            return rows

    def list_unpaid_business_credits(self, *, user_id: int) -> list[ExpenseRow]:
        """Business expenses paid with store credit that are still outstanding."""
        return self.search(
            user_id=user_id,
            expense_type=ExpenseType.BUSINESS.value,
            payment_method=PaymentMethod.STORE_CREDIT.value,
            is_business_credit_paid=False,
        )

    def create(self, expense: Expense, *, user_id: int) -> Expense:
        """Create a new expense."""
        with self.session_factory() as session:
            expense.user_id = user_id
            session.add(expense)
            session.commit()
            session.refresh(expense)
            session.expunge(expense)
            return expense

    def update(self, expense: Expense, *, user_id: int) -> Expense:
        """Update an existing expense."""
        with self.session_factory() as session:
            expense.user_id = user_id
            expense.updated_at = datetime.now(timezone.utc)
            merged = session.merge(expense)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, expense_id: int, *, user_id: int) -> bool:
        """Delete an expense by ID."""
        if not is_storable_id(expense_id):
            return False
        with self.session_factory() as session:
            expense = session.exec(
                select(Expense).where(Expense.id == expense_id).where(Expense.user_id == user_id)
            ).first()
            if expense is None:
                return False
            session.delete(expense)
            session.commit()
            return True

    def mark_credits_paid(
        self,
        expense_ids: Iterable[int],
        *,
        user_id: int,
        paid_with_method: Optional[str],
        paid_at: datetime,
    ) -> int:
        """Settle qualifying credits with a single conditional UPDATE.

        The ``is_business_credit_paid = false`` predicate is evaluated by the
        database inside the UPDATE, so two concurrent calls cannot both apply
        the transition to the same row.
        """
        ids = sorted({int(expense_id) for expense_id in expense_ids})
        ids = [expense_id for expense_id in ids if is_storable_id(expense_id)]
        if not ids:
            return 0
        statement = (
            update(Expense)
            .where(Expense.id.in_(ids))  # type: ignore
            .where(Expense.user_id == user_id)
            .where(Expense.expense_type == ExpenseType.BUSINESS.value)
            .where(Expense.payment_method == PaymentMethod.STORE_CREDIT.value)
            .where(Expense.is_business_credit_paid == False)  # noqa: E712
            .values(
                is_business_credit_paid=True,
                paid_with_method=paid_with_method,
                paid_at=paid_at,
                updated_at=datetime.now(timezone.utc),
            )
        )
        with self.session_factory() as session:
            result = session.connection().execute(statement)
            session.commit()
            return result.rowcount
