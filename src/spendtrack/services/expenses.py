"""Expense creation, editing and listing rules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Optional

from ..constants import ExpenseType, PaymentMethod
from ..domain.repositories import CategoryRepository, ExpenseRepository, ExpenseRow
from ..errors import NotFound, ValidationError
from ..logging_config import get_logger
from ..models.category import Category
from ..models.expense import Expense, is_business_credit

if TYPE_CHECKING:  # pragma: no cover - forms live in the blueprint package
    from ..blueprints.expenses.forms import ExpenseForm

logger = get_logger(__name__)


@dataclass
class ExpenseFilters:
    """Filters applied to expense listings."""

    user_id: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[int] = None
    expense_type: Optional[ExpenseType] = None
    payment_method: Optional[PaymentMethod] = None
    is_business_credit_paid: Optional[bool] = None


def _owned_category(
    categories: CategoryRepository, form: ExpenseForm, *, user_id: int
) -> Category:
    """Resolve the form's category for this owner and check the types agree."""

    category = None
    if form.category_id is not None:
        category = categories.get_by_id(form.category_id, user_id=user_id)
    if category is None:
        raise ValidationError(
            "Validation failed",
            fields={"category": ["Category does not exist or is not yours."]},
        )
    if category.category_type != form.expense_type.value:
        raise ValidationError(
            "Validation failed",
            fields={
                "type": [
                    f"Expense type '{form.expense_type.value}' does not match the "
                    f"'{category.category_type}' category."
                ]
            },
        )
    return category


def create_expense(
    form: ExpenseForm,
    *,
    user_id: int,
    expenses: ExpenseRepository,
    categories: CategoryRepository,
) -> ExpenseRow:
    """Validate and persist a new expense, deriving the business credit flag."""

    form.validate_or_raise()
    category = _owned_category(categories, form, user_id=user_id)

    expense = Expense(
        user_id=user_id,
        amount=form.amount,
        description=form.description,
        category_id=category.id,
        expense_type=form.expense_type.value,
        spent_on=form.spent_on,
        payment_method=form.payment_method.value,
        is_business_credit_paid=not is_business_credit(
            form.expense_type.value, form.payment_method.value
        ),
    )
    created = expenses.create(expense, user_id=user_id)
    logger.info(
        "Expense created",
        extra={
            "expense_id": created.id,
            "user_id": user_id,
            "business_credit": not created.is_business_credit_paid,
        },
    )
    return created, category


def update_expense(
    expense_id: int,
    form: ExpenseForm,
    *,
    user_id: int,
    expenses: ExpenseRepository,
    categories: CategoryRepository,
) -> ExpenseRow:
    """Apply a generic edit; settlement state follows the new type/payment method."""

    form.validate_or_raise()
    existing = expenses.get_by_id(expense_id, user_id=user_id)
    if existing is None:
        raise NotFound("Expense not found or not authorized")
    category = _owned_category(categories, form, user_id=user_id)

    was_credit = is_business_credit(existing.expense_type, existing.payment_method)
    now_credit = is_business_credit(form.expense_type.value, form.payment_method.value)

    existing.amount = form.amount
    existing.description = form.description
    existing.category_id = category.id
    existing.expense_type = form.expense_type.value
    existing.spent_on = form.spent_on
    existing.payment_method = form.payment_method.value

    if now_credit and not was_credit:
        existing.is_business_credit_paid = False
        existing.paid_with_method = None
        existing.paid_at = None
    elif not now_credit:
        existing.is_business_credit_paid = True
        existing.paid_with_method = None
        existing.paid_at = None

    updated = expenses.update(existing, user_id=user_id)
    logger.info("Expense updated", extra={"expense_id": expense_id, "user_id": user_id})
    return updated, category


def get_expense(expense_id: int, *, user_id: int, expenses: ExpenseRepository) -> ExpenseRow:
    row = expenses.get_row(expense_id, user_id=user_id)
    if row is None:
        raise NotFound("Expense not found or not authorized")
    return row


def delete_expense(expense_id: int, *, user_id: int, expenses: ExpenseRepository) -> None:
    if not expenses.delete(expense_id, user_id=user_id):
        raise NotFound("Expense not found or not authorized")
    logger.info("Expense deleted", extra={"expense_id": expense_id, "user_id": user_id})


def list_expenses(expenses: ExpenseRepository, filters: ExpenseFilters) -> list[ExpenseRow]:
    """Fetch expenses matching the filters, newest first.

    A start date without an end date selects that single day.
    """

    end_date = filters.end_date
    if filters.start_date is not None and end_date is None:
        end_date = filters.start_date
    return expenses.search(
        user_id=filters.user_id,
        start_date=filters.start_date,
        end_date=end_date,
        category_id=filters.category_id,
        expense_type=filters.expense_type.value if filters.expense_type else None,
        payment_method=filters.payment_method.value if filters.payment_method else None,
        is_business_credit_paid=filters.is_business_credit_paid,
    )
