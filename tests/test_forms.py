"""Validation tests for expense and category input."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from spendtrack.blueprints.categories.forms import CategoryForm
from spendtrack.blueprints.expenses.forms import ExpenseForm
from spendtrack.constants import ExpenseType, PaymentMethod
from spendtrack.errors import ValidationError


def _form(**overrides) -> ExpenseForm:
    data = {"amount": "12.50", "categoryId": 3, "date": "2024-03-01"}
    data.update(overrides)
    return ExpenseForm.from_mapping(data)


def test_valid_expense_form_populates_typed_fields():
    form = _form(type="business", paymentMethod="Store Credit", description="  Printer ink ")

    assert form.validate() is True
    assert form.amount == Decimal("12.50")
    assert form.category_id == 3
    assert form.expense_type is ExpenseType.BUSINESS
    assert form.payment_method is PaymentMethod.STORE_CREDIT
    assert form.spent_on == date(2024, 3, 1)
    assert form.description == "Printer ink"


def test_defaults_are_personal_cash_today():
    form = ExpenseForm.from_mapping({"amount": 5, "category": {"id": 9}})

    assert form.validate() is True
    assert form.category_id == 9
    assert form.expense_type is ExpenseType.PERSONAL
    assert form.payment_method is PaymentMethod.CASH
    assert form.spent_on is not None
    assert form.description is None


@pytest.mark.parametrize(
    "amount",
    ["", None, "abc", "0", "-3", "1.234", "NaN", "Infinity", float("inf"), True],
)
def test_rejects_bad_amounts(amount):
    form = _form(amount=amount)

    assert form.validate() is False
    assert "amount" in form.errors
    assert form.amount is None


def test_missing_category_and_bad_enums_are_reported_together():
    form = ExpenseForm.from_mapping(
        {"amount": "4", "type": "corporate", "paymentMethod": "Cheque", "date": "yesterday"}
    )

    assert form.validate() is False
    assert set(form.errors) == {"category", "type", "paymentMethod", "date"}


def test_compact_payment_method_ids_are_accepted():
    form = _form(paymentMethod="BankTransfer")

    assert form.validate() is True
    assert form.payment_method is PaymentMethod.BANK_TRANSFER


def test_validate_or_raise_carries_field_errors():
    with pytest.raises(ValidationError) as excinfo:
        _form(amount="-1").validate_or_raise()

    assert excinfo.value.status_code == 400
    assert "amount" in excinfo.value.to_dict()["fields"]


def test_non_mapping_body_is_treated_as_empty():
    form = ExpenseForm.from_mapping(["not", "an", "object"])

    assert form.validate() is False
    assert {"amount", "category"} <= set(form.errors)


def test_category_form_requires_name_and_type():
    form = CategoryForm.from_mapping({})

    assert form.validate() is False
    assert set(form.errors) == {"name", "type"}


def test_category_form_partial_update_accepts_single_field():
    form = CategoryForm.from_mapping({"type": "business"}, partial=True)

    assert form.validate() is True
    assert form.name is None
    assert form.category_type is ExpenseType.BUSINESS


def test_category_form_partial_update_needs_something():
    form = CategoryForm.from_mapping({"name": "   "}, partial=True)

    assert form.validate() is False
    assert "name" in form.errors


def test_category_id_beyond_storage_range_is_rejected():
    form = _form(categoryId=10**30)

    assert form.validate() is False
    assert form.category_id is None
    assert "category" in form.errors
