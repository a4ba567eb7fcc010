"""Expense input validation helpers."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ...constants import MAX_DB_ID, ExpenseType, PaymentMethod
from ...dates import parse_day, today_utc
from ...errors import InvalidArgument, ValidationError

MAX_AMOUNT = Decimal("9999999999.99")


@dataclass(slots=True)
class ExpenseForm:
    """Represents expense input prior to validation.

    Settlement fields (``isBusinessCreditPaid``, ``paidWithMethod``,
    ``paidDate``) are not part of the form: they are derived server-side.
    """

    amount: Decimal | None = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    expense_type: ExpenseType = ExpenseType.PERSONAL
    spent_on: date | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ExpenseForm:
        """Create a form populated from a JSON body."""

        form = cls()
        form.load(data if isinstance(data, Mapping) else {})
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        """Bind incoming mapping data; the category may arrive as ``categoryId`` or ``category``."""

        category = data.get("categoryId", data.get("category"))
        if isinstance(category, Mapping):
            category = category.get("id")
        self.raw_data = {
            "amount": data.get("amount"),
            "description": data.get("description"),
            "category": category,
            "type": data.get("type"),
            "date": data.get("date"),
            "paymentMethod": data.get("paymentMethod"),
        }

    def validate(self) -> bool:
        """Validate the bound data and populate typed attributes."""

        self.errors.clear()
        self._validate_amount()
        self._validate_category()

        description = self.raw_data.get("description")
        self.description = str(description).strip() if description is not None else None
        if self.description == "":
            self.description = None
        elif self.description is not None and len(self.description) > 255:
            self._add_error("description", "Description must be 255 characters or fewer.")

        raw_type = self.raw_data.get("type")
        if raw_type in (None, ""):
            self.expense_type = ExpenseType.PERSONAL
        else:
            parsed_type = ExpenseType.parse(raw_type)
            if parsed_type is None:
                self._add_error("type", "Type must be 'personal' or 'business'.")
            else:
                self.expense_type = parsed_type

        raw_method = self.raw_data.get("paymentMethod")
        if raw_method in (None, ""):
            self.payment_method = PaymentMethod.CASH
        else:
            parsed_method = PaymentMethod.parse(raw_method)
            if parsed_method is None:
                choices = ", ".join(method.value for method in PaymentMethod)
                self._add_error("paymentMethod", f"Payment method must be one of: {choices}.")
            else:
                self.payment_method = parsed_method

        raw_date = self.raw_data.get("date")
        if raw_date in (None, ""):
            self.spent_on = today_utc()
        else:
            try:
                self.spent_on = parse_day(raw_date)
            except InvalidArgument:
                self.spent_on = None
                self._add_error("date", "Enter a valid date (YYYY-MM-DD).")

        return not self.errors

    def validate_or_raise(self) -> ExpenseForm:
        if not self.validate():
            raise ValidationError("Validation failed", fields=self.errors)
        return self

    def _validate_amount(self) -> None:
        raw = self.raw_data.get("amount")
        self.amount = None
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            self._add_error("amount", "Amount is required.")
            return
        if isinstance(raw, bool):
            self._add_error("amount", "Enter a valid number for the amount.")
            return
        if isinstance(raw, float) and not math.isfinite(raw):
            self._add_error("amount", "Amount must be a finite number.")
            return
        try:
            value = Decimal(str(raw).strip())
        except (InvalidOperation, TypeError, ValueError):
            self._add_error("amount", "Enter a valid number for the amount.")
            return
        if not value.is_finite():
            self._add_error("amount", "Amount must be a finite number.")
        elif value <= 0:
            self._add_error("amount", "Amount must be greater than zero.")
        elif value > MAX_AMOUNT:
            self._add_error("amount", "Amount is too large.")
        elif value != value.quantize(Decimal("0.01")):
            self._add_error("amount", "Amount may have at most two decimal places.")
        else:
            self.amount = value.quantize(Decimal("0.01"))

    def _validate_category(self) -> None:
        raw = self.raw_data.get("category")
        self.category_id = None
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            self._add_error("category", "Category is required.")
            return
        try:
            parsed = int(str(raw).strip())
        except (TypeError, ValueError):
            self._add_error("category", "Category must be a whole number.")
            return
        if parsed <= 0:
            self._add_error("category", "Category must be greater than zero.")
        elif parsed > MAX_DB_ID:
            self._add_error("category", "Category does not exist.")
        else:
            self.category_id = parsed

    def _add_error(self, field: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field, []).append(message)
