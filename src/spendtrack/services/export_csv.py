"""CSV export helpers for SpendTrack."""

from __future__ import annotations

import csv
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from ..constants import CENT, UNKNOWN_CATEGORY_NAME
from ..domain.repositories import ExpenseRow

HEADERS = [
    "id",
    "date",
    "amount",
    "description",
    "category",
    "type",
    "payment_method",
    "business_credit_paid",
    "paid_with_method",
    "paid_date",
]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value.quantize(CENT))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def export_expenses_csv(*, rows: Iterable[ExpenseRow], output_path: Path) -> Path:
    """Write expense rows (expense, category) to CSV at `output_path`.

    Columns are deterministic and follow ``HEADERS``. Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for expense, category in rows:
            writer.writerow(
                {
                    "id": _serialize_value(expense.id),
                    "date": _serialize_value(expense.spent_on),
                    "amount": _serialize_value(Decimal(expense.amount)),
                    "description": _serialize_value(expense.description),
                    "category": category.name if category is not None else UNKNOWN_CATEGORY_NAME,
                    "type": _serialize_value(expense.expense_type),
                    "payment_method": _serialize_value(expense.payment_method),
                    "business_credit_paid": _serialize_value(expense.is_business_credit_paid),
                    "paid_with_method": _serialize_value(expense.paid_with_method),
                    "paid_date": _serialize_value(expense.paid_at),
                }
            )

    return output_path
