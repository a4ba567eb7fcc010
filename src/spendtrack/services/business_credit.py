"""Business credit ledger: outstanding store-credit payables and their settlement."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from ..constants import SETTLEMENT_METHODS, PaymentMethod
from ..domain.repositories import ExpenseRepository, ExpenseRow
from ..errors import AlreadySettled, NotFound, ValidationError
from ..logging_config import get_logger
from ..models.expense import is_business_credit

logger = get_logger(__name__)


def parse_settlement_method(raw: object, *, required: bool = True) -> Optional[PaymentMethod]:
    """Return the settlement method; Store Credit and unknown values are rejected."""

    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if required:
            raise ValidationError(
                "Validation failed",
                fields={"paymentMethod": ["Payment method is required."]},
            )
        return None
    method = PaymentMethod.parse(raw)
    if method not in SETTLEMENT_METHODS:
        choices = ", ".join(m.value for m in SETTLEMENT_METHODS)
        raise ValidationError(
            "Validation failed",
            fields={"paymentMethod": [f"Settle with one of: {choices}."]},
        )
    return method


def list_unpaid(expenses: ExpenseRepository, *, user_id: int) -> list[ExpenseRow]:
    """Outstanding business credits with their category, newest first."""

    return expenses.list_unpaid_business_credits(user_id=user_id)


def settle(
    expenses: ExpenseRepository,
    *,
    user_id: int,
    expense_id: int,
    payment_method: PaymentMethod,
    paid_at: Optional[datetime] = None,
) -> ExpenseRow:
    """Mark one business credit as paid.

    The transition is a conditional update; when it changes nothing the row
    is re-read only to pick the error to report.
    """

    if payment_method not in SETTLEMENT_METHODS:
        raise ValidationError(
            "Validation failed",
            fields={"paymentMethod": ["Store credit cannot settle a business credit."]},
        )
    paid_at = paid_at or datetime.now(timezone.utc)
    changed = expenses.mark_credits_paid(
        [expense_id],
        user_id=user_id,
        paid_with_method=payment_method.value,
        paid_at=paid_at,
    )

    row = expenses.get_row(expense_id, user_id=user_id)
    if changed == 0:
        if row is None or not is_business_credit(row[0].expense_type, row[0].payment_method):
            raise NotFound("Business credit not found or not authorized")
        raise AlreadySettled()
    if row is None:  # pragma: no cover - deleted between update and read
        raise NotFound("Business credit not found or not authorized")

    logger.info(
        "Business credit settled",
        extra={"user_id": user_id, "expense_id": expense_id, "method": payment_method.value},
    )
    return row


def settle_many(
    expenses: ExpenseRepository,
    *,
    user_id: int,
    expense_ids: Iterable[int],
    payment_method: Optional[PaymentMethod] = None,
    paid_at: Optional[datetime] = None,
) -> int:
    """Settle every qualifying id in one statement; others are skipped silently.

    Raises NotFound when none of the ids qualified.
    """

    ids = list(expense_ids)
    if not ids:
        raise ValidationError(
            "An array of expenseIds is required.",
            fields={"expenseIds": ["Provide at least one expense id."]},
        )
    if payment_method is not None and payment_method not in SETTLEMENT_METHODS:
        raise ValidationError(
            "Validation failed",
            fields={"paymentMethod": ["Store credit cannot settle a business credit."]},
        )
    modified = expenses.mark_credits_paid(
        ids,
        user_id=user_id,
        paid_with_method=payment_method.value if payment_method else None,
        paid_at=paid_at or datetime.now(timezone.utc),
    )
    if modified == 0:
        raise NotFound("No matching unpaid business credit expenses found for these IDs or user.")
    logger.info(
        "Business credits settled in bulk",
        extra={"user_id": user_id, "requested": len(ids), "modified": modified},
    )
    return modified
