"""Outstanding business credits and their settlement."""

from __future__ import annotations

from flask import jsonify, request

from ...dates import parse_timestamp
from ...errors import ValidationError
from ...extensions import expense_repository
from ...services import business_credit
from ..auth.decorators import current_user_id, login_required
from . import bp


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _expense_ids(raw: object) -> list[int]:
    if not isinstance(raw, list) or not raw:
        raise ValidationError(
            "An array of expenseIds is required.",
            fields={"expenseIds": ["Provide a non-empty list of expense ids."]},
        )
    ids: list[int] = []
    for value in raw:
        try:
            if isinstance(value, bool) or not isinstance(value, (int, str)):
                raise TypeError(value)
            ids.append(int(value))
        except (TypeError, ValueError):
            raise ValidationError(
                "An array of expenseIds is required.",
                fields={"expenseIds": [f"Invalid expense id: {value!r}."]},
            ) from None
    return ids


def settle_many_response():
    """Shared by ``PUT /api/business-credits/mark-paid`` and its expenses alias."""

    data = _payload()
    modified = business_credit.settle_many(
        expense_repository(),
        user_id=current_user_id(),
        expense_ids=_expense_ids(data.get("expenseIds")),
        payment_method=business_credit.parse_settlement_method(
            data.get("paymentMethod"), required=False
        ),
        paid_at=parse_timestamp(data.get("paymentDate"), field="paymentDate"),
    )
    return jsonify(
        {
            "message": f"{modified} business credit expenses marked as paid successfully.",
            "modifiedCount": modified,
        }
    )


@bp.get("")
@login_required
def list_unpaid():
    rows = business_credit.list_unpaid(expense_repository(), user_id=current_user_id())
    return jsonify([expense.to_dict(category) for expense, category in rows])


@bp.put("/pay/<int:expense_id>")
@login_required
def pay(expense_id: int):
    data = _payload()
    method = business_credit.parse_settlement_method(data.get("paymentMethod"))
    expense, category = business_credit.settle(
        expense_repository(),
        user_id=current_user_id(),
        expense_id=expense_id,
        payment_method=method,
        paid_at=parse_timestamp(data.get("paymentDate"), field="paymentDate"),
    )
    return jsonify({"message": "Business credit marked as paid", "credit": expense.to_dict(category)})


@bp.put("/mark-paid")
@login_required
def mark_paid():
    return settle_many_response()
