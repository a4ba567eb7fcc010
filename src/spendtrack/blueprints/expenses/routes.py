"""Expense CRUD, listing and report routes."""

from __future__ import annotations

from typing import Optional

from flask import jsonify, request

from ...constants import ExpenseType, PaymentMethod, is_storable_id
from ...dates import parse_day, parse_range
from ...errors import InvalidArgument, ValidationError
from ...extensions import category_repository, expense_repository
from ...services import expenses as expense_service
from ...services import reports
from ..auth.decorators import current_user_id, login_required
from ..business_credit.routes import settle_many_response
from . import bp
from .forms import ExpenseForm


def _optional_arg(name: str) -> Optional[str]:
    value = request.args.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _filters_from_args(user_id: int) -> expense_service.ExpenseFilters:
    """Translate query-string filters; unknown values are rejected rather than ignored."""

    filters = expense_service.ExpenseFilters(user_id=user_id)

    start = _optional_arg("startDate")
    end = _optional_arg("endDate")
    if start:
        filters.start_date = parse_day(start, field="startDate")
    if end:
        filters.end_date = parse_day(end, field="endDate")
    if filters.start_date and filters.end_date and filters.start_date > filters.end_date:
        raise InvalidArgument("startDate must not be after endDate.")

    category = _optional_arg("category")
    if category:
        try:
            filters.category_id = int(category)
        except ValueError:
            raise InvalidArgument(
                f"Invalid category: {category!r}", fields={"category": ["Must be an id."]}
            ) from None
        if not is_storable_id(filters.category_id):
            raise InvalidArgument(
                f"Invalid category: {category!r}", fields={"category": ["Must be a positive id."]}
            )

    expense_type = _optional_arg("type")
    if expense_type:
        filters.expense_type = ExpenseType.parse(expense_type)
        if filters.expense_type is None:
            raise InvalidArgument(f"Invalid type: {expense_type!r}")

    method = _optional_arg("paymentMethod")
    if method:
        filters.payment_method = PaymentMethod.parse(method)
        if filters.payment_method is None:
            raise InvalidArgument(f"Invalid paymentMethod: {method!r}")

    paid = _optional_arg("isBusinessCreditPaid")
    if paid:
        lowered = paid.lower()
        if lowered not in {"true", "false"}:
            raise InvalidArgument("isBusinessCreditPaid must be 'true' or 'false'.")
        filters.is_business_credit_paid = lowered == "true"
    return filters


@bp.get("")
@login_required
def list_expenses():
    rows = expense_service.list_expenses(
        expense_repository(), _filters_from_args(current_user_id())
    )
    return jsonify([expense.to_dict(category) for expense, category in rows])


@bp.post("")
@login_required
def create_expense():
    form = ExpenseForm.from_mapping(request.get_json(silent=True))
    expense, category = expense_service.create_expense(
        form,
        user_id=current_user_id(),
        expenses=expense_repository(),
        categories=category_repository(),
    )
    return jsonify(expense.to_dict(category)), 201


@bp.get("/<int:expense_id>")
@login_required
def get_expense(expense_id: int):
    expense, category = expense_service.get_expense(
        expense_id, user_id=current_user_id(), expenses=expense_repository()
    )
    return jsonify(expense.to_dict(category))


@bp.put("/<int:expense_id>")
@login_required
def update_expense(expense_id: int):
    form = ExpenseForm.from_mapping(request.get_json(silent=True))
    expense, category = expense_service.update_expense(
        expense_id,
        form,
        user_id=current_user_id(),
        expenses=expense_repository(),
        categories=category_repository(),
    )
    return jsonify(expense.to_dict(category))


@bp.delete("/<int:expense_id>")
@login_required
def delete_expense(expense_id: int):
    expense_service.delete_expense(
        expense_id, user_id=current_user_id(), expenses=expense_repository()
    )
    return jsonify({"message": "Expense deleted successfully"})


@bp.get("/reports/daily/<day>")
@login_required
def daily_report(day: str):
    report = reports.daily_report(
        expense_repository(), user_id=current_user_id(), day=parse_day(day)
    )
    return jsonify(report.to_dict())


@bp.get("/reports/summary")
@login_required
def summary_report():
    start = _optional_arg("startDate")
    end = _optional_arg("endDate")
    if not start or not end:
        missing = {
            name: ["This query parameter is required."]
            for name, value in (("startDate", start), ("endDate", end))
            if not value
        }
        raise ValidationError("startDate and endDate are required.", fields=missing)
    start_day, end_day = parse_range(start, end)
    report = reports.summary_report(
        expense_repository(),
        user_id=current_user_id(),
        start=start_day,
        end=end_day,
        group_by=_optional_arg("groupBy"),
    )
    return jsonify(report.to_dict())


@bp.put("/business-credit/mark-paid")
@login_required
def mark_business_credits_paid():
    return settle_many_response()
