"""Expense aggregation: daily breakdowns and grouped summaries over a day range."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from ..constants import CENT, UNKNOWN_CATEGORY_NAME
from ..domain.repositories import ExpenseRepository, ExpenseRow
from ..errors import InvalidArgument
from ..logging_config import get_logger

logger = get_logger(__name__)

GROUP_BY_CHOICES = ("category", "month", "type")
DEFAULT_GROUP_BY = "type"
ZERO = Decimal("0.00")


def format_money(value: Decimal) -> str:
    return str(Decimal(value).quantize(CENT))


def _total(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def _check_group_by(group_by: str) -> str:
    if group_by not in GROUP_BY_CHOICES:
        raise InvalidArgument(
            f"groupBy must be one of: {', '.join(GROUP_BY_CHOICES)}",
            fields={"groupBy": [f"Unsupported grouping '{group_by}'."]},
        )
    return group_by


def _category_label(row: ExpenseRow) -> tuple[Optional[str], Optional[str]]:
    """Return (name, type) of the joined category, or Unknown for dangling references."""

    _, category = row
    if category is None:
        return UNKNOWN_CATEGORY_NAME, None
    return category.name, category.category_type


@dataclass(slots=True)
class DailyGroup:
    category_id: int
    category_name: str
    category_type: Optional[str]
    total_amount: Decimal = ZERO
    expenses: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "categoryId": self.category_id,
            "categoryName": self.category_name,
            "categoryType": self.category_type,
            "totalAmount": format_money(self.total_amount),
            "expenses": self.expenses,
        }


@dataclass(slots=True)
class DailyReport:
    day: date
    total: Decimal
    groups: list[DailyGroup]

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "totalDailySpend": format_money(self.total),
            "dailyExpenses": [group.to_dict() for group in self.groups],
        }


@dataclass(slots=True)
class SummaryReport:
    start: date
    end: date
    group_by: str
    total: Decimal
    groups: list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        report = []
        for group in self.groups:
            entry = dict(group)
            entry["totalAmount"] = format_money(entry["totalAmount"])
            report.append(entry)
        return {
            "startDate": self.start.isoformat(),
            "endDate": self.end.isoformat(),
            "groupBy": self.group_by,
            "totalOverallSpend": format_money(self.total),
            "report": report,
        }


def build_daily_report(day: date, rows: Iterable[ExpenseRow]) -> DailyReport:
    """Group one day's expenses by category, keeping the constituent expenses."""

    groups: dict[tuple[int, str, Optional[str]], DailyGroup] = {}
    for row in rows:
        expense, _ = row
        if expense.spent_on != day:
            continue
        name, category_type = _category_label(row)
        key = (expense.category_id, name, category_type)
        group = groups.get(key)
        if group is None:
            group = groups[key] = DailyGroup(
                category_id=expense.category_id,
                category_name=name,
                category_type=category_type,
            )
        group.total_amount += expense.amount
        group.expenses.append(
            {
                "id": expense.id,
                "description": expense.description,
                "amount": format_money(expense.amount),
                "date": expense.spent_on.isoformat(),
                "paymentMethod": expense.payment_method,
                "isBusinessCreditPaid": expense.is_business_credit_paid,
                "type": expense.expense_type,
            }
        )

    ordered = sorted(
        groups.values(),
        key=lambda g: (g.category_type or "", g.category_name, g.category_id),
    )
    return DailyReport(day=day, total=_total(g.total_amount for g in ordered), groups=ordered)


def summarize(rows: Iterable[ExpenseRow], group_by: str) -> list[dict[str, Any]]:
    """Roll up expense totals by category, month or type.

    Totals are exact ``Decimal`` sums; ordering follows the grouping key
    (category: largest first, month: chronological, type: alphabetical).
    """

    _check_group_by(group_by)

    totals: dict[tuple, Decimal] = defaultdict(lambda: ZERO)
    names: dict[int, str] = {}
    for row in rows:
        expense, _ = row
        if group_by == "category":
            key: tuple = (expense.category_id, expense.expense_type)
            names[expense.category_id] = _category_label(row)[0]
        elif group_by == "month":
            key = (expense.spent_on.year, expense.spent_on.month, expense.expense_type)
        else:
            key = (expense.expense_type,)
        totals[key] += expense.amount

    if group_by == "category":
        groups = [
            {
                "categoryId": category_id,
                "categoryName": names[category_id],
                "categoryType": expense_type,
                "totalAmount": total,
            }
            for (category_id, expense_type), total in totals.items()
        ]
        groups.sort(key=lambda g: (-g["totalAmount"], g["categoryName"], g["categoryId"]))
    elif group_by == "month":
        groups = [
            {"year": year, "month": month, "type": expense_type, "totalAmount": total}
            for (year, month, expense_type), total in totals.items()
        ]
        groups.sort(key=lambda g: (g["year"], g["month"], g["type"]))
    else:
        groups = [
            {"type": expense_type, "totalAmount": total}
            for (expense_type,), total in totals.items()
        ]
        groups.sort(key=lambda g: g["type"])
    return groups


def build_summary_report(
    start: date, end: date, rows: Iterable[ExpenseRow], group_by: str | None = None
) -> SummaryReport:
    group_by = (group_by or DEFAULT_GROUP_BY).strip().lower()
    if start > end:
        raise InvalidArgument("startDate must not be after endDate.")
    in_range = [row for row in rows if start <= row[0].spent_on <= end]
    groups = summarize(in_range, group_by)
    return SummaryReport(
        start=start,
        end=end,
        group_by=group_by,
        total=_total(group["totalAmount"] for group in groups),
        groups=groups,
    )


def daily_report(expenses: ExpenseRepository, *, user_id: int, day: date) -> DailyReport:
    """Load and aggregate a single calendar day for one owner."""

    rows = expenses.search(user_id=user_id, start_date=day, end_date=day)
    report = build_daily_report(day, rows)
    logger.info(
        "Daily report built",
        extra={"user_id": user_id, "day": day.isoformat(), "groups": len(report.groups)},
    )
    return report


def summary_report(
    expenses: ExpenseRepository,
    *,
    user_id: int,
    start: date,
    end: date,
    group_by: str | None = None,
) -> SummaryReport:
    """Load and aggregate an inclusive day range for one owner."""

    normalized = _check_group_by((group_by or DEFAULT_GROUP_BY).strip().lower())
    if start > end:
        raise InvalidArgument("startDate must not be after endDate.")
    rows = expenses.search(user_id=user_id, start_date=start, end_date=end)
    report = build_summary_report(start, end, rows, normalized)
    logger.info(
        "Summary report built",
        extra={
            "user_id": user_id,
            "group_by": normalized,
            "start": start.isoformat(),
            "end": end.isoformat(),
        },
    )
    return report
