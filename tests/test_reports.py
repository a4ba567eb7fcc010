"""Tests for the daily and summary aggregation engine."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from spendtrack.errors import InvalidArgument
from spendtrack.models import Category, Expense
from spendtrack.services import reports


def _row(
    amount: str,
    *,
    category: Category | None,
    category_id: int | None = None,
    spent_on: date = date(2024, 3, 1),
    expense_type: str = "personal",
    expense_id: int = 1,
):
    expense = Expense(
        id=expense_id,
        user_id=1,
        amount=Decimal(amount),
        category_id=category_id if category_id is not None else category.id,
        expense_type=expense_type,
        spent_on=spent_on,
        payment_method="Cash",
    )
    return expense, category


FOOD = Category(id=1, user_id=1, name="Food", category_type="personal")
TRAVEL = Category(id=2, user_id=1, name="Travel", category_type="business")
RENT = Category(id=3, user_id=1, name="Rent", category_type="personal")


def test_daily_example_single_category():
    rows = [_row("10.50", category=FOOD, expense_id=1), _row("5.25", category=FOOD, expense_id=2)]

    report = reports.build_daily_report(date(2024, 3, 1), rows).to_dict()

    assert report["date"] == "2024-03-01"
    assert report["totalDailySpend"] == "15.75"
    assert len(report["dailyExpenses"]) == 1
    group = report["dailyExpenses"][0]
    assert group["categoryName"] == "Food"
    assert group["totalAmount"] == "15.75"
    assert [e["id"] for e in group["expenses"]] == [1, 2]


def test_daily_groups_sorted_by_type_then_name():
    rows = [
        _row("1.00", category=TRAVEL, expense_type="business", expense_id=1),
        _row("2.00", category=RENT, expense_id=2),
        _row("3.00", category=FOOD, expense_id=3),
    ]

    report = reports.build_daily_report(date(2024, 3, 1), rows)

    assert [(g.category_type, g.category_name) for g in report.groups] == [
        ("business", "Travel"),
        ("personal", "Food"),
        ("personal", "Rent"),
    ]
    assert report.total == Decimal("6.00")


def test_daily_ignores_other_days():
    rows = [
        _row("1.00", category=FOOD, expense_id=1),
        _row("9.00", category=FOOD, spent_on=date(2024, 3, 2), expense_id=2),
    ]

    report = reports.build_daily_report(date(2024, 3, 1), rows)

    assert report.total == Decimal("1.00")


def test_empty_day_reports_zero():
    report = reports.build_daily_report(date(2024, 3, 1), []).to_dict()

    assert report == {"date": "2024-03-01", "totalDailySpend": "0.00", "dailyExpenses": []}


def test_dangling_category_is_labelled_unknown():
    rows = [_row("4.00", category=None, category_id=42)]

    daily = reports.build_daily_report(date(2024, 3, 1), rows)
    summary = reports.summarize(rows, "category")

    assert daily.groups[0].category_name == "Unknown"
    assert daily.groups[0].category_type is None
    assert summary[0]["categoryName"] == "Unknown"


def test_decimal_totals_are_exact():
    rows = [_row("0.10", category=FOOD, expense_id=i) for i in range(3)]

    report = reports.build_daily_report(date(2024, 3, 1), rows)

    assert report.total == Decimal("0.30")
    assert report.to_dict()["totalDailySpend"] == "0.30"


def test_summary_by_category_orders_largest_first():
    rows = [
        _row("5.00", category=FOOD, expense_id=1),
        _row("20.00", category=RENT, expense_id=2),
        _row("7.50", category=FOOD, expense_id=3),
    ]

    groups = reports.summarize(rows, "category")

    assert [(g["categoryName"], g["totalAmount"]) for g in groups] == [
        ("Rent", Decimal("20.00")),
        ("Food", Decimal("12.50")),
    ]


def test_summary_by_month_is_chronological():
    rows = [
        _row("1.00", category=FOOD, spent_on=date(2024, 2, 10), expense_id=1),
        _row("2.00", category=FOOD, spent_on=date(2024, 1, 5), expense_id=2),
        _row("3.00", category=TRAVEL, expense_type="business", spent_on=date(2024, 1, 9), expense_id=3),
    ]

    groups = reports.summarize(rows, "month")

    assert [(g["year"], g["month"], g["type"]) for g in groups] == [
        (2024, 1, "business"),
        (2024, 1, "personal"),
        (2024, 2, "personal"),
    ]


def test_summary_by_type():
    rows = [
        _row("1.00", category=FOOD, expense_id=1),
        _row("2.00", category=TRAVEL, expense_type="business", expense_id=2),
        _row("3.00", category=RENT, expense_id=3),
    ]

    groups = reports.summarize(rows, "type")

    assert groups == [
        {"type": "business", "totalAmount": Decimal("2.00")},
        {"type": "personal", "totalAmount": Decimal("4.00")},
    ]


@pytest.mark.parametrize("group_by", ["category", "month", "type"])
def test_group_totals_sum_to_overall(group_by):
    rows = [
        _row("10.50", category=FOOD, expense_id=1),
        _row("5.25", category=TRAVEL, expense_type="business", spent_on=date(2024, 3, 9), expense_id=2),
        _row("0.01", category=RENT, spent_on=date(2024, 4, 1), expense_id=3),
    ]

    report = reports.build_summary_report(date(2024, 3, 1), date(2024, 4, 30), rows, group_by)

    assert sum((g["totalAmount"] for g in report.groups), Decimal("0")) == report.total
    assert report.total == Decimal("15.76")
    payload = report.to_dict()
    assert payload["groupBy"] == group_by
    assert payload["totalOverallSpend"] == "15.76"


def test_summary_defaults_to_type_and_rejects_unknown_keys():
    report = reports.build_summary_report(date(2024, 3, 1), date(2024, 3, 31), [])

    assert report.group_by == "type"
    assert report.to_dict()["report"] == []
    with pytest.raises(InvalidArgument):
        reports.summarize([], "weekday")


def test_summary_rejects_inverted_range():
    with pytest.raises(InvalidArgument):
        reports.build_summary_report(date(2024, 3, 2), date(2024, 3, 1), [])


def test_db_backed_reports(category_factory, expense_factory, expense_repo, user):
    food = category_factory("Food")
    expense_factory(amount="10.50", category=food, spent_on=date(2024, 3, 1))
    expense_factory(amount="5.25", category=food, spent_on=date(2024, 3, 1))
    expense_factory(amount="99.00", category=food, spent_on=date(2024, 3, 2))

    daily = reports.daily_report(expense_repo, user_id=user.id, day=date(2024, 3, 1))
    summary = reports.summary_report(
        expense_repo, user_id=user.id, start=date(2024, 3, 1), end=date(2024, 3, 31), group_by="Category"
    )

    assert daily.to_dict()["totalDailySpend"] == "15.75"
    assert summary.group_by == "category"
    assert summary.total == Decimal("114.75")
