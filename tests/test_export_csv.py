"""Tests for CSV export helpers and the export command."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path

from spendtrack.models import Expense
from spendtrack.services import export_csv


def _read(path: Path) -> list[dict]:
    with path.open(newline="", encoding="utf-8") as fh:
        return list(csv.DictReader(fh))


def test_export_expenses_csv_creates_file(tmp_path, category_factory, expense_factory, expense_repo, user):
    food = category_factory("Food")
    expense_factory(amount="10.5", category=food, description="Lunch, with client")
    expense_factory(amount="2", category=food, spent_on=date(2024, 3, 2))

    output_path = Path(tmp_path) / "nested" / "expenses.csv"
    written = export_csv.export_expenses_csv(
        rows=expense_repo.search(user_id=user.id), output_path=output_path
    )

    assert written == output_path
    rows = _read(output_path)
    assert [row["amount"] for row in rows] == ["2.00", "10.50"]
    assert rows[1]["description"] == "Lunch, with client"
    assert rows[1]["category"] == "Food"
    assert rows[1]["business_credit_paid"] == "true"
    assert rows[1]["paid_date"] == ""
    with output_path.open(encoding="utf-8") as fh:
        assert fh.readline().strip() == ",".join(export_csv.HEADERS)


def test_export_dangling_category(tmp_path):
    expense = Expense(
        id=1,
        user_id=1,
        amount=1,
        category_id=5,
        expense_type="personal",
        spent_on=date(2024, 3, 1),
        payment_method="Cash",
    )

    path = export_csv.export_expenses_csv(rows=[(expense, None)], output_path=tmp_path / "x.csv")

    assert _read(path)[0]["category"] == "Unknown"


def test_cli_export_command(app, tmp_path, make_category, make_expense):
    make_expense(make_category("Food"), amount="4.20")
    output = tmp_path / "cli.csv"

    result = app.test_cli_runner().invoke(
        args=["spendtrack-export", "--email", "alice@example.com", "--output", str(output)]
    )

    assert result.exit_code == 0, result.output
    assert "Exported 1 expenses" in result.output
    assert _read(output)[0]["amount"] == "4.20"


def test_cli_export_unknown_user(app, tmp_path):
    result = app.test_cli_runner().invoke(
        args=["spendtrack-export", "--email", "ghost@example.com", "--output", str(tmp_path / "x.csv")]
    )

    assert result.exit_code != 0
    assert "No user registered" in result.output


def test_cli_init_db(app):
    result = app.test_cli_runner().invoke(args=["spendtrack-init-db"])

    assert result.exit_code == 0
    assert "Database ready" in result.output
