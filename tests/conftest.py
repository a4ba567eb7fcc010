"""Pytest configuration and shared fixtures for SpendTrack tests.

Provides an isolated SQLite database per test, repository and data factories,
and a Flask test client backed by a temporary data directory.
"""

from __future__ import annotations

import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import create_engine

from spendtrack import create_app
from spendtrack.infra.database import create_session_factory, init_database
from spendtrack.infra.repositories import SQLModelCategoryRepository, SQLModelExpenseRepository
from spendtrack.models import Category, Expense, User
from spendtrack.models.expense import is_business_credit

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: engine with every SpendTrack table created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    init_database(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory with the same commit/rollback semantics as the app."""

    return create_session_factory(db_engine)


@pytest.fixture
def category_repo(session_factory):
    return SQLModelCategoryRepository(session_factory)


@pytest.fixture
def expense_repo(session_factory):
    return SQLModelExpenseRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(session_factory):
    """Factory for persisted users with a placeholder password hash."""

    def _create_user(username: str = "tester", email: str | None = None) -> User:
        with session_factory() as session:
            user = User(
                username=username,
                email=email or f"{username}@example.com",
                password_hash="dummy-hash",
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default owner for scoping data."""

    return user_factory()


@pytest.fixture
def category_factory(category_repo, user):
    """Factory for creating test categories.

    Returns:
        Callable: Function that creates and persists Category instances
    """

    def _create_category(
        name: str = "Groceries",
        category_type: str = "personal",
        owner: User | None = None,
    ) -> Category:
        owner_id = (owner or user).id
        return category_repo.create(
            Category(name=name, category_type=category_type, user_id=owner_id),
            user_id=owner_id,
        )

    return _create_category


@pytest.fixture
def expense_factory(expense_repo, category_factory, user):
    """Factory for creating test expenses; the business credit flag is derived."""

    default_category: dict[str, Category] = {}

    def _create_expense(
        amount: str | Decimal = "10.00",
        category: Category | None = None,
        spent_on: date = date(2024, 3, 1),
        expense_type: str | None = None,
        payment_method: str = "Cash",
        description: str | None = None,
        owner: User | None = None,
    ) -> Expense:
        if category is None:
            if "default" not in default_category:
                default_category["default"] = category_factory()
            category = default_category["default"]
        expense_type = expense_type or category.category_type
        owner_id = (owner or user).id
        expense = Expense(
            user_id=owner_id,
            amount=Decimal(amount),
            description=description,
            category_id=category.id,
            expense_type=expense_type,
            spent_on=spent_on,
            payment_method=payment_method,
            is_business_credit_paid=not is_business_credit(expense_type, payment_method),
        )
        return expense_repo.create(expense, user_id=owner_id)

    return _create_expense


# =============================================================================
# Flask Application Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    db_path = tmp_path / "spendtrack-test.db"
    monkeypatch.setenv("SPENDTRACK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SPENDTRACK_DATABASE_URL", f"sqlite:///{db_path}")
    monkeypatch.setenv("SPENDTRACK_SECRET_KEY", "test-secret")
    monkeypatch.setenv("SPENDTRACK_DEV_MODE", "true")
    return create_app("testing")


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


def _register(
    client, username: str = "alice", email: str = "alice@example.com", password: str = "s3cret-pass"
):
    return client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )


@pytest.fixture()
def auth_client(client):
    """Test client holding the session cookie of a freshly registered user."""

    response = _register(client)
    assert response.status_code == 201
    return client


@pytest.fixture()
def make_category(auth_client):
    def _make(name: str = "Groceries", category_type: str = "personal") -> dict:
        response = auth_client.post("/api/categories", json={"name": name, "type": category_type})
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _make


@pytest.fixture()
def make_expense(auth_client):
    def _make(category: dict, **fields) -> dict:
        payload = {
            "amount": "10.00",
            "categoryId": category["id"],
            "type": category["type"],
            "date": "2024-03-01",
            "paymentMethod": "Cash",
        }
        payload.update(fields)
        response = auth_client.post("/api/expenses", json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _make
