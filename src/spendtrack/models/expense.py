"""SQLModel definitions for expense records."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ..constants import CENT, ExpenseType, PaymentMethod

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .category import Category
    from .user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_business_credit(expense_type: str, payment_method: str) -> bool:
    """Return True when the combination is tracked as an unsettled payable."""

    return (
        expense_type == ExpenseType.BUSINESS.value
        and payment_method == PaymentMethod.STORE_CREDIT.value
    )


class Expense(SQLModel, table=True):
    """A single owner-scoped expense."""

    __tablename__: ClassVar[str] = "expense"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    amount: Decimal = Field(nullable=False, max_digits=12, decimal_places=2)
    description: Optional[str] = Field(default=None, max_length=255)
    category_id: int = Field(foreign_key="category.id", nullable=False, index=True)
    expense_type: str = Field(default=ExpenseType.PERSONAL.value, nullable=False, max_length=16)
    spent_on: date = Field(nullable=False, index=True)
    payment_method: str = Field(default=PaymentMethod.CASH.value, nullable=False, max_length=32)

    # Business credit settlement; paid_* stay empty until the credit is settled.
    is_business_credit_paid: bool = Field(default=True, nullable=False, index=True)
    paid_with_method: Optional[str] = Field(default=None, max_length=32)
    paid_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    category: "Category | None" = Relationship(
        back_populates="expenses",
        sa_relationship=relationship("Category", back_populates="expenses"),
    )
    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="expenses"))

    def to_dict(self, category: "Category | None" = None) -> dict[str, Any]:
        """Serialise for the JSON API; ``category`` is the joined row, if any."""

        return {
            "id": self.id,
            "ownerId": self.user_id,
            "amount": str(Decimal(self.amount).quantize(CENT)),
            "description": self.description,
            "categoryId": self.category_id,
            "category": (
                {"id": category.id, "name": category.name, "type": category.category_type}
                if category is not None
                else None
            ),
            "type": self.expense_type,
            "date": self.spent_on.isoformat(),
            "paymentMethod": self.payment_method,
            "isBusinessCreditPaid": self.is_business_credit_paid,
            "paidWithMethod": self.paid_with_method,
            "paidDate": self.paid_at.isoformat() if self.paid_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
