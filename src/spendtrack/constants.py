"""Enumerations shared by models, validators and services."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Optional


class ExpenseType(str, Enum):
    """Whether a category/expense is personal or business."""

    PERSONAL = "personal"
    BUSINESS = "business"

    @classmethod
    def parse(cls, raw: object) -> Optional["ExpenseType"]:
        if raw is None:
            return None
        value = str(raw).strip().lower()
        for member in cls:
            if member.value == value:
                return member
        return None


class PaymentMethod(str, Enum):
    """How an expense was paid."""

    CASH = "Cash"
    CARD = "Card"
    UPI = "UPI"
    BANK_TRANSFER = "Bank Transfer"
    STORE_CREDIT = "Store Credit"

    @classmethod
    def parse(cls, raw: object) -> Optional["PaymentMethod"]:
        """Accept display values ("Bank Transfer") and compact ids ("BankTransfer")."""

        if raw is None:
            return None
        compact = str(raw).replace(" ", "").replace("_", "").lower()
        if not compact:
            return None
        for member in cls:
            if member.value.replace(" ", "").lower() == compact:
                return member
        return None


# Store credit cannot settle itself.
SETTLEMENT_METHODS: tuple[PaymentMethod, ...] = (
    PaymentMethod.CASH,
    PaymentMethod.CARD,
    PaymentMethod.UPI,
    PaymentMethod.BANK_TRANSFER,
)

UNKNOWN_CATEGORY_NAME = "Unknown"
CENT = Decimal("0.01")

# SQLite INTEGER keys are signed 64-bit; larger ids can never match a row.
MAX_DB_ID = 2**63 - 1


def is_storable_id(value: int) -> bool:
    return 0 < value <= MAX_DB_ID
