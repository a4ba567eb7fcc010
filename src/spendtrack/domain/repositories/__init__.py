"""Repository protocols decoupling services from SQLModel."""

from .category import CategoryRepository
from .expense import ExpenseRepository, ExpenseRow

__all__ = [
    "CategoryRepository",
    "ExpenseRepository",
    "ExpenseRow",
]
