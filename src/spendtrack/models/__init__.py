"""SQLModel table exports."""

from .category import Category
from .expense import Expense
from .user import User

__all__ = [
    "Category",
    "Expense",
    "User",
]
