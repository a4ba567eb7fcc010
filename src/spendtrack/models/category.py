"""Expense category definitions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .expense import Expense
    from .user import User


class Category(SQLModel, table=True):
    """Owner-scoped category; a user cannot hold two with the same name and type."""

    __tablename__: ClassVar[str] = "category"
    __table_args__ = (
        UniqueConstraint("user_id", "name", "category_type", name="uq_category_owner_name_type"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(index=True, nullable=False, max_length=64)
    category_type: str = Field(default="personal", nullable=False, max_length=16)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    expenses: list["Expense"] = Relationship(
        back_populates="category",
        sa_relationship=relationship("Expense", back_populates="category"),
    )

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="categories"))

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.category_type,
            "ownerId": self.user_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
