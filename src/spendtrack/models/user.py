"""User model supporting authentication."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


class User(SQLModel, table=True):
    """Application user owning categories and expenses."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True, max_length=64)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    password_hash: str = Field(nullable=False, max_length=255)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    last_login: Optional[datetime] = Field(default=None)

    categories = Relationship(
        back_populates="user",
        sa_relationship=relationship("Category", back_populates="user"),
    )
    expenses = Relationship(
        back_populates="user",
        sa_relationship=relationship("Expense", back_populates="user"),
    )

    def to_dict(self) -> dict[str, object]:
        return {"id": self.id, "username": self.username, "email": self.email}
