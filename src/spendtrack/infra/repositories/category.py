"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ...constants import is_storable_id
from ...errors import CategoryInUse, DuplicateCategory
from ...models.category import Category
from ...models.expense import Expense
from ..database import SessionFactory


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        if not is_storable_id(category_id):
            return None
        with self.session_factory() as session:
            obj = session.exec(
                select(Category).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Category]:
        """List all categories."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(Category.user_id == user_id)
                .order_by(Category.name, Category.category_type)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_by_type(self, category_type: str, *, user_id: int) -> list[Category]:
        """List categories filtered by type (personal/business)."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(Category.user_id == user_id)
                .where(Category.category_type == category_type)
                .order_by(Category.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a new category; a repeated (name, type) raises DuplicateCategory."""
        try:
            with self.session_factory() as session:
                category.user_id = user_id
                session.add(category)
                session.commit()
                session.refresh(category)
                session.expunge(category)
                return category
        except IntegrityError as exc:
            raise DuplicateCategory() from exc

    @staticmethod
    def _expense_count(session, category_id: int) -> int:
        return session.exec(
            select(func.count(Expense.id)).where(Expense.category_id == category_id)  # type: ignore
        ).one()

    def update(
        self,
        category_id: int,
        *,
        user_id: int,
        name: Optional[str] = None,
        category_type: Optional[str] = None,
    ) -> Optional[Category]:
        """Update name and/or type; fields left as None keep their value.

        The type of a category that expenses still use cannot change, since
        every expense must share its category's type.
        """
        if not is_storable_id(category_id):
            return None
        try:
            with self.session_factory() as session:
                category = session.exec(
                    select(Category).where(Category.id == category_id, Category.user_id == user_id)
                ).first()
                if category is None:
                    return None
                if name:
                    category.name = name
                if category_type and category_type != category.category_type:
                    if self._expense_count(session, category_id):
                        raise CategoryInUse(
                            "Category is still used by expenses and its type cannot change."
                        )
                    category.category_type = category_type
                session.add(category)
                session.commit()
                session.refresh(category)
                session.expunge(category)
                return category
        except IntegrityError as exc:
            raise DuplicateCategory() from exc

    def delete(self, category_id: int, *, user_id: int) -> bool:
        """Delete a category by ID.

        Categories still referenced by expenses are kept and CategoryInUse is raised.
        """
        if not is_storable_id(category_id):
            return False
        with self.session_factory() as session:
            category = session.exec(
                select(Category).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            if category is None:
                return False
            if self._expense_count(session, category_id):
                raise CategoryInUse()
            session.delete(category)
            session.commit()
            return True
