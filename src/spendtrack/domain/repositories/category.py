"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing owner-scoped category entities."""

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        ...

    def list_all(self, *, user_id: int) -> list[Category]:
        """List all categories ordered by name."""
        ...

    def list_by_type(self, category_type: str, *, user_id: int) -> list[Category]:
        """List categories filtered by type (personal/business)."""
        ...

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a new category."""
        ...

    def update(
        self,
        category_id: int,
        *,
        user_id: int,
        name: Optional[str] = None,
        category_type: Optional[str] = None,
    ) -> Optional[Category]:
        """Apply a partial update; returns None when the category is not owned."""
        ...

    def delete(self, category_id: int, *, user_id: int) -> bool:
        """Delete a category by ID; returns False when nothing matched."""
        ...
