"""Category input validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from ...constants import ExpenseType
from ...errors import ValidationError

MAX_NAME_LENGTH = 64


@dataclass(slots=True)
class CategoryForm:
    """Category input; ``partial`` forms accept any subset of fields."""

    name: Optional[str] = None
    category_type: Optional[ExpenseType] = None
    partial: bool = False
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None, *, partial: bool = False) -> CategoryForm:
        form = cls(partial=partial)
        if not isinstance(data, Mapping):
            data = {}
        form.raw_data = {"name": data.get("name"), "type": data.get("type")}
        return form

    def validate(self) -> bool:
        self.errors.clear()

        raw_name = self.raw_data.get("name")
        name = str(raw_name).strip() if raw_name is not None else ""
        if name:
            if len(name) > MAX_NAME_LENGTH:
                self._add_error("name", f"Name must be {MAX_NAME_LENGTH} characters or fewer.")
            else:
                self.name = name
        elif not self.partial:
            self._add_error("name", "Name is required.")

        raw_type = self.raw_data.get("type")
        if raw_type in (None, ""):
            if not self.partial:
                self._add_error("type", "Type is required.")
        else:
            parsed = ExpenseType.parse(raw_type)
            if parsed is None:
                self._add_error("type", "Type must be 'personal' or 'business'.")
            else:
                self.category_type = parsed

        if self.partial and not self.errors and self.name is None and self.category_type is None:
            self._add_error("name", "Provide a name or type to update.")
        return not self.errors

    def validate_or_raise(self) -> CategoryForm:
        if not self.validate():
            raise ValidationError("Validation failed", fields=self.errors)
        return self

    def _add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)
