"""Category CRUD routes."""

from __future__ import annotations

from flask import jsonify, request

from ...constants import ExpenseType
from ...errors import InvalidArgument, NotFound
from ...extensions import category_repository
from ...logging_config import get_logger
from ...models.category import Category
from ..auth.decorators import current_user_id, login_required
from . import bp
from .forms import CategoryForm

logger = get_logger(__name__)


@bp.get("")
@login_required
def list_categories():
    repo = category_repository()
    raw_type = request.args.get("type")
    if raw_type:
        category_type = ExpenseType.parse(raw_type)
        if category_type is None:
            raise InvalidArgument(f"Invalid type: {raw_type!r}")
        categories = repo.list_by_type(category_type.value, user_id=current_user_id())
    else:
        categories = repo.list_all(user_id=current_user_id())
    return jsonify([category.to_dict() for category in categories])


@bp.post("")
@login_required
def create_category():
    form = CategoryForm.from_mapping(request.get_json(silent=True)).validate_or_raise()
    user_id = current_user_id()
    category = category_repository().create(
        Category(name=form.name, category_type=form.category_type.value, user_id=user_id),
        user_id=user_id,
    )
    logger.info("Category created", extra={"category_id": category.id, "user_id": user_id})
    return jsonify(category.to_dict()), 201


@bp.put("/<int:category_id>")
@login_required
def update_category(category_id: int):
    form = CategoryForm.from_mapping(request.get_json(silent=True), partial=True)
    form.validate_or_raise()
    category = category_repository().update(
        category_id,
        user_id=current_user_id(),
        name=form.name,
        category_type=form.category_type.value if form.category_type else None,
    )
    if category is None:
        raise NotFound("Category not found or not authorized")
    return jsonify(category.to_dict())


@bp.delete("/<int:category_id>")
@login_required
def delete_category(category_id: int):
    user_id = current_user_id()
    if not category_repository().delete(category_id, user_id=user_id):
        raise NotFound("Category not found or not authorized")
    logger.info("Category deleted", extra={"category_id": category_id, "user_id": user_id})
    return jsonify({"message": "Category deleted successfully"})
