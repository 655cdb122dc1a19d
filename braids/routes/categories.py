"""Product categories."""
from __future__ import annotations

from flask import Blueprint, current_app, g

from ..auth import require_admin
from ..errors import NotFound, success
from ..models import Category
from ..rules import ensure_unique_category_name
from ..schemas.categories import CategoriesQuery, CreateCategorySchema, UpdateCategorySchema
from ..schemas.common import IdParams
from ..store import Repository, ordering
from ..validation import validate

bp = Blueprint("categories", __name__)
categories = Repository(Category)


def _get_category(category_id: str) -> Category:
    category = categories.get_active(category_id)
    if category is None:
        raise NotFound("Category not found", "CATEGORY_NOT_FOUND")
    return category


def _list(criteria: list) -> tuple[dict[str, object], int]:
    query = g.query
    if query.search:
        criteria.append(Category.name.ilike(f"%{query.search}%"))
    page = categories.paginate(
        criteria, [ordering(Category, query.order_by, query.sort)], query.page, query.limit
    )
    return success([category.to_dict() for category in page.items], pagination=page.pagination())


@bp.get("/categories")
@validate(query=CategoriesQuery)
def list_categories() -> tuple[dict[str, object], int]:
    """List active categories in display order.
    ---
    tags:
      - Categories
    parameters:
      - name: order_by
        in: query
        type: string
        enum: [name, display_order, created_at]
        default: display_order
      - name: sort
        in: query
        type: string
        enum: [asc, desc]
        default: asc
    responses:
      200:
        description: Active categories
    """
    return _list([Category.is_active.is_(True)])


@bp.get("/categories/all")
@require_admin
@validate(query=CategoriesQuery)
def list_all_categories() -> tuple[dict[str, object], int]:
    criteria = []
    if g.query.is_active is not None:
        criteria.append(Category.is_active.is_(g.query.is_active))
    return _list(criteria)


@bp.get("/categories/<id>")
@validate(params=IdParams)
def get_category(id: str) -> tuple[dict[str, object], int]:
    return success(_get_category(id).to_dict())


@bp.post("/categories")
@require_admin
@validate(body=CreateCategorySchema)
def create_category() -> tuple[dict[str, object], int]:
    ensure_unique_category_name(g.body.name)
    category = categories.insert(**g.body.model_dump())
    current_app.logger.info("Category %s created", category.id)
    return success(category.to_dict(), "Category created successfully", 201)


@bp.put("/categories/<id>")
@require_admin
@validate(params=IdParams, body=UpdateCategorySchema)
def update_category(id: str) -> tuple[dict[str, object], int]:
    # Inactive categories can still be edited, which is how they are reactivated.
    category = categories.get(id)
    if category is None:
        raise NotFound("Category not found", "CATEGORY_NOT_FOUND")
    changes = g.body.changes()
    if "name" in changes:
        ensure_unique_category_name(changes["name"], exclude_id=category.id)

    categories.update(category, changes)
    return success(category.to_dict(), "Category updated successfully")


@bp.delete("/categories/<id>")
@require_admin
@validate(params=IdParams)
def delete_category(id: str):
    categories.soft_delete(_get_category(id))
    current_app.logger.info("Category %s deactivated", id)
    return "", 204
