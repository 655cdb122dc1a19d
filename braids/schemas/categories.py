"""Schemas for product categories."""
from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, Field

from .common import (PERSON_NAME_RE, PageQuery, QueryFlag, Schema, SearchText, SortOrder,
                     UpdateSchema, choice, fail, trimmed)


def _category_name(value: str) -> str:
    if not PERSON_NAME_RE.match(value):
        raise fail("invalid_string", "Category name can only contain letters and spaces")
    return value


CategoryName = Annotated[trimmed(2, 50), AfterValidator(_category_name)]
CategoryDescription = trimmed(0, 500)
DisplayOrder = Annotated[int, Field(ge=0, le=999)]


class CreateCategorySchema(Schema):
    name: CategoryName
    description: CategoryDescription | None = None
    display_order: DisplayOrder = 0
    is_active: bool = True


class UpdateCategorySchema(UpdateSchema):
    name: CategoryName | None = None
    description: CategoryDescription | None = None
    display_order: DisplayOrder | None = None
    is_active: bool | None = None


class CategoriesQuery(PageQuery):
    limit: int = Field(100, ge=1, le=100)
    is_active: QueryFlag | None = None
    order_by: choice(("name", "display_order", "created_at"), "Order by") = "display_order"
    sort: SortOrder = "asc"
    search: SearchText | None = None
