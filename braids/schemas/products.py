"""Schemas for the product shop."""
from __future__ import annotations

import re
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, Field

from ..models import PRODUCT_CATEGORIES
from .common import (ImageUrl, PageQuery, Price, QueryFlag, Schema, SearchText, SortOrder,
                     UpdateSchema, choice, fail, ordered_range, trimmed)

PRODUCT_NAME_RE = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ\s0-9.,-]+$")
SKU_RE = re.compile(r"^[A-Z0-9_-]+$")
RELEVANT_PRODUCT_WORDS = (
    "extension", "kanekalon", "oil", "gel", "shampoo", "conditioner", "comb", "brush",
    "pin", "band", "clip", "needle", "spray", "cream", "lotion", "serum", "mousse",
    "wax", "pomade", "vitamin", "protein", "moisturiz", "nourish", "repair",
    "detangl", "edge", "protector", "thermal",
)


def _product_name(value: str) -> str:
    if not PRODUCT_NAME_RE.match(value):
        raise fail("invalid_string", "Product name contains invalid characters")
    lowered = value.lower()
    # Descriptive names longer than 10 characters are always accepted.
    if not (any(word in lowered for word in RELEVANT_PRODUCT_WORDS) or len(value) > 10):
        raise fail("irrelevant_name", "Name must be relevant to hair care or braiding products")
    return value


def _sku(value: str) -> str:
    if not SKU_RE.match(value):
        raise fail(
            "invalid_sku",
            "SKU can only contain uppercase letters, numbers, hyphens and underscores",
        )
    return value


ProductName = Annotated[trimmed(3, 150), AfterValidator(_product_name)]
ProductDescription = trimmed(10, 1000)
ProductCategory = choice(PRODUCT_CATEGORIES, "Category")
StockQuantity = Annotated[int, Field(ge=0, le=99999)]
Sku = Annotated[trimmed(3, 50), AfterValidator(_sku)]
Weight = Annotated[float, Field(gt=0, le=10000)]
Amount = Annotated[Decimal, Field(ge=0, decimal_places=2)]


class Dimensions(Schema):
    length: float = Field(gt=0, le=200)
    width: float = Field(gt=0, le=200)
    height: float = Field(gt=0, le=200)


class CreateProductSchema(Schema):
    name: ProductName
    description: ProductDescription
    price: Price
    stock_quantity: StockQuantity
    image_url: ImageUrl | None = None
    category: ProductCategory
    is_active: bool = True
    sku: Sku | None = None
    weight: Weight | None = None
    dimensions: Dimensions | None = None


class UpdateProductSchema(UpdateSchema):
    name: ProductName | None = None
    description: ProductDescription | None = None
    price: Price | None = None
    stock_quantity: StockQuantity | None = None
    image_url: ImageUrl | None = None
    category: ProductCategory | None = None
    is_active: bool | None = None
    sku: Sku | None = None
    weight: Weight | None = None
    dimensions: Dimensions | None = None


class ProductsQuery(PageQuery):
    category: ProductCategory | None = None
    active: QueryFlag | None = None
    in_stock: QueryFlag | None = None
    min_price: Amount | None = None
    max_price: Amount | None = None
    search: SearchText | None = None
    sort_by: choice(("name", "price", "stock_quantity", "created_at"), "Sort field") | None = None
    sort_order: SortOrder = "asc"

    check_prices = ordered_range(
        "min_price", "max_price", "Minimum price cannot be greater than maximum price"
    )
