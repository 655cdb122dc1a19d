"""Product shop catalog."""
from __future__ import annotations

from flask import Blueprint, current_app, g
from sqlalchemy import or_

from ..auth import require_admin
from ..errors import NotFound, success
from ..models import Product
from ..rules import ensure_unique_sku
from ..schemas.common import IdParams
from ..schemas.products import CreateProductSchema, ProductsQuery, UpdateProductSchema
from ..store import Repository, ordering
from ..validation import validate

bp = Blueprint("products", __name__)
products = Repository(Product)


def _get_product(product_id: str) -> Product:
    product = products.get_active(product_id)
    if product is None:
        raise NotFound("Product not found", "PRODUCT_NOT_FOUND")
    return product


@bp.get("/products")
@validate(query=ProductsQuery)
def list_products() -> tuple[dict[str, object], int]:
    """Search the product catalog.
    ---
    tags:
      - Products
    parameters:
      - name: category
        in: query
        type: string
        enum: [Extensions, Care, Accessories, Tools]
      - name: active
        in: query
        type: boolean
        description: Defaults to active products only
      - name: in_stock
        in: query
        type: boolean
      - name: min_price
        in: query
        type: number
      - name: max_price
        in: query
        type: number
      - name: search
        in: query
        type: string
      - name: sort_by
        in: query
        type: string
        enum: [name, price, stock_quantity, created_at]
      - name: sort_order
        in: query
        type: string
        enum: [asc, desc]
    responses:
      200:
        description: Products with pagination metadata
      400:
        description: Invalid parameters
    """
    query = g.query
    criteria = [Product.is_active.is_(True if query.active is None else query.active)]
    if query.category:
        criteria.append(Product.category == query.category)
    if query.in_stock is True:
        criteria.append(Product.stock_quantity > 0)
    elif query.in_stock is False:
        criteria.append(Product.stock_quantity == 0)
    if query.min_price is not None:
        criteria.append(Product.price >= query.min_price)
    if query.max_price is not None:
        criteria.append(Product.price <= query.max_price)
    if query.search:
        pattern = f"%{query.search}%"
        criteria.append(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))

    order_by = [ordering(Product, query.sort_by or "created_at", query.sort_order)]
    page = products.paginate(criteria, order_by, query.page, query.limit)
    return success([product.to_dict() for product in page.items], pagination=page.pagination())


@bp.get("/products/<id>")
@validate(params=IdParams)
def get_product(id: str) -> tuple[dict[str, object], int]:
    return success(_get_product(id).to_dict())


@bp.post("/products")
@require_admin
@validate(body=CreateProductSchema)
def create_product() -> tuple[dict[str, object], int]:
    ensure_unique_sku(g.body.sku)
    product = products.insert(**g.body.model_dump())
    current_app.logger.info("Product %s created", product.id)
    return success(product.to_dict(), "Product created successfully", 201)


@bp.put("/products/<id>")
@require_admin
@validate(params=IdParams, body=UpdateProductSchema)
def update_product(id: str) -> tuple[dict[str, object], int]:
    product = products.get(id)
    if product is None:
        raise NotFound("Product not found", "PRODUCT_NOT_FOUND")

    changes = g.body.changes()
    if "sku" in changes:
        ensure_unique_sku(changes["sku"], exclude_id=product.id)

    products.update(product, changes)
    return success(product.to_dict(), "Product updated successfully")


@bp.delete("/products/<id>")
@require_admin
@validate(params=IdParams)
def delete_product(id: str):
    products.soft_delete(_get_product(id))
    current_app.logger.info("Product %s deactivated", id)
    return "", 204
