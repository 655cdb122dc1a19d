"""Shop orders and their line items."""
from __future__ import annotations

from flask import Blueprint, current_app, g
from sqlalchemy.exc import IntegrityError

from ..auth import ensure_owner_or_admin, is_admin, require_admin, require_auth
from ..errors import Conflict, Forbidden, NotFound, success
from ..models import Order, OrderItem, User
from ..rules import (check_order_update, compute_order_totals, day_bounds, ensure_cancellable,
                     generate_order_number, price_order_items, release_stock, reserve_stock)
from ..schemas.common import IdParams, PageQuery
from ..schemas.orders import (CancelOrderSchema, CreateOrderSchema, CustomerParams, OrdersQuery,
                              UpdateOrderSchema)
from ..store import Repository, ordering
from ..validation import business_timezone, validate

bp = Blueprint("orders", __name__)
orders = Repository(Order)


def _get_order(order_id: str) -> Order:
    order = orders.get(order_id)
    if order is None:
        raise NotFound("Order not found", "ORDER_NOT_FOUND")
    ensure_owner_or_admin(order.customer_id, "You can only access your own orders")
    return order


def _filtered_page():
    query = g.query
    business_tz = business_timezone()
    criteria = []
    if query.customer_id:
        criteria.append(Order.customer_id == query.customer_id)
    if query.status:
        criteria.append(Order.status == query.status)
    if query.payment_status:
        criteria.append(Order.payment_status == query.payment_status)
    if query.date_from:
        criteria.append(Order.created_at >= day_bounds(query.date_from, business_tz)[0])
    if query.date_to:
        criteria.append(Order.created_at < day_bounds(query.date_to, business_tz)[1])
    if query.min_amount is not None:
        criteria.append(Order.total_amount >= query.min_amount)
    if query.max_amount is not None:
        criteria.append(Order.total_amount <= query.max_amount)

    return orders.paginate(
        criteria, [ordering(Order, query.order_by, query.sort)], query.page, query.limit
    )


@bp.get("/orders")
@require_admin
@validate(query=OrdersQuery)
def list_orders() -> tuple[dict[str, object], int]:
    """List every order (admin only).
    ---
    tags:
      - Orders
    parameters:
      - name: status
        in: query
        type: string
        enum: [PENDING, CONFIRMED, PROCESSING, SHIPPED, DELIVERED, CANCELLED]
      - name: payment_status
        in: query
        type: string
        enum: [PENDING, PAID, FAILED, REFUNDED]
      - name: date_from
        in: query
        type: string
        format: date
      - name: date_to
        in: query
        type: string
        format: date
      - name: min_amount
        in: query
        type: number
      - name: max_amount
        in: query
        type: number
    responses:
      200:
        description: Orders with pagination metadata
      403:
        description: Caller is not an administrator
    """
    page = _filtered_page()
    return success([order.to_dict() for order in page.items], pagination=page.pagination())


@bp.get("/orders/summaries")
@require_admin
@validate(query=OrdersQuery)
def list_order_summaries() -> tuple[dict[str, object], int]:
    page = _filtered_page()
    return success([order.to_summary() for order in page.items], pagination=page.pagination())


@bp.get("/orders/customer/<customer_id>")
@require_auth
@validate(params=CustomerParams, query=PageQuery)
def list_customer_orders(customer_id: str) -> tuple[dict[str, object], int]:
    ensure_owner_or_admin(customer_id, "You can only access your own orders")
    page = orders.paginate(
        [Order.customer_id == customer_id],
        [ordering(Order, "created_at", "desc")],
        g.query.page,
        g.query.limit,
    )
    return success([order.to_dict() for order in page.items], pagination=page.pagination())


@bp.post("/orders")
@require_auth
@validate(body=CreateOrderSchema)
def create_order() -> tuple[dict[str, object], int]:
    """Place an order. Prices, tax and shipping are computed server side.
    ---
    tags:
      - Orders
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [customer_id, items]
          properties:
            customer_id:
              type: string
            items:
              type: array
              items:
                type: object
                properties:
                  product_id:
                    type: string
                  quantity:
                    type: integer
            shipping_address:
              type: string
            payment_method:
              type: string
    responses:
      201:
        description: Order created with its items
      400:
        description: Invalid request data or repeated products
      404:
        description: Unknown customer or product
      409:
        description: Insufficient stock, price mismatch or order number collision
    """
    data = g.body
    if data.customer_id != g.user.id and not is_admin():
        raise Forbidden("You can only place orders for yourself")
    customer = orders.session.get(User, data.customer_id)
    if customer is None or not customer.is_active:
        raise NotFound("Customer not found", "USER_NOT_FOUND")

    priced = price_order_items(data.items)
    totals = compute_order_totals(line for _, line in priced)
    order_number = generate_order_number()
    if orders.find_one(Order.order_number == order_number) is not None:
        raise Conflict("Order number already in use, please retry", "ORDER_NUMBER_CONFLICT")

    try:
        order = orders.insert(
            commit=False,
            customer_id=data.customer_id,
            order_number=order_number,
            shipping_address=data.shipping_address,
            billing_address=data.billing_address,
            payment_method=data.payment_method,
            **totals.as_columns(),
        )
        for _, line in priced:
            order.items.append(
                OrderItem(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    total_price=line.total_price,
                )
            )
        reserve_stock(priced)
        orders.commit()
    except IntegrityError as exc:
        orders.session.rollback()
        current_app.logger.warning("Order number %s collided on insert", order_number)
        raise Conflict("Order number already in use, please retry", "ORDER_NUMBER_CONFLICT") from exc

    current_app.logger.info(
        "Order %s created for customer %s, total %s", order.order_number, order.customer_id, totals.total_amount
    )
    return success(order.to_dict(include_items=True), "Order created successfully", 201)


@bp.get("/orders/<id>")
@require_auth
@validate(params=IdParams)
def get_order(id: str) -> tuple[dict[str, object], int]:
    return success(_get_order(id).to_dict(include_items=True))


@bp.get("/orders/<id>/items")
@require_auth
@validate(params=IdParams)
def get_order_items(id: str) -> tuple[dict[str, object], int]:
    order = _get_order(id)
    return success([item.to_dict() for item in order.items])


@bp.put("/orders/<id>")
@require_auth
@validate(params=IdParams, body=UpdateOrderSchema)
def update_order(id: str) -> tuple[dict[str, object], int]:
    order = _get_order(id)
    changes = g.body.changes()
    check_order_update(order, changes, is_admin())

    if changes.get("status") == "CANCELLED":
        release_stock(order)
    orders.update(order, changes)
    current_app.logger.info("Order %s updated: %s", order.order_number, sorted(changes))
    return success(order.to_dict(include_items=True), "Order updated successfully")


@bp.post("/orders/<id>/cancel")
@require_auth
@validate(params=IdParams, body=CancelOrderSchema)
def cancel_order(id: str) -> tuple[dict[str, object], int]:
    order = _get_order(id)
    ensure_cancellable(order, is_admin())

    release_stock(order)
    orders.update(order, {"status": "CANCELLED", "cancellation_reason": g.body.reason})
    current_app.logger.info("Order %s cancelled by %s", order.order_number, g.user.id)
    return success(order.to_dict(include_items=True), "Order cancelled successfully")
