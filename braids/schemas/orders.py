"""Schemas for orders and their line items."""
from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import Field, model_validator

from ..models import ORDER_STATUSES, PAYMENT_STATUSES
from .common import (CalendarDate, Identifier, PageQuery, Price, Schema, SortOrder,
                     UpdateSchema, choice, fail, ordered_range, trimmed)

OrderStatus = choice(ORDER_STATUSES, "Order status")
PaymentStatus = choice(PAYMENT_STATUSES, "Payment status")
Address = trimmed(10, 500)
PaymentMethod = trimmed(2, 50)
Quantity = Annotated[int, Field(gt=0, le=999)]
Amount = Annotated[Decimal, Field(ge=0, decimal_places=2)]


class OrderItemSchema(Schema):
    product_id: Identifier
    quantity: Quantity
    unit_price: Price | None = None


class CreateOrderSchema(Schema):
    customer_id: Identifier
    items: list[OrderItemSchema] = Field(min_length=1, max_length=50)
    shipping_address: Address | None = None
    billing_address: Address | None = None
    payment_method: PaymentMethod | None = None

    @model_validator(mode="after")
    def check_duplicate_products(self):
        product_ids = [item.product_id for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise fail("duplicate_products", "An order cannot contain the same product twice", "items")
        return self


class UpdateOrderSchema(UpdateSchema):
    status: OrderStatus | None = None
    shipping_address: Address | None = None
    billing_address: Address | None = None
    payment_method: PaymentMethod | None = None
    payment_status: PaymentStatus | None = None


class CancelOrderSchema(Schema):
    reason: trimmed(5, 255) | None = None


class CustomerParams(Schema):
    customer_id: Identifier


class OrdersQuery(PageQuery):
    customer_id: Identifier | None = None
    status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None
    date_from: CalendarDate | None = None
    date_to: CalendarDate | None = None
    min_amount: Amount | None = None
    max_amount: Amount | None = None
    order_by: choice(("created_at", "total_amount", "status", "order_number"), "Order by") = "created_at"
    sort: SortOrder = "desc"

    check_dates = ordered_range("date_from", "date_to", "date_from cannot be after date_to")
    check_amounts = ordered_range(
        "min_amount", "max_amount", "Minimum amount cannot be greater than maximum amount"
    )
