"""Business rules evaluated by the handlers before anything is written.

Every check here reads the current store state and raises an ``ApiError``
when the request must be rejected; none of them mutate the session except
``reserve_stock`` and ``release_stock``, which run inside the order
transaction.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import date, datetime, time as dt_time, timedelta, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from flask import current_app
from sqlalchemy import func, select

from .errors import Conflict, Forbidden, NotFound
from .extensions import db
from .models import Appointment, Category, Order, Product, Review, Style, Stylist, User

CENT = Decimal("0.01")
TAX_RATE = Decimal("0.10")
FREE_SHIPPING_OVER = Decimal("50.00")
FLAT_SHIPPING = Decimal("10.00")

OPENING_HOUR = 8
CLOSING_HOUR = 18


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_storage(value: datetime) -> datetime:
    """Normalize an aware datetime to the naive UTC form kept in the database."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def day_bounds(day: date, business_tz: tzinfo) -> tuple[datetime, datetime]:
    """Storage-form ``[start, end)`` of a business-local calendar day."""
    start = datetime.combine(day, dt_time(0), tzinfo=business_tz)
    return to_storage(start), to_storage(start + timedelta(days=1))


# --- orders ------------------------------------------------------------------

@dataclass(frozen=True)
class OrderLine:
    product_id: str
    quantity: int
    unit_price: Decimal

    @property
    def total_price(self) -> Decimal:
        return to_cents(self.unit_price * self.quantity)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax_amount: Decimal
    shipping_amount: Decimal
    total_amount: Decimal

    def as_columns(self) -> dict[str, Decimal]:
        return {
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "shipping_amount": self.shipping_amount,
            "total_amount": self.total_amount,
        }


def compute_order_totals(lines: Iterable[OrderLine]) -> OrderTotals:
    """Subtotal, 10% tax, flat shipping under the free-shipping threshold.

    Tax is rounded half-up to cents before it is added to the total.
    """
    lines = list(lines)
    product_ids = [line.product_id for line in lines]
    if len(product_ids) != len(set(product_ids)):
        raise ValueError("order lines must not repeat a product")

    subtotal = to_cents(sum((line.unit_price * line.quantity for line in lines), Decimal("0")))
    tax = to_cents(subtotal * TAX_RATE)
    shipping = Decimal("0.00") if subtotal > FREE_SHIPPING_OVER else FLAT_SHIPPING
    return OrderTotals(subtotal, tax, shipping, to_cents(subtotal + tax + shipping))


def generate_order_number(now: datetime | None = None) -> str:
    """``ORD-<year>-<last six digits of the epoch in milliseconds>``."""
    if now is None:
        millis = int(time.time() * 1000)
        year = datetime.now(timezone.utc).year
    else:
        millis = int(now.timestamp() * 1000)
        year = now.year
    return f"ORD-{year}-{str(millis)[-6:]}"


def price_order_items(items) -> list[tuple[Product, OrderLine]]:
    """Resolve requested items against the catalog.

    The captured unit price is always the catalog price; a client-supplied
    price that disagrees with it is rejected.
    """
    priced = []
    for item in items:
        product = db.session.get(Product, item.product_id)
        if product is None or not product.is_active:
            raise NotFound(f"Product {item.product_id} not found", "PRODUCT_NOT_FOUND")
        if item.unit_price is not None and item.unit_price != product.price:
            raise Conflict(
                f"Price for product {product.id} does not match the catalog price",
                "PRICE_MISMATCH",
            )
        if product.stock_quantity < item.quantity:
            raise Conflict(f"Insufficient stock for product {product.name}", "INSUFFICIENT_STOCK")
        priced.append((product, OrderLine(product.id, item.quantity, Decimal(product.price))))
    return priced


def reserve_stock(priced: Iterable[tuple[Product, OrderLine]]) -> None:
    for product, line in priced:
        product.stock_quantity -= line.quantity


def release_stock(order: Order) -> None:
    for item in order.items:
        product = db.session.get(Product, item.product_id)
        if product is not None:
            product.stock_quantity += item.quantity


def ensure_cancellable(order: Order, admin: bool) -> None:
    if order.status == "CANCELLED":
        raise Conflict("Order is already cancelled", "ORDER_ALREADY_CANCELLED")
    if order.status == "DELIVERED":
        raise Conflict("Delivered orders cannot be cancelled", "ORDER_DELIVERED")
    if not admin and order.status != "PENDING":
        raise Conflict("Only pending orders can be cancelled", "ORDER_NOT_PENDING")


def check_order_update(order: Order, changes: dict[str, object], admin: bool) -> None:
    """Gate a PUT on an order.

    Customers may only touch their own pending orders and may only move
    them to CANCELLED. Nobody revives a cancelled order.
    """
    status = changes.get("status")
    if not admin:
        if status is not None and status != "CANCELLED":
            raise Forbidden("You can only cancel your order")
        if "payment_status" in changes:
            raise Forbidden("Only administrators can change the payment status")
        if status is None and order.status != "PENDING":
            raise Conflict("Only pending orders can be modified", "ORDER_NOT_PENDING")

    if status == "CANCELLED":
        ensure_cancellable(order, admin)
    elif status is not None and order.status == "CANCELLED":
        raise Conflict("Order is already cancelled", "ORDER_ALREADY_CANCELLED")


# --- appointments -------------------------------------------------------------

def ensure_no_appointment_conflict(
    stylist_id: str, when: datetime, exclude_id: str | None = None
) -> None:
    """Reject a second SCHEDULED appointment for the stylist at the same instant.

    Only identical start times collide; overlapping durations do not.
    """
    criteria = [
        Appointment.stylist_id == stylist_id,
        Appointment.appointment_date == to_storage(when),
        Appointment.status == "SCHEDULED",
    ]
    if exclude_id:
        criteria.append(Appointment.id != exclude_id)
    existing = db.session.scalars(select(Appointment.id).where(*criteria).limit(1)).first()
    if existing is not None:
        current_app.logger.warning(
            "Appointment conflict for stylist %s at %s", stylist_id, when.isoformat()
        )
        raise Conflict(
            "The stylist already has an appointment at that time", "APPOINTMENT_CONFLICT"
        )


def ensure_booking_targets(stylist_id: str, style_id: str) -> None:
    stylist = db.session.get(Stylist, stylist_id)
    if stylist is None or not stylist.is_active:
        raise NotFound("Stylist not found", "STYLIST_NOT_FOUND")
    if db.session.get(Style, style_id) is None:
        raise NotFound("Style not found", "STYLE_NOT_FOUND")


def stylist_availability(
    stylist_id: str, day: date, business_tz: tzinfo, now: datetime | None = None
) -> list[dict[str, object]]:
    """Hourly slots for ``day`` in business time, marking booked or past ones."""
    if day.isoweekday() == 7:
        return []
    now = now or datetime.now(timezone.utc)
    earliest = now + timedelta(hours=1)

    slots = [
        datetime.combine(day, dt_time(hour), tzinfo=business_tz)
        for hour in range(OPENING_HOUR, CLOSING_HOUR)
    ]
    booked = set(
        db.session.scalars(
            select(Appointment.appointment_date).where(
                Appointment.stylist_id == stylist_id,
                Appointment.status == "SCHEDULED",
                Appointment.appointment_date >= to_storage(slots[0]),
                Appointment.appointment_date <= to_storage(slots[-1]),
            )
        )
    )
    return [
        {
            "time": slot.strftime("%H:%M"),
            "start": slot.isoformat(),
            "available": slot >= earliest and to_storage(slot) not in booked,
        }
        for slot in slots
    ]


# --- uniqueness ---------------------------------------------------------------

def _taken(criteria: list, model, exclude_id: str | None) -> bool:
    if exclude_id:
        criteria.append(model.id != exclude_id)
    return db.session.scalars(select(model.id).where(*criteria).limit(1)).first() is not None


def ensure_unique_email(email: str, exclude_id: str | None = None) -> None:
    if _taken([func.lower(User.email) == email.lower()], User, exclude_id):
        raise Conflict("A user with this email already exists", "EMAIL_EXISTS")


def ensure_unique_category_name(name: str, exclude_id: str | None = None) -> None:
    if _taken([func.lower(Category.name) == name.lower()], Category, exclude_id):
        raise Conflict("A category with this name already exists", "CATEGORY_EXISTS")


def ensure_unique_sku(sku: str | None, exclude_id: str | None = None) -> None:
    if sku and _taken([Product.sku == sku], Product, exclude_id):
        raise Conflict("A product with this SKU already exists", "SKU_EXISTS")


# --- reviews ------------------------------------------------------------------

@dataclass(frozen=True)
class ReviewTarget:
    """The thing a review is about: a stylist, a product or a style."""

    kind: str
    id: str

    MODELS = {"STYLIST": Stylist, "PRODUCT": Product, "STYLE": Style}

    @property
    def model(self):
        return self.MODELS[self.kind]

    def resolve(self):
        record = db.session.get(self.model, self.id)
        if record is None or not getattr(record, "is_active", True):
            raise NotFound(f"{self.kind.title()} not found", "REVIEW_TARGET_NOT_FOUND")
        return record

    def criteria(self) -> list:
        return [Review.reviewable_type == self.kind, Review.reviewable_id == self.id]


def ensure_single_review(user_id: str, target: ReviewTarget) -> None:
    if _taken([Review.user_id == user_id, *target.criteria()], Review, None):
        raise Conflict("You have already reviewed this item", "REVIEW_EXISTS")


def review_stats(target: ReviewTarget) -> dict[str, object]:
    """Rating summary over verified reviews only."""
    ratings = list(
        db.session.scalars(
            select(Review.rating).where(*target.criteria(), Review.is_verified.is_(True))
        )
    )
    distribution = {str(star): 0 for star in range(1, 6)}
    for rating in ratings:
        distribution[str(rating)] += 1

    average = 0.0
    if ratings:
        mean = Decimal(sum(ratings)) / Decimal(len(ratings))
        average = float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

    return {
        "reviewable_type": target.kind,
        "reviewable_id": target.id,
        "total_reviews": len(ratings),
        "average_rating": average,
        "rating_distribution": distribution,
    }
