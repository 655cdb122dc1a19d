"""Database models for the braids salon backend."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from .extensions import db

USER_ROLES = ("CUSTOMER", "ADMIN")
STYLE_CATEGORIES = ("Long", "Short", "Classic", "Colorful", "Modern")
DIFFICULTY_LEVELS = ("Easy", "Intermediate", "Advanced", "Expert")
PRODUCT_CATEGORIES = ("Extensions", "Care", "Accessories", "Tools")
APPOINTMENT_STATUSES = ("SCHEDULED", "COMPLETED", "CANCELLED", "NO_SHOW")
REVIEWABLE_TYPES = ("STYLIST", "PRODUCT", "STYLE")
ORDER_STATUSES = ("PENDING", "CONFIRMED", "PROCESSING", "SHIPPED", "DELIVERED", "CANCELLED")
PAYMENT_STATUSES = ("PENDING", "PAID", "FAILED", "REFUNDED")


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _utc_iso(value: datetime | None) -> str | None:
    # stored as naive UTC
    return value.replace(tzinfo=timezone.utc).isoformat() if value else None


def _money(value: Decimal | float | None) -> float | None:
    return float(value) if value is not None else None


def _enum(name: str, values: tuple[str, ...]) -> db.Enum:
    return db.Enum(*values, name=name, native_enum=False, validate_strings=True)


class TimestampMixin:
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )


class User(TimestampMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(_enum("user_role", USER_ROLES), nullable=False, default="CUSTOMER")
    phone = db.Column(db.String(30))
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    def to_dict(self) -> dict[str, object]:
        # password_hash is never serialized
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "phone": self.phone,
            "is_active": bool(self.is_active),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Stylist(TimestampMixin, db.Model):
    __tablename__ = "stylists"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    specialty = db.Column(db.String(150), nullable=False)
    photo_url = db.Column(db.String(500))
    description = db.Column(db.Text, nullable=False)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "specialty": self.specialty,
            "photo_url": self.photo_url,
            "description": self.description,
            "is_featured": bool(self.is_featured),
            "is_active": bool(self.is_active),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Style(TimestampMixin, db.Model):
    __tablename__ = "styles"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    photo_url = db.Column(db.String(500))
    description = db.Column(db.Text, nullable=False)
    category = db.Column(_enum("style_category", STYLE_CATEGORIES), nullable=False)
    difficulty_level = db.Column(_enum("difficulty_level", DIFFICULTY_LEVELS))
    estimated_time = db.Column(db.Integer)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "photo_url": self.photo_url,
            "description": self.description,
            "category": self.category,
            "difficulty_level": self.difficulty_level,
            "estimated_time": self.estimated_time,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Category(TimestampMixin, db.Model):
    __tablename__ = "categories"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(50), unique=True, nullable=False)
    description = db.Column(db.String(500))
    display_order = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "display_order": self.display_order,
            "is_active": bool(self.is_active),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Product(TimestampMixin, db.Model):
    __tablename__ = "products"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    image_url = db.Column(db.String(500))
    category = db.Column(_enum("product_category", PRODUCT_CATEGORIES), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    sku = db.Column(db.String(50), unique=True)
    weight = db.Column(db.Float)
    dimensions = db.Column(db.JSON)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": _money(self.price),
            "stock_quantity": self.stock_quantity,
            "image_url": self.image_url,
            "category": self.category,
            "is_active": bool(self.is_active),
            "sku": self.sku,
            "weight": self.weight,
            "dimensions": self.dimensions,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Appointment(TimestampMixin, db.Model):
    __tablename__ = "appointments"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    stylist_id = db.Column(db.String(36), db.ForeignKey("stylists.id"), nullable=False, index=True)
    style_id = db.Column(db.String(36), db.ForeignKey("styles.id"), nullable=False)
    # Stored as naive UTC.
    appointment_date = db.Column(db.DateTime, nullable=False, index=True)
    status = db.Column(
        _enum("appointment_status", APPOINTMENT_STATUSES),
        nullable=False,
        default="SCHEDULED",
    )
    notes = db.Column(db.Text)
    duration = db.Column(db.Integer)
    price = db.Column(db.Numeric(10, 2))
    cancellation_reason = db.Column(db.String(200))

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "stylist_id": self.stylist_id,
            "style_id": self.style_id,
            "appointment_date": _utc_iso(self.appointment_date),
            "status": self.status,
            "notes": self.notes,
            "duration": self.duration,
            "price": _money(self.price),
            "cancellation_reason": self.cancellation_reason,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Review(TimestampMixin, db.Model):
    __tablename__ = "reviews"
    __table_args__ = (
        db.UniqueConstraint(
            "user_id", "reviewable_type", "reviewable_id", name="uq_review_user_target"
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    reviewable_type = db.Column(_enum("reviewable_type", REVIEWABLE_TYPES), nullable=False)
    reviewable_id = db.Column(db.String(36), nullable=False)
    rating = db.Column(db.Integer, nullable=False)
    title = db.Column(db.String(100))
    comment = db.Column(db.Text, nullable=False)
    is_verified = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "reviewable_type": self.reviewable_type,
            "reviewable_id": self.reviewable_id,
            "rating": self.rating,
            "title": self.title,
            "comment": self.comment,
            "is_verified": bool(self.is_verified),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Order(TimestampMixin, db.Model):
    __tablename__ = "orders"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    customer_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    order_number = db.Column(db.String(20), unique=True, nullable=False)
    subtotal = db.Column(db.Numeric(10, 2), nullable=False)
    tax_amount = db.Column(db.Numeric(10, 2), nullable=False)
    shipping_amount = db.Column(db.Numeric(10, 2), nullable=False)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(_enum("order_status", ORDER_STATUSES), nullable=False, default="PENDING")
    payment_status = db.Column(
        _enum("payment_status", PAYMENT_STATUSES), nullable=False, default="PENDING"
    )
    shipping_address = db.Column(db.String(500))
    billing_address = db.Column(db.String(500))
    payment_method = db.Column(db.String(50))
    cancellation_reason = db.Column(db.String(255))

    items = db.relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.created_at",
        cascade="all, delete-orphan",
    )

    def to_dict(self, include_items: bool = False) -> dict[str, object]:
        data: dict[str, object] = {
            "id": self.id,
            "customer_id": self.customer_id,
            "order_number": self.order_number,
            "subtotal": _money(self.subtotal),
            "tax_amount": _money(self.tax_amount),
            "shipping_amount": _money(self.shipping_amount),
            "total_amount": _money(self.total_amount),
            "status": self.status,
            "payment_status": self.payment_status,
            "shipping_address": self.shipping_address,
            "billing_address": self.billing_address,
            "payment_method": self.payment_method,
            "cancellation_reason": self.cancellation_reason,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data

    def to_summary(self) -> dict[str, object]:
        return {
            "id": self.id,
            "order_number": self.order_number,
            "customer_id": self.customer_id,
            "total_amount": _money(self.total_amount),
            "status": self.status,
            "payment_status": self.payment_status,
            "created_at": _iso(self.created_at),
            "items_count": len(self.items),
        }


class OrderItem(db.Model):
    __tablename__ = "order_items"
    __table_args__ = (
        db.UniqueConstraint("order_id", "product_id", name="uq_order_item_product"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    order_id = db.Column(db.String(36), db.ForeignKey("orders.id"), nullable=False, index=True)
    product_id = db.Column(db.String(36), db.ForeignKey("products.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    order = db.relationship("Order", back_populates="items")

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": _money(self.unit_price),
            "total_price": _money(self.total_price),
            "created_at": _iso(self.created_at),
        }
