"""Reusable field types and base models for request schemas.

Every field type either returns a normalized value or raises a
``PydanticCustomError`` whose ``type`` becomes the machine-readable ``code``
in the validation envelope. Cross-field failures can name the offending
field through a ``field`` entry in the error context.
"""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Callable

from pydantic import (AfterValidator, BaseModel, BeforeValidator, ConfigDict,
                      Field, StringConstraints, ValidationInfo, model_validator)
from pydantic_core import PydanticCustomError

UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
PERSON_NAME_RE = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ\s]+$")
PHONE_RE = re.compile(r"^\+?[0-9\s().-]{7,30}$")
IMAGE_URL_RE = re.compile(r"^https?://\S+\.(jpg|jpeg|png|webp|gif)(\?\S*)?$", re.IGNORECASE)
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MAX_PRICE = Decimal("9999.99")
CENT = Decimal("0.01")


def fail(code: str, message: str, field: str | None = None) -> PydanticCustomError:
    context = {"field": field} if field else None
    return PydanticCustomError(code, message, context)


# --- clock -----------------------------------------------------------------

def validation_clock(info: ValidationInfo | None) -> tuple[datetime, tzinfo]:
    """Return ``(now, business_timezone)`` from the validation context."""
    context = (info.context if info is not None else None) or {}
    now = context.get("now") or datetime.now(timezone.utc)
    business_tz = context.get("timezone") or timezone.utc
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now, business_tz


# --- scalar validators -----------------------------------------------------

def _identifier(value: str) -> str:
    if not UUID_RE.match(value):
        raise fail("invalid_uuid", "ID must be a valid UUID")
    return value.lower()


def _email(value: str) -> str:
    value = value.strip().lower()
    if not value:
        raise fail("required", "Email is required")
    if len(value) > 255:
        raise fail("too_long", "Email cannot exceed 255 characters")
    if not EMAIL_RE.match(value):
        raise fail("invalid_email", "Email format is invalid")
    return value


def _password(value: str) -> str:
    if len(value) < 8:
        raise fail("too_short", "Password must be at least 8 characters")
    if len(value) > 128:
        raise fail("too_long", "Password cannot exceed 128 characters")
    if not (
        re.search(r"[a-z]", value)
        and re.search(r"[A-Z]", value)
        and re.search(r"\d", value)
    ):
        raise fail(
            "weak_password",
            "Password must contain at least one uppercase letter, one lowercase letter and one number",
        )
    return value


def _person_name(value: str) -> str:
    if not PERSON_NAME_RE.match(value):
        raise fail("invalid_string", "Name can only contain letters and spaces")
    return value


def _phone(value: str) -> str:
    if not PHONE_RE.match(value):
        raise fail("invalid_phone", "Phone number is invalid")
    return value


def _image_url(value: str) -> str | None:
    value = value.strip()
    if value == "":
        return None
    if len(value) > 500:
        raise fail("too_long", "URL cannot exceed 500 characters")
    if not IMAGE_URL_RE.match(value):
        raise fail(
            "invalid_url",
            "URL must point to a valid image (jpg, jpeg, png, webp, gif)",
        )
    return value


def _exact_decimal(value: Any) -> Any:
    if isinstance(value, float):
        value = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            value = Decimal(value.strip())
        except InvalidOperation:
            return value
    if isinstance(value, Decimal) and not value.is_finite():
        raise fail("invalid_number", "Price must be a finite number")
    return value


def _price(amount: Decimal) -> Decimal:
    if amount <= 0:
        raise fail("too_small", "Price must be a positive number")
    if amount > MAX_PRICE:
        raise fail("too_big", "Price cannot exceed 9999.99")
    if amount != amount.quantize(CENT):
        raise fail("invalid_precision", "Price cannot have more than 2 decimal places")
    return amount.quantize(CENT)


def _query_flag(value: Any) -> Any:
    if isinstance(value, str):
        if value not in ("true", "false"):
            raise fail("invalid_boolean", "Value must be true or false")
        return value == "true"
    return value


def _calendar_date(value: Any) -> Any:
    if isinstance(value, str) and not DATE_RE.match(value):
        raise fail("invalid_date", "Date must use the YYYY-MM-DD format")
    return value


def one_of(values: tuple[str, ...], label: str) -> Callable[[str], str]:
    """Build a validator accepting only ``values``; the message lists them all."""

    def check(value: str) -> str:
        if value not in values:
            raise fail("invalid_enum_value", f"{label} must be one of: {', '.join(values)}")
        return value

    return check


def appointment_slot(value: datetime, info: ValidationInfo) -> datetime:
    """Accept a bookable appointment time and return it in business time.

    Naive inputs are read as business-local wall time.
    """
    now, business_tz = validation_clock(info)
    if value.tzinfo is None:
        value = value.replace(tzinfo=business_tz)
    local = value.astimezone(business_tz)

    if local < now + timedelta(hours=1):
        raise fail("too_soon", "Appointment must be scheduled at least 1 hour in advance")
    if local > now + timedelta(days=6 * 30):
        raise fail("too_far", "Appointment cannot be scheduled more than 6 months ahead")
    if local.isoweekday() == 7:
        raise fail("closed_day", "Appointments can only be scheduled Monday through Saturday")
    if not 8 <= local.hour < 18:
        raise fail("outside_hours", "Appointments can only be scheduled between 8:00 AM and 6:00 PM")
    return local


# --- annotated field types -------------------------------------------------

Identifier = Annotated[str, AfterValidator(_identifier)]
Email = Annotated[str, AfterValidator(_email)]
Password = Annotated[str, AfterValidator(_password)]
PersonName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=2, max_length=100),
    AfterValidator(_person_name),
]
Phone = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_phone)]
ImageUrl = Annotated[str, AfterValidator(_image_url)]
Price = Annotated[Decimal, BeforeValidator(_exact_decimal), AfterValidator(_price)]
QueryFlag = Annotated[bool, BeforeValidator(_query_flag)]
CalendarDate = Annotated[date, BeforeValidator(_calendar_date)]
AppointmentSlot = Annotated[datetime, AfterValidator(appointment_slot)]
SearchText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]
SortOrder = Annotated[str, AfterValidator(one_of(("asc", "desc"), "Sort order"))]


def choice(values: tuple[str, ...], label: str):
    return Annotated[str, AfterValidator(one_of(values, label))]


def trimmed(min_length: int = 0, max_length: int | None = None):
    return Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length),
    ]


# --- base models -----------------------------------------------------------

class Schema(BaseModel):
    """Base request schema; unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore")


class UpdateSchema(Schema):
    """Partial update: at least one recognised, non-null field is required."""

    @model_validator(mode="after")
    def require_changes(self):
        if not self.changes():
            raise fail("empty_update", "At least one field must be provided for update")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class IdParams(Schema):
    id: Identifier


class PageQuery(Schema):
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)


def ordered_range(low: str, high: str, message: str):
    """Model validator rejecting ``low > high`` when both are present."""

    def check(model: BaseModel):
        lower, upper = getattr(model, low), getattr(model, high)
        if lower is not None and upper is not None and lower > upper:
            raise fail("invalid_range", message, low)
        return model

    return model_validator(mode="after")(check)
