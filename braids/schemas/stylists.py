"""Schemas for stylists."""
from __future__ import annotations

import re
from datetime import date
from typing import Annotated

from pydantic import AfterValidator, ValidationInfo

from .common import (CalendarDate, ImageUrl, PageQuery, PersonName, QueryFlag, Schema,
                     SearchText, UpdateSchema, fail, trimmed, validation_clock)

SPECIALTY_RE = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ\s,.-]+$")
BRAID_SPECIALTIES = (
    "african braids", "box braids", "cornrows", "extensions", "long braids",
    "kids braids", "modern braids", "classic braids", "fulani braids",
    "goddess braids", "knotless braids", "dutch braids", "french braids",
    "twist braids",
)


def _specialty(value: str) -> str:
    if not SPECIALTY_RE.match(value):
        raise fail("invalid_string", "Specialty contains invalid characters")
    lowered = value.lower()
    if not any(known in lowered for known in BRAID_SPECIALTIES):
        raise fail(
            "invalid_specialty",
            f"Specialty must mention a braid specialty: {', '.join(BRAID_SPECIALTIES)}",
        )
    return value


def _not_past(value: date, info: ValidationInfo) -> date:
    now, business_tz = validation_clock(info)
    if value < now.astimezone(business_tz).date():
        raise fail("past_date", "Date must be today or in the future")
    return value


Specialty = Annotated[trimmed(3, 150), AfterValidator(_specialty)]
StylistDescription = trimmed(10, 1000)
UpcomingDate = Annotated[CalendarDate, AfterValidator(_not_past)]


class CreateStylistSchema(Schema):
    name: PersonName
    specialty: Specialty
    photo_url: ImageUrl | None = None
    description: StylistDescription
    is_featured: bool = False


class UpdateStylistSchema(UpdateSchema):
    name: PersonName | None = None
    specialty: Specialty | None = None
    photo_url: ImageUrl | None = None
    description: StylistDescription | None = None
    is_featured: bool | None = None


class StylistsQuery(PageQuery):
    featured: QueryFlag | None = None
    specialty: trimmed(0, 150) | None = None
    search: SearchText | None = None


class AvailabilityQuery(Schema):
    date: UpcomingDate
