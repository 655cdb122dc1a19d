"""Schemas for booking and managing appointments."""
from __future__ import annotations

from typing import Annotated

from pydantic import Field, model_validator

from ..models import APPOINTMENT_STATUSES
from .common import (AppointmentSlot, CalendarDate, Identifier, PageQuery, Price, Schema,
                     SortOrder, UpdateSchema, choice, fail, ordered_range, trimmed)

AppointmentStatus = choice(APPOINTMENT_STATUSES, "Status")
Notes = trimmed(0, 500)
Duration = Annotated[int, Field(ge=30, le=480)]


class CreateAppointmentSchema(Schema):
    user_id: Identifier
    stylist_id: Identifier
    style_id: Identifier
    appointment_date: AppointmentSlot
    notes: Notes | None = None
    duration: Duration | None = None
    price: Price | None = None


class UpdateAppointmentSchema(UpdateSchema):
    appointment_date: AppointmentSlot | None = None
    status: AppointmentStatus | None = None
    notes: Notes | None = None
    duration: Duration | None = None
    price: Price | None = None
    reason: trimmed(0, 200) | None = None

    @model_validator(mode="after")
    def check_status_change(self):
        if self.status == "COMPLETED" and self.appointment_date is not None:
            raise fail(
                "invalid_status_change",
                "Cannot change the date of a completed appointment",
                "appointment_date",
            )
        if self.status == "CANCELLED" and not self.reason:
            raise fail("reason_required", "A reason is required to cancel an appointment", "reason")
        return self


class AppointmentsQuery(PageQuery):
    user_id: Identifier | None = None
    stylist_id: Identifier | None = None
    status: AppointmentStatus | None = None
    date: CalendarDate | None = None
    date_from: CalendarDate | None = None
    date_to: CalendarDate | None = None
    sort_by: choice(("appointment_date", "created_at", "status"), "Sort field") = "appointment_date"
    sort_order: SortOrder = "asc"

    check_dates = ordered_range("date_from", "date_to", "date_from cannot be after date_to")
