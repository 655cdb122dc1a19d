"""Appointment booking and management."""
from __future__ import annotations

from datetime import timezone

from flask import Blueprint, current_app, g

from ..auth import ensure_owner_or_admin, is_admin, require_auth
from ..errors import Forbidden, NotFound, success
from ..models import Appointment, User
from ..rules import (day_bounds, ensure_booking_targets, ensure_no_appointment_conflict,
                     to_storage)
from ..schemas.appointments import (AppointmentsQuery, CreateAppointmentSchema,
                                    UpdateAppointmentSchema)
from ..schemas.common import IdParams
from ..store import Repository, ordering
from ..validation import business_timezone, validate

bp = Blueprint("appointments", __name__)
appointments = Repository(Appointment)


def _get_appointment(appointment_id: str) -> Appointment:
    appointment = appointments.get(appointment_id)
    if appointment is None:
        raise NotFound("Appointment not found", "APPOINTMENT_NOT_FOUND")
    ensure_owner_or_admin(appointment.user_id, "You can only access your own appointments")
    return appointment


@bp.get("/appointments")
@require_auth
@validate(query=AppointmentsQuery)
def list_appointments() -> tuple[dict[str, object], int]:
    """List appointments. Customers only ever see their own.
    ---
    tags:
      - Appointments
    parameters:
      - name: user_id
        in: query
        type: string
        description: Admin only; ignored for customers
      - name: stylist_id
        in: query
        type: string
      - name: status
        in: query
        type: string
        enum: [SCHEDULED, COMPLETED, CANCELLED, NO_SHOW]
      - name: date
        in: query
        type: string
        format: date
      - name: date_from
        in: query
        type: string
        format: date
      - name: date_to
        in: query
        type: string
        format: date
    responses:
      200:
        description: Appointments with pagination metadata
      401:
        description: Missing or invalid token
    """
    query = g.query
    business_tz = business_timezone()
    criteria = []

    user_id = query.user_id if is_admin() else g.user.id
    if user_id:
        criteria.append(Appointment.user_id == user_id)
    if query.stylist_id:
        criteria.append(Appointment.stylist_id == query.stylist_id)
    if query.status:
        criteria.append(Appointment.status == query.status)
    if query.date:
        start, end = day_bounds(query.date, business_tz)
        criteria.extend([Appointment.appointment_date >= start, Appointment.appointment_date < end])
    if query.date_from:
        criteria.append(Appointment.appointment_date >= day_bounds(query.date_from, business_tz)[0])
    if query.date_to:
        criteria.append(Appointment.appointment_date < day_bounds(query.date_to, business_tz)[1])

    page = appointments.paginate(
        criteria, [ordering(Appointment, query.sort_by, query.sort_order)], query.page, query.limit
    )
    return success([item.to_dict() for item in page.items], pagination=page.pagination())


@bp.post("/appointments")
@require_auth
@validate(body=CreateAppointmentSchema)
def create_appointment() -> tuple[dict[str, object], int]:
    """Book an appointment with a stylist.
    ---
    tags:
      - Appointments
    responses:
      201:
        description: Appointment booked
      400:
        description: Invalid request data or time outside business hours
      403:
        description: Booking on behalf of another user
      404:
        description: Unknown user, stylist or style
      409:
        description: The stylist is already booked at that time
    """
    data = g.body
    if data.user_id != g.user.id:
        if not is_admin():
            raise Forbidden("You can only book appointments for yourself")
        customer = appointments.session.get(User, data.user_id)
        if customer is None or not customer.is_active:
            raise NotFound("User not found", "USER_NOT_FOUND")

    ensure_booking_targets(data.stylist_id, data.style_id)
    ensure_no_appointment_conflict(data.stylist_id, data.appointment_date)

    appointment = appointments.insert(
        user_id=data.user_id,
        stylist_id=data.stylist_id,
        style_id=data.style_id,
        appointment_date=to_storage(data.appointment_date),
        notes=data.notes,
        duration=data.duration,
        price=data.price,
    )
    current_app.logger.info(
        "Appointment %s booked with stylist %s at %s",
        appointment.id,
        appointment.stylist_id,
        appointment.appointment_date.isoformat(),
    )
    return success(appointment.to_dict(), "Appointment created successfully", 201)


@bp.get("/appointments/<id>")
@require_auth
@validate(params=IdParams)
def get_appointment(id: str) -> tuple[dict[str, object], int]:
    return success(_get_appointment(id).to_dict())


@bp.put("/appointments/<id>")
@require_auth
@validate(params=IdParams, body=UpdateAppointmentSchema)
def update_appointment(id: str) -> tuple[dict[str, object], int]:
    appointment = _get_appointment(id)
    changes = g.body.changes()

    reason = changes.pop("reason", None)
    status = changes.get("status", appointment.status)
    if status == "CANCELLED":
        if reason:
            changes["cancellation_reason"] = reason
    elif "status" in changes:
        changes["cancellation_reason"] = None

    if status == "SCHEDULED" and ("status" in changes or "appointment_date" in changes):
        when = changes.get("appointment_date") or appointment.appointment_date.replace(
            tzinfo=timezone.utc
        )
        ensure_no_appointment_conflict(appointment.stylist_id, when, exclude_id=appointment.id)
    if "appointment_date" in changes:
        changes["appointment_date"] = to_storage(changes["appointment_date"])

    appointments.update(appointment, changes)
    current_app.logger.info("Appointment %s updated: %s", appointment.id, sorted(changes))
    return success(appointment.to_dict(), "Appointment updated successfully")


@bp.delete("/appointments/<id>")
@require_auth
@validate(params=IdParams)
def delete_appointment(id: str):
    appointments.delete(_get_appointment(id))
    current_app.logger.info("Appointment %s deleted", id)
    return "", 204
