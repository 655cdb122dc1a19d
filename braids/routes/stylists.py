"""Stylist directory and booking availability."""
from __future__ import annotations

from flask import Blueprint, current_app, g

from ..auth import require_admin
from ..errors import NotFound, success
from ..models import Stylist
from ..rules import stylist_availability
from ..schemas.common import IdParams
from ..schemas.stylists import (AvailabilityQuery, CreateStylistSchema, StylistsQuery,
                                UpdateStylistSchema)
from ..store import Repository, ordering
from ..validation import business_timezone, validate

bp = Blueprint("stylists", __name__)
stylists = Repository(Stylist)


def _get_stylist(stylist_id: str) -> Stylist:
    stylist = stylists.get_active(stylist_id)
    if stylist is None:
        raise NotFound("Stylist not found", "STYLIST_NOT_FOUND")
    return stylist


@bp.get("/stylists")
@validate(query=StylistsQuery)
def list_stylists() -> tuple[dict[str, object], int]:
    """List active stylists, featured ones first.
    ---
    tags:
      - Stylists
    parameters:
      - name: featured
        in: query
        type: boolean
      - name: specialty
        in: query
        type: string
      - name: search
        in: query
        type: string
    responses:
      200:
        description: Stylists with pagination metadata
    """
    query = g.query
    criteria = [Stylist.is_active.is_(True)]
    if query.featured is not None:
        criteria.append(Stylist.is_featured.is_(query.featured))
    if query.specialty:
        criteria.append(Stylist.specialty.ilike(f"%{query.specialty}%"))
    if query.search:
        criteria.append(Stylist.name.ilike(f"%{query.search}%"))

    page = stylists.paginate(
        criteria,
        [ordering(Stylist, "is_featured", "desc"), ordering(Stylist, "name")],
        query.page,
        query.limit,
    )
    return success([stylist.to_dict() for stylist in page.items], pagination=page.pagination())


@bp.get("/stylists/<id>")
@validate(params=IdParams)
def get_stylist(id: str) -> tuple[dict[str, object], int]:
    return success(_get_stylist(id).to_dict())


@bp.get("/stylists/<id>/availability")
@validate(params=IdParams, query=AvailabilityQuery)
def get_availability(id: str) -> tuple[dict[str, object], int]:
    """Hourly booking slots for one day.
    ---
    tags:
      - Stylists
    parameters:
      - name: id
        in: path
        type: string
        required: true
      - name: date
        in: query
        type: string
        format: date
        required: true
    responses:
      200:
        description: Slots between opening and closing time with availability flags
      404:
        description: Stylist not found
    """
    stylist = _get_stylist(id)
    day = g.query.date
    slots = stylist_availability(stylist.id, day, business_timezone())
    return success({"stylist_id": stylist.id, "date": day.isoformat(), "slots": slots})


@bp.post("/stylists")
@require_admin
@validate(body=CreateStylistSchema)
def create_stylist() -> tuple[dict[str, object], int]:
    stylist = stylists.insert(**g.body.model_dump())
    current_app.logger.info("Stylist %s created", stylist.id)
    return success(stylist.to_dict(), "Stylist created successfully", 201)


@bp.put("/stylists/<id>")
@require_admin
@validate(params=IdParams, body=UpdateStylistSchema)
def update_stylist(id: str) -> tuple[dict[str, object], int]:
    stylist = stylists.update(_get_stylist(id), g.body.changes())
    return success(stylist.to_dict(), "Stylist updated successfully")


@bp.delete("/stylists/<id>")
@require_admin
@validate(params=IdParams)
def delete_stylist(id: str):
    stylists.soft_delete(_get_stylist(id))
    current_app.logger.info("Stylist %s deactivated", id)
    return "", 204
