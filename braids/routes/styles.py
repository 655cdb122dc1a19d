"""Braid style catalog."""
from __future__ import annotations

from flask import Blueprint, current_app, g

from ..auth import require_admin
from ..errors import NotFound, success
from ..models import Style
from ..schemas.common import IdParams
from ..schemas.styles import CreateStyleSchema, StylesQuery, UpdateStyleSchema
from ..store import Repository, ordering
from ..validation import validate

bp = Blueprint("styles", __name__)
styles = Repository(Style)


def _get_style(style_id: str) -> Style:
    style = styles.get(style_id)
    if style is None:
        raise NotFound("Style not found", "STYLE_NOT_FOUND")
    return style


@bp.get("/styles")
@validate(query=StylesQuery)
def list_styles() -> tuple[dict[str, object], int]:
    """Browse braid styles.
    ---
    tags:
      - Styles
    parameters:
      - name: category
        in: query
        type: string
        enum: [Long, Short, Classic, Colorful, Modern]
      - name: difficulty_level
        in: query
        type: string
        enum: [Easy, Intermediate, Advanced, Expert]
      - name: max_time
        in: query
        type: integer
        description: Only styles that take at most this many minutes
      - name: search
        in: query
        type: string
    responses:
      200:
        description: Styles with pagination metadata
      400:
        description: Invalid parameters
    """
    query = g.query
    criteria = []
    if query.category:
        criteria.append(Style.category == query.category)
    if query.difficulty_level:
        criteria.append(Style.difficulty_level == query.difficulty_level)
    if query.max_time is not None:
        criteria.append(Style.estimated_time <= query.max_time)
    if query.search:
        criteria.append(Style.name.ilike(f"%{query.search}%"))

    page = styles.paginate(criteria, [ordering(Style, "name")], query.page, query.limit)
    return success([style.to_dict() for style in page.items], pagination=page.pagination())


@bp.get("/styles/<id>")
@validate(params=IdParams)
def get_style(id: str) -> tuple[dict[str, object], int]:
    return success(_get_style(id).to_dict())


@bp.post("/styles")
@require_admin
@validate(body=CreateStyleSchema)
def create_style() -> tuple[dict[str, object], int]:
    style = styles.insert(**g.body.model_dump())
    current_app.logger.info("Style %s created", style.id)
    return success(style.to_dict(), "Style created successfully", 201)


@bp.put("/styles/<id>")
@require_admin
@validate(params=IdParams, body=UpdateStyleSchema)
def update_style(id: str) -> tuple[dict[str, object], int]:
    style = styles.update(_get_style(id), g.body.changes())
    return success(style.to_dict(), "Style updated successfully")


@bp.delete("/styles/<id>")
@require_admin
@validate(params=IdParams)
def delete_style(id: str):
    styles.delete(_get_style(id))
    current_app.logger.info("Style %s deleted", id)
    return "", 204
