"""Liveness and database connectivity checks for the salon API."""
from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..errors import timestamp
from ..extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
def service_status() -> tuple[dict[str, str], int]:
    """Report that the booking service is up.
    ---
    tags:
      - Health
    responses:
      200:
        description: Process is accepting requests; includes the server time.
    """
    return jsonify({"status": "ok", "timestamp": timestamp()}), 200


@bp.get("/db-health")
def store_status() -> tuple[dict[str, str], int]:
    """Round-trip a trivial query so load balancers notice a dead database."""
    dialect = db.engine.dialect.name
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Store unreachable (%s)", dialect, exc_info=exc)
        return jsonify({"database": "unavailable", "dialect": dialect}), 503

    return jsonify({"database": "ok", "dialect": dialect}), 200
