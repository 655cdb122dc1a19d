"""Error taxonomy and the JSON envelopes shared by every endpoint."""
from __future__ import annotations

from datetime import datetime, timezone

from flask import Flask, current_app, jsonify
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .extensions import db


class ApiError(Exception):
    """Base class for failures that map onto a client-facing envelope."""

    status = 500
    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ValidationFailed(ApiError):
    status = 400
    code = "VALIDATION_ERROR"

    def __init__(self, errors: list[dict[str, str]], message: str = "Invalid request data") -> None:
        super().__init__(message)
        self.errors = errors


class Unauthorized(ApiError):
    status = 401
    code = "UNAUTHENTICATED"


class Forbidden(ApiError):
    status = 403
    code = "FORBIDDEN"


class NotFound(ApiError):
    status = 404
    code = "NOT_FOUND"


class Conflict(ApiError):
    status = 409
    code = "CONFLICT"


def timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def success(data: object = None, message: str | None = None, status: int = 200, **extra: object):
    payload: dict[str, object] = {"success": True, "data": data}
    if message:
        payload["message"] = message
    payload.update(extra)
    return jsonify(payload), status


def failure(
    message: str,
    status: int,
    code: str | None = None,
    errors: list[dict[str, str]] | None = None,
):
    payload: dict[str, object] = {"success": False, "message": message}
    if code:
        payload["error"] = code
    if errors is not None:
        payload["errors"] = errors
    payload["timestamp"] = timestamp()
    return jsonify(payload), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def handle_api_error(exc: ApiError):
        if isinstance(exc, ValidationFailed):
            return failure(exc.message, exc.status, exc.code, exc.errors)
        return failure(exc.message, exc.status, exc.code)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(exc: IntegrityError):
        # A uniqueness race lost between the pre-check and the insert.
        db.session.rollback()
        current_app.logger.warning("Integrity violation: %s", exc.orig)
        return failure("Resource conflicts with an existing record", 409, "CONFLICT")

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc: SQLAlchemyError):
        db.session.rollback()
        current_app.logger.exception("Database operation failed", exc_info=exc)
        return failure("Internal server error", 500, "DATABASE_ERROR")

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return failure(exc.description or exc.name, exc.code or 500, exc.name.upper().replace(" ", "_"))

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        current_app.logger.exception("Unhandled error", exc_info=exc)
        return failure("Internal server error", 500, "INTERNAL_SERVER_ERROR")
