"""Request validation decorator shared by every blueprint.

``validate`` runs pydantic schemas against the JSON body, the path
parameters and the query string of a request. Errors from all three
locations are collected into one 400 envelope; on success the normalized
models are published on ``flask.g`` (``g.body``, ``g.params``, ``g.query``)
and the view receives normalized path parameters.
"""
from __future__ import annotations

from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable
from zoneinfo import ZoneInfo

from flask import current_app, g, request
from pydantic import BaseModel, ValidationError

from .errors import failure

VALIDATION_MESSAGE = "Invalid request data"


def business_timezone() -> ZoneInfo:
    return ZoneInfo(current_app.config.get("BUSINESS_TIMEZONE", "UTC"))


def validation_context() -> dict[str, Any]:
    """Clock and business timezone handed to schema validators."""
    return {"now": datetime.now(timezone.utc), "timezone": business_timezone()}


def format_errors(exc: ValidationError) -> list[dict[str, str]]:
    errors = []
    for err in exc.errors(include_url=False):
        field = ".".join(str(part) for part in err["loc"])
        if not field:
            field = (err.get("ctx") or {}).get("field", "")
        errors.append({"field": field, "message": err["msg"], "code": err["type"]})
    return errors


def run_schema(
    schema: type[BaseModel], data: Any, context: dict[str, Any] | None = None
) -> tuple[BaseModel | None, list[dict[str, str]]]:
    try:
        return schema.model_validate(data, context=context), []
    except ValidationError as exc:
        return None, format_errors(exc)


def validate(
    body: type[BaseModel] | None = None,
    params: type[BaseModel] | None = None,
    query: type[BaseModel] | None = None,
) -> Callable:
    def decorator(view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            context = validation_context()
            errors: list[dict[str, str]] = []

            if body is not None:
                payload = request.get_json(silent=True)
                if payload is None:
                    payload = {}
                g.body, found = run_schema(body, payload, context)
                errors.extend(found)

            if params is not None:
                g.params, found = run_schema(params, kwargs, context)
                errors.extend(found)
                if g.params is not None:
                    kwargs.update(g.params.model_dump())

            if query is not None:
                g.query, found = run_schema(query, request.args.to_dict(), context)
                errors.extend(found)

            if errors:
                current_app.logger.debug(
                    "Validation failed for %s %s: %s", request.method, request.path, errors
                )
                return failure(VALIDATION_MESSAGE, 400, "VALIDATION_ERROR", errors)

            return view(*args, **kwargs)

        return wrapper

    return decorator


def validate_body(schema: type[BaseModel]) -> Callable:
    return validate(body=schema)


def validate_params(schema: type[BaseModel]) -> Callable:
    return validate(params=schema)


def validate_query(schema: type[BaseModel]) -> Callable:
    return validate(query=schema)
