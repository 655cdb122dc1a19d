"""Bearer token issuing and the access decorators used by the blueprints."""
from __future__ import annotations

import time
from functools import wraps
from typing import Callable

from flask import current_app, g, request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from .errors import Forbidden, Unauthorized
from .extensions import db
from .models import User

TOKEN_SALT = "auth-token"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def build_token(user: User) -> str:
    issued_at = int(time.time())
    return _serializer().dumps({
        "user_id": user.id,
        "email": user.email,
        "role": user.role,
        "iat": issued_at,
        "exp": issued_at + current_app.config["TOKEN_MAX_AGE"],
    })


def auth_payload(user: User) -> dict[str, object]:
    """Token plus the public user fields returned by login, register and refresh."""
    return {
        "token": build_token(user),
        "user": user.to_dict(),
        "expires_in": current_app.config["TOKEN_MAX_AGE"],
    }


def decode_token(token: str) -> dict[str, object]:
    try:
        return _serializer().loads(token, max_age=current_app.config["TOKEN_MAX_AGE"])
    except SignatureExpired as exc:
        raise Unauthorized("Token has expired", "EXPIRED_TOKEN") from exc
    except BadSignature as exc:
        raise Unauthorized("Token is invalid", "INVALID_TOKEN") from exc


def current_user() -> User:
    """Resolve the user behind the Authorization header, or raise."""
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer ") or not header[7:].strip():
        raise Unauthorized("Access token is required", "MISSING_TOKEN")

    payload = decode_token(header[7:].strip())
    user_id = payload.get("user_id")
    user = db.session.get(User, user_id) if user_id else None
    if user is None or not user.is_active:
        raise Unauthorized("Token is invalid", "INVALID_TOKEN")
    return user


def require_auth(view: Callable) -> Callable:
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.user = current_user()
        return view(*args, **kwargs)

    return wrapper


def require_admin(view: Callable) -> Callable:
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.user = current_user()
        if g.user.role != "ADMIN":
            raise Forbidden("Administrator privileges are required")
        return view(*args, **kwargs)

    return wrapper


def is_admin() -> bool:
    user = g.get("user")
    return user is not None and user.role == "ADMIN"


def ensure_owner_or_admin(owner_id: str, message: str = "You do not have access to this resource") -> None:
    if not is_admin() and g.user.id != owner_id:
        raise Forbidden(message)
