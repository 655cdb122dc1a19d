"""Registration, login and token lifecycle endpoints."""
from __future__ import annotations

from flask import Blueprint, current_app, g, request
from werkzeug.security import check_password_hash, generate_password_hash

from ..auth import auth_payload, current_user, require_auth
from ..errors import Forbidden, Unauthorized, ValidationFailed, success
from ..models import User
from ..rules import ensure_unique_email
from ..schemas.auth import ChangePasswordSchema, LoginSchema, RegisterSchema
from ..store import Repository
from ..validation import validate

bp = Blueprint("auth", __name__)
users = Repository(User)


def _caller_is_admin() -> bool:
    # Registration is public; a bearer token only matters when an admin account is requested.
    if not request.headers.get("Authorization"):
        return False
    return current_user().role == "ADMIN"


@bp.post("/auth/register")
@validate(body=RegisterSchema)
def register() -> tuple[dict[str, object], int]:
    """Create a customer account and return a bearer token.
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name, email, password]
          properties:
            name:
              type: string
            email:
              type: string
            password:
              type: string
            phone:
              type: string
    responses:
      201:
        description: Account created
      400:
        description: Invalid request data
      409:
        description: Email already registered
    """
    data = g.body
    if data.role == "ADMIN" and not _caller_is_admin():
        raise Forbidden("Only administrators can create administrator accounts")

    ensure_unique_email(data.email)
    user = users.insert(
        name=data.name,
        email=data.email,
        password_hash=generate_password_hash(data.password),
        role=data.role,
        phone=data.phone,
    )
    current_app.logger.info("Registered user %s", user.id)
    return success(auth_payload(user), "User registered successfully", 201)


@bp.post("/auth/login")
@validate(body=LoginSchema)
def login() -> tuple[dict[str, object], int]:
    """Exchange email and password for a bearer token.
    ---
    tags:
      - Auth
    responses:
      200:
        description: Authenticated
      401:
        description: Invalid credentials
    """
    user = users.find_one(User.email == g.body.email)
    if user is None or not user.is_active or not check_password_hash(user.password_hash, g.body.password):
        current_app.logger.warning("Failed login for %s", g.body.email)
        raise Unauthorized("Invalid email or password", "INVALID_CREDENTIALS")

    return success(auth_payload(user), "Login successful")


@bp.get("/auth/profile")
@require_auth
def profile() -> tuple[dict[str, object], int]:
    return success(g.user.to_dict())


@bp.put("/auth/change-password")
@require_auth
@validate(body=ChangePasswordSchema)
def change_password() -> tuple[dict[str, object], int]:
    if not check_password_hash(g.user.password_hash, g.body.current_password):
        raise ValidationFailed([{
            "field": "current_password",
            "message": "Current password is incorrect",
            "code": "invalid_password",
        }])

    users.update(g.user, {"password_hash": generate_password_hash(g.body.new_password)})
    current_app.logger.info("Password changed for user %s", g.user.id)
    return success(None, "Password updated successfully")


@bp.post("/auth/logout")
@require_auth
def logout() -> tuple[dict[str, object], int]:
    # Tokens are stateless; the client discards its copy.
    return success(None, "Logged out successfully")


@bp.post("/auth/refresh")
@require_auth
def refresh() -> tuple[dict[str, object], int]:
    return success(auth_payload(g.user), "Token refreshed")
