"""User account management."""
from __future__ import annotations

from flask import Blueprint, current_app, g
from sqlalchemy import or_
from werkzeug.security import generate_password_hash

from ..auth import ensure_owner_or_admin, is_admin, require_admin, require_auth
from ..errors import Forbidden, NotFound, success
from ..models import User
from ..rules import ensure_unique_email
from ..schemas.common import IdParams
from ..schemas.users import CreateUserSchema, UpdateUserSchema, UsersQuery
from ..store import Repository, ordering
from ..validation import validate

bp = Blueprint("users", __name__)
users = Repository(User)


def _get_user(user_id: str) -> User:
    user = users.get(user_id)
    if user is None or (not user.is_active and not is_admin()):
        raise NotFound("User not found", "USER_NOT_FOUND")
    return user


@bp.get("/users")
@require_admin
@validate(query=UsersQuery)
def list_users() -> tuple[dict[str, object], int]:
    """List user accounts (admin only).
    ---
    tags:
      - Users
    parameters:
      - name: role
        in: query
        type: string
        enum: [CUSTOMER, ADMIN]
      - name: search
        in: query
        type: string
        description: Partial match on name or email
      - name: include_inactive
        in: query
        type: boolean
        default: false
      - name: page
        in: query
        type: integer
        default: 1
      - name: limit
        in: query
        type: integer
        default: 20
    responses:
      200:
        description: Users with pagination metadata
      401:
        description: Missing or invalid token
      403:
        description: Caller is not an administrator
    """
    query = g.query
    criteria = []
    if not query.include_inactive:
        criteria.append(User.is_active.is_(True))
    if query.role:
        criteria.append(User.role == query.role)
    if query.search:
        pattern = f"%{query.search}%"
        criteria.append(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

    page = users.paginate(criteria, [ordering(User, "created_at", "desc")], query.page, query.limit)
    return success([user.to_dict() for user in page.items], pagination=page.pagination())


@bp.post("/users")
@require_admin
@validate(body=CreateUserSchema)
def create_user() -> tuple[dict[str, object], int]:
    data = g.body
    ensure_unique_email(data.email)
    user = users.insert(
        name=data.name,
        email=data.email,
        password_hash=generate_password_hash(data.password),
        role=data.role,
        phone=data.phone,
    )
    current_app.logger.info("Admin %s created user %s", g.user.id, user.id)
    return success(user.to_dict(), "User created successfully", 201)


@bp.get("/users/<id>")
@require_auth
@validate(params=IdParams)
def get_user(id: str) -> tuple[dict[str, object], int]:
    ensure_owner_or_admin(id)
    return success(_get_user(id).to_dict())


@bp.put("/users/<id>")
@require_auth
@validate(params=IdParams, body=UpdateUserSchema)
def update_user(id: str) -> tuple[dict[str, object], int]:
    ensure_owner_or_admin(id)
    user = _get_user(id)
    changes = g.body.changes()

    if "role" in changes and changes["role"] != user.role and not is_admin():
        raise Forbidden("Only administrators can change roles")
    if "email" in changes:
        ensure_unique_email(changes["email"], exclude_id=user.id)

    users.update(user, changes)
    return success(user.to_dict(), "User updated successfully")


@bp.delete("/users/<id>")
@require_admin
@validate(params=IdParams)
def delete_user(id: str):
    user = users.get_active(id)
    if user is None:
        raise NotFound("User not found", "USER_NOT_FOUND")

    users.soft_delete(user)
    current_app.logger.info("User %s deactivated by %s", user.id, g.user.id)
    return "", 204
