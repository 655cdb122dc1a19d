"""Schemas for user administration."""
from __future__ import annotations

from .auth import RegisterSchema, UserRole
from .common import (Email, PageQuery, PersonName, Phone, QueryFlag, SearchText,
                     UpdateSchema)


class CreateUserSchema(RegisterSchema):
    pass


class UpdateUserSchema(UpdateSchema):
    name: PersonName | None = None
    email: Email | None = None
    role: UserRole | None = None
    phone: Phone | None = None


class UsersQuery(PageQuery):
    role: UserRole | None = None
    search: SearchText | None = None
    include_inactive: QueryFlag = False
