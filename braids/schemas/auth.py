"""Schemas for registration, login and password changes."""
from __future__ import annotations

from pydantic import Field, model_validator

from ..models import USER_ROLES
from .common import Email, Password, PersonName, Phone, Schema, choice, fail

UserRole = choice(USER_ROLES, "Role")


class LoginSchema(Schema):
    email: Email
    password: str = Field(min_length=1)


class RegisterSchema(Schema):
    name: PersonName
    email: Email
    password: Password
    role: UserRole = "CUSTOMER"
    phone: Phone | None = None


class ChangePasswordSchema(Schema):
    current_password: str = Field(min_length=1)
    new_password: Password
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise fail("password_mismatch", "Passwords do not match", "confirm_password")
        return self
