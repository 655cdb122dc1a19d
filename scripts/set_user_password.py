"""Create an account or reset its password for local development.

This is how the first administrator is bootstrapped, since registering an
ADMIN through the API needs an existing admin token.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from werkzeug.security import generate_password_hash

# Ensure the project root is on sys.path so ``braids`` can be imported when the script is executed directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from braids import create_app
from braids.extensions import db
from braids.models import USER_ROLES, User

DEFAULT_NAMES = {"CUSTOMER": "Customer User", "ADMIN": "Admin User"}


def set_password(email: str, password: str, role: str = "CUSTOMER", app=None) -> User:
    app = app or create_app()
    email = email.strip().lower()

    with app.app_context():
        user = db.session.scalars(db.select(User).filter_by(email=email)).first()
        if user is None:
            user = User(name=DEFAULT_NAMES[role], email=email, role=role, password_hash="")
            db.session.add(user)
            print(f"Created new {role} user: {email}")
        elif user.role != role:
            print(f"Updating user role from '{user.role}' to '{role}'")
            user.role = role

        user.password_hash = generate_password_hash(password)
        user.is_active = True
        db.session.commit()

        print(f"Password for {role} user '{email}' has been set successfully.")
        return user


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Set a user password for local testing.")
    parser.add_argument("email", help="User email address")
    parser.add_argument("password", help="Plain-text password to hash and store")
    parser.add_argument(
        "--role",
        choices=USER_ROLES,
        default="CUSTOMER",
        help="User role (default: CUSTOMER)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    set_password(args.email, args.password, args.role)


if __name__ == "__main__":
    main()
