"""pytest fixtures shared across the test suite."""
from __future__ import annotations

import sys
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from werkzeug.security import generate_password_hash

# Ensure the project root is available on sys.path so tests can import the app package.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from braids import create_app
from braids.auth import build_token
from braids.config import TestingConfig
from braids.extensions import db
from braids.models import Category, Product, Style, Stylist, User

PASSWORD = "Secret123"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(app, email="customer@example.com", role="CUSTOMER", name="Test Customer",
              password=PASSWORD, is_active=True) -> str:
    with app.app_context():
        user = User(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            is_active=is_active,
        )
        db.session.add(user)
        db.session.commit()
        return user.id


def token_for(app, user_id: str) -> str:
    with app.app_context():
        return build_token(db.session.get(User, user_id))


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_id(app) -> str:
    return make_user(app)


@pytest.fixture
def admin_id(app) -> str:
    return make_user(app, email="admin@example.com", role="ADMIN", name="Test Admin")


@pytest.fixture
def customer_headers(app, customer_id):
    return bearer(token_for(app, customer_id))


@pytest.fixture
def admin_headers(app, admin_id):
    return bearer(token_for(app, admin_id))


def make_stylist(app, **overrides) -> str:
    values = {
        "name": "Amara Okafor",
        "specialty": "Box braids and cornrows",
        "description": "Specialist in protective styles.",
    }
    values.update(overrides)
    with app.app_context():
        stylist = Stylist(**values)
        db.session.add(stylist)
        db.session.commit()
        return stylist.id


def make_style(app, **overrides) -> str:
    values = {
        "name": "Knotless Box Braids",
        "description": "Lightweight protective braids",
        "category": "Long",
        "estimated_time": 240,
    }
    values.update(overrides)
    with app.app_context():
        style = Style(**values)
        db.session.add(style)
        db.session.commit()
        return style.id


def make_product(app, **overrides) -> str:
    values = {
        "name": "Kanekalon Braiding Hair",
        "description": "Pre-stretched synthetic extensions",
        "price": Decimal("25.99"),
        "stock_quantity": 10,
        "category": "Extensions",
    }
    values.update(overrides)
    with app.app_context():
        product = Product(**values)
        db.session.add(product)
        db.session.commit()
        return product.id


def make_category(app, **overrides) -> str:
    values = {"name": "Extensions", "description": "Braiding hair", "display_order": 1}
    values.update(overrides)
    with app.app_context():
        category = Category(**values)
        db.session.add(category)
        db.session.commit()
        return category.id


def next_open_day(days_ahead: int = 2) -> date:
    """First Monday-Saturday at least ``days_ahead`` days from today (UTC)."""
    day = datetime.now(timezone.utc).date() + timedelta(days=days_ahead)
    while day.isoweekday() == 7:
        day += timedelta(days=1)
    return day


def next_slot(hour: int = 10, days_ahead: int = 2) -> str:
    """An ISO timestamp inside business hours, always bookable from now."""
    return datetime.combine(next_open_day(days_ahead), datetime.min.time()).replace(hour=hour).isoformat()
