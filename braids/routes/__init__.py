"""Blueprint registration for every HTTP surface of the service."""
from __future__ import annotations

from flask import Flask

from .appointments import bp as appointments_bp
from .auth import bp as auth_bp
from .categories import bp as categories_bp
from .health import bp as health_bp
from .orders import bp as orders_bp
from .products import bp as products_bp
from .reviews import bp as reviews_bp
from .styles import bp as styles_bp
from .stylists import bp as stylists_bp
from .users import bp as users_bp

BLUEPRINTS = (
    health_bp,
    auth_bp,
    users_bp,
    styles_bp,
    stylists_bp,
    categories_bp,
    products_bp,
    appointments_bp,
    reviews_bp,
    orders_bp,
)


def register_routes(app: Flask) -> None:
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
