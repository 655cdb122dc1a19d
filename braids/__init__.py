from __future__ import annotations

from collections.abc import Mapping

from flask import Flask

from .config import Config
from .errors import register_error_handlers
from .extensions import cors, db
from .routes import register_routes


def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)

    if config_object is None:
        app.config.from_object(Config)
        app.config.from_envvar("APP_SETTINGS", silent=True)
    elif isinstance(config_object, Mapping):
        app.config.from_object(Config)
        app.config.from_mapping(config_object)
    else:
        app.config.from_object(config_object)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)

    # Allow the frontend to talk to the backend
    cors.init_app(
        app,
        origins=app.config["CORS_ORIGINS"],
        supports_credentials=True,
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    )

    register_error_handlers(app)
    register_routes(app)

    with app.app_context():
        db.create_all()

    return app
