"""Configuration objects loaded by ``create_app``."""
from __future__ import annotations

import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///braids.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Bearer tokens expire after this many seconds.
    TOKEN_MAX_AGE = int(os.environ.get("TOKEN_MAX_AGE", 24 * 60 * 60))

    # Appointment opening hours are evaluated in this zone.
    BUSINESS_TIMEZONE = os.environ.get("BUSINESS_TIMEZONE", "UTC")

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    TOKEN_MAX_AGE = 60 * 60
    BUSINESS_TIMEZONE = "UTC"
    LOG_LEVEL = "DEBUG"
