"""Configuration objects for the TutaLink backend."""
from __future__ import annotations

import os
from datetime import timedelta


class Config:
    SECRET_KEY = os.environ.get("SESSION_SECRET", "tutalink_secret_key")

    # "memory" keeps everything in process; "sql" uses SQLALCHEMY_DATABASE_URI.
    STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "memory")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = os.environ.get("FLASK_ENV") == "production"

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Business rules
    MIN_TUTOR_CWA = 3.4
    TRANSCRIPT_PLACEHOLDER_PATH = "/uploads/transcripts/sample.pdf"
    DEFAULT_TUTOR_RATING = 0.0
    DEFAULT_TUTOR_PRICE = 50
    RECOMMENDED_TUTOR_LIMIT = 3
    RECENT_REVIEW_LIMIT = 5

    # Seed data
    SEED_DEFAULTS = True
    ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME", "admin")
    ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@tutalink.com")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing-secret"
    STORAGE_BACKEND = "memory"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SESSION_COOKIE_SECURE = False
