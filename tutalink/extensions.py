"""Shared Flask extensions for the application."""
from __future__ import annotations

from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy

# SQLAlchemy database instance shared across the app (used by SqlStorage).
db = SQLAlchemy()

# Cookie-session login manager; its user loader lives in tutalink.auth.
login_manager = LoginManager()
