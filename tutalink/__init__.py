"""TutaLink peer-tutoring marketplace backend."""
from __future__ import annotations

from collections.abc import Mapping

from flask import Flask
from flask_cors import CORS

from .config import Config
from .errors import register_error_handlers
from .extensions import db, login_manager
from .routes import register_routes
from .seed import seed_defaults
from .sql_storage import SqlStorage
from .storage import STORAGE_EXTENSION_KEY, MemStorage, Storage


def _build_storage(app: Flask) -> Storage:
    backend = app.config["STORAGE_BACKEND"]
    if backend == "memory":
        return MemStorage()
    if backend == "sql":
        return SqlStorage()
    raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; expected 'memory' or 'sql'")


def create_app(config_object=None, storage: Storage | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)

    if isinstance(config_object, Mapping):
        app.config.from_mapping(config_object)
    elif config_object is not None:
        app.config.from_object(config_object)
    else:
        app.config.from_envvar("APP_SETTINGS", silent=True)

    db.init_app(app)
    login_manager.init_app(app)

    CORS(app,
         origins=app.config["CORS_ORIGINS"],
         supports_credentials=True,
         allow_headers=["Content-Type"],
         methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )

    storage = storage or _build_storage(app)
    app.extensions[STORAGE_EXTENSION_KEY] = storage

    register_error_handlers(app)
    register_routes(app)

    with app.app_context():
        if isinstance(storage, SqlStorage):
            storage.create_schema()
        if app.config["SEED_DEFAULTS"]:
            seed_defaults(app, storage)

    return app
