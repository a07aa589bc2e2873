"""API error types and the JSON error handlers registered on the app."""
from __future__ import annotations

from flask import Flask, current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .extensions import db


class ApiError(Exception):
    """Base class for failures that map onto an HTTP status and a JSON body."""

    status_code = 500
    error = "internal_error"
    message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, error: str | None = None) -> None:
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        if error is not None:
            self.error = error

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error, "message": self.message}


class ValidationError(ApiError):
    status_code = 400
    error = "invalid_payload"
    message = "Invalid request payload"


class AuthenticationError(ApiError):
    status_code = 401
    error = "unauthorized"
    message = "Authentication required"


class ForbiddenError(ApiError):
    status_code = 403
    error = "forbidden"
    message = "You do not have permission to perform this action"


class NotFoundError(ApiError):
    status_code = 404
    error = "not_found"
    message = "Resource not found"


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def handle_api_error(exc: ApiError):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc: SQLAlchemyError):
        db.session.rollback()
        current_app.logger.exception("Database operation failed", exc_info=exc)
        return jsonify({"error": "database_error", "message": "A database error occurred"}), 500

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        error = (exc.name or "error").lower().replace(" ", "_")
        return jsonify({"error": error, "message": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        current_app.logger.exception("Unhandled error", exc_info=exc)
        return jsonify({"error": "internal_error", "message": ApiError.message}), 500
