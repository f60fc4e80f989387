# showroom/errors.py
"""
API errors and the JSON handlers that turn them into responses.

Every failure surfaces on the same request as {"error": "..."}.
"""

from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import RequestEntityTooLarge

from .extensions import db


class ShowroomError(Exception):
    status_code = 500
    message = "Internal error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(ShowroomError):
    status_code = 400
    message = "Invalid request"


class AuthenticationError(ShowroomError):
    status_code = 401
    message = "Unauthorized. Please login."


class NotFoundError(ShowroomError):
    status_code = 404
    message = "Not found"


class PayloadTooLarge(ShowroomError):
    status_code = 413
    message = "File too large (max 10MB)"


class UserExistsError(ShowroomError):
    status_code = 409

    def __init__(self, username):
        super().__init__(f"Username '{username}' already exists")
        self.username = username


def storage_message(exc: Exception) -> str:
    """Underlying driver message for a storage failure (passed through as-is)."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def register_error_handlers(app):
    @app.errorhandler(ShowroomError)
    def handle_showroom_error(e):
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        return jsonify({"error": PayloadTooLarge.message}), 413

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(e):
        db.session.rollback()
        current_app.logger.exception("Storage failure")
        return jsonify({"error": storage_message(e)}), 500

    @app.errorhandler(OSError)
    def handle_io_error(e):
        current_app.logger.exception("I/O failure")
        return jsonify({"error": str(e)}), 500

    @app.errorhandler(404)
    def handle_unknown_route(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def handle_bad_method(e):
        return jsonify({"error": "Method not allowed"}), 405
