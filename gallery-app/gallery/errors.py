"""
API errors and the JSON error handlers shared by both servers.

Services raise these; the handlers turn them into ``{"message": ...}``
responses with the matching status code.
"""

from flask import jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from gallery.logging_config import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401


class PermissionDenied(ApiError):
    status_code = 403


class NotFound(ApiError):
    status_code = 404


class Conflict(ApiError):
    status_code = 409


class RateLimited(ApiError):
    status_code = 429


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify({"message": error.message}), error.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        return jsonify({"message": "Upload too large."}), 413

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("unhandled_error", error_type=type(error).__name__)
        return jsonify({"message": "Internal error"}), 500
