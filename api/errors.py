from flask import jsonify, current_app
from werkzeug.exceptions import (
    HTTPException,
    BadRequest,
    Unauthorized,
    Forbidden,
    NotFound,
    Conflict,
    InternalServerError,
)
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """
    Base for the API error kinds.
    Subclasses reuse werkzeug's status codes, so views can either raise them
    directly or keep using abort(<code>, description=...).
    """

    def __init__(self, description: str | None = None, errors: list | None = None):
        super().__init__(description=description)
        self.errors = errors or []


class ValidationError(ApiError, BadRequest):
    pass


class AuthError(ApiError, Unauthorized):
    pass


class ForbiddenError(ApiError, Forbidden):
    pass


class NotFoundError(ApiError, NotFound):
    pass


class ConflictError(ApiError, Conflict):
    pass


class InternalError(ApiError, InternalServerError):
    pass


def error_response(message: str, status: int, errors: list | None = None):
    payload = {
        "statusCode": status,
        "data": None,
        "message": message,
        "success": False,
        "errors": errors or [],
    }
    return jsonify(payload), status


def register_error_handlers(app):
    # Marshmallow validation errors are bad input -> 400
    @app.errorhandler(SchemaValidationError)
    def handle_validation_error(err: SchemaValidationError):
        messages = err.messages
        if isinstance(messages, dict):
            errors = [{"field": k, "messages": v} for k, v in messages.items()]
        else:
            errors = list(messages)
        return error_response("Invalid input", 400, errors=errors)

    # Integrity errors (unique constraints, FK violations, check constraints)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err)).lower()
        if current_app and current_app.debug:
            logger.exception("Integrity error", exc_info=err)
        if "unique constraint" in message or "unique violation" in message:
            return error_response("Unique constraint violated.", 409)
        if "foreign key" in message:
            return error_response("Foreign key constraint failed.", 400)
        return error_response("Integrity error.", 400)

    # Any other database failure (timeouts, lost connections) is an internal error
    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err: SQLAlchemyError):
        logger.exception("Database error", exc_info=err)
        return error_response("An unexpected error occurred", 500)

    # Werkzeug HTTPExceptions (and our ApiError kinds) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 500
        if status >= 500:
            logger.error("Request failed with %s: %s", status, err.description)
        return error_response(err.description or err.name, status, getattr(err, "errors", None))

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        errors = None
        if current_app and current_app.debug:
            errors = [{"type": err.__class__.__name__, "message": str(err)}]
        return error_response("An unexpected error occurred", 500, errors=errors)
