from flask import current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

from models.schemas.user import first_error
from utils.responds import error as error_response


def register_error_handlers(app):
    # 400 Bad Request (generic, e.g. malformed JSON)
    @app.errorhandler(400)
    def bad_request(e):
        message = getattr(e, "description", "Bad request")
        return error_response(message, 400)

    # 404 Not Found
    @app.errorhandler(404)
    def not_found(e):
        return error_response("Resource not found", 404)

    # 405 Method Not Allowed
    @app.errorhandler(405)
    def method_not_allowed(e):
        return error_response("Method not allowed", 405)

    # Marshmallow validation errors that escape a workflow map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        if current_app and current_app.debug:
            logging.exception("Validation error", exc_info=err)
        return error_response(first_error(err), 422, details=err.messages)

    # Integrity errors (unique constraints, FK violations) that escape a workflow
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        logging.exception("Integrity error", exc_info=err)
        if "unique" in lower_msg or "duplicate" in lower_msg:
            return error_response("Unique constraint violated.", 409)
        return error_response("Integrity error.", 400)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description, err.code or 400)

    # 500 Internal Error (catch-all): raw message, never a stack trace
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logging.exception("Unhandled exception", exc_info=err)
        return error_response(str(err) or "Internal Error", 500)
