"""
Error taxonomy and JSON error handlers

Every failure leaves the API as the standard envelope
{"success": false, "error": "..."} with a fixed HTTP status.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from tooltracker import db
from tooltracker.utils.responses import error_response

logger = logging.getLogger(__name__)

DATABASE_ERROR = 'Database operation failed'
INVALID_REQUEST_BODY = 'Invalid request body'
INVALID_UUID = 'Invalid UUID format'
JOB_NOT_FOUND = 'Job not found'
TOOL_NOT_FOUND = 'Tool not found'
TOOL_ALREADY_EXISTS = 'Tool with this TIN already exists'


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status"""
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(ApiError):
    """Malformed or missing input"""
    status_code = 400


class NotFoundError(ApiError):
    """Referenced identifier does not exist"""
    status_code = 404


class ConflictError(ApiError):
    """Request conflicts with current state"""
    status_code = 409


def register_error_handlers(app):
    """Install handlers converting every exception into the error envelope"""

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        if e.status_code >= 500:
            logger.error('%s: %s', type(e).__name__, e.message)
        else:
            logger.warning('Rejected request: %s (%d)', e.message, e.status_code)
        return error_response(e.message, e.status_code)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        db.session.rollback()
        logger.exception('Database error')
        return error_response(DATABASE_ERROR, 500)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        if e.code == 429:
            # e.description is set by Flask-Limiter and names the limit that was hit
            return error_response(f'Too many requests. Limit: {e.description}', 429)
        return error_response(e.description or e.name, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        logger.exception('Unhandled error')
        return error_response('An unexpected error occurred', 500)
