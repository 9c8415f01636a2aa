"""Application error taxonomy and the uniform JSON error envelope.

Every error response has the shape ``{"success": false, "message": ...}``,
with an optional ``errors`` list for field-level validation details.
"""
import logging
from flask import jsonify, request
from pydantic import ValidationError as SchemaValidationError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    default_message = 'Internal Server Error'

    def __init__(self, message=None, errors=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.errors = errors

    def to_dict(self):
        payload = {'success': False, 'message': self.message}
        if self.errors:
            payload['errors'] = self.errors
        return payload


class ValidationError(AppError):
    status_code = 400
    default_message = 'Validation Error'


class UnauthorizedError(AppError):
    status_code = 401
    default_message = 'Not authorized to access this route'


class ForbiddenError(AppError):
    status_code = 403
    default_message = 'Access denied. Admin privileges required.'


class NotFoundError(AppError):
    status_code = 404
    default_message = 'Not found'


class ConflictError(AppError):
    status_code = 409
    default_message = 'Conflict'


class UpstreamError(AppError):
    status_code = 502
    default_message = 'External service unavailable'


class InternalError(AppError):
    status_code = 500


def schema_errors(exc):
    """Flatten a pydantic ValidationError into ``[{field, message}]``."""
    details = []
    for error in exc.errors():
        field = '.'.join(str(part) for part in error.get('loc', ()))
        message = error.get('msg', 'Invalid value')
        if message.startswith('Value error, '):
            message = message[len('Value error, '):]
        details.append({'field': field, 'message': message})
    return details


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(error):
        if error.status_code >= 500:
            logger.error(f"{request.method} {request.path} failed: {error.message}")
        else:
            logger.info(f"{request.method} {request.path} -> {error.status_code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(error):
        details = schema_errors(error)
        message = ', '.join(f"{d['field']}: {d['message']}" if d['field'] else d['message'] for d in details)
        return jsonify({'success': False, 'message': message or 'Validation Error', 'errors': details}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if error.code == 404:
            message = f'Route not found: {request.method} {request.path}'
        else:
            message = error.description
        return jsonify({'success': False, 'message': message}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({'success': False, 'message': 'Internal Server Error'}), 500
