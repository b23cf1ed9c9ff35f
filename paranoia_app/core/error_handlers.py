"""
Error handling for the application.

Route-level access failures raise ``PermissionDeniedError``; API paths get a
JSON body, pages get a rendered error page.
"""

from typing import Any, Dict, Optional

from flask import current_app, jsonify, render_template, request


class ParanoiaAppError(Exception):
    """Base exception carrying an HTTP status and a machine-readable code."""

    status_code = 500
    code = 'APP_ERROR'

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {
            'success': False,
            'message': self.message,
            'code': self.code,
            'details': self.details,
        }


class PermissionDeniedError(ParanoiaAppError):
    """The current user lacks ``permission_key``."""

    status_code = 403
    code = 'PERMISSION_DENIED'

    def __init__(self, permission_key: str, message: str = 'Permission denied'):
        super().__init__(message, details={'permission_key': permission_key})
        self.permission_key = permission_key


def _wants_json() -> bool:
    return '/api/' in request.path or request.accept_mimetypes.best == 'application/json'


def success_response(data: Any = None, message: str = None) -> dict:
    response = {'success': True}
    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message
    return response


def register_error_handlers(app):

    @app.errorhandler(ParanoiaAppError)
    def handle_app_error(error):
        current_app.logger.warning(f"{error.code} on {request.path}: {error.message} {error.details}")
        if _wants_json():
            return jsonify(error.to_dict()), error.status_code
        return render_template('error.html', error=error), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        if _wants_json():
            return jsonify({'success': False, 'message': 'Not found', 'code': 'NOT_FOUND'}), 404
        return error

    @app.errorhandler(500)
    def handle_internal_error(error):
        current_app.logger.exception('Internal server error')
        if _wants_json():
            return jsonify({'success': False, 'message': 'Internal server error', 'code': 'SERVER_ERROR'}), 500
        return error
