"""Errors raised by the session API and how they are rendered over HTTP."""

from flask import jsonify


class WhiteboardError(Exception):
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(WhiteboardError):
    """A required field was missing from the request."""
    status_code = 400
    message = 'Invalid request'


class NotFoundError(WhiteboardError):
    """No stored session for the requested room."""
    status_code = 404
    message = 'Session not found'


class StorageError(WhiteboardError):
    """The database failed; the cause is logged, never sent to the client."""
    status_code = 500
    message = 'Storage failure'


def register_error_handlers(app):
    @app.errorhandler(WhiteboardError)
    def handle_whiteboard_error(error):
        return jsonify(error.to_dict()), error.status_code
