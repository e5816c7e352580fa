"""
Error taxonomy for the defect tracker.

Service code raises these; the handlers registered in ``create_app``
render them as ``{"success": false, "error": <message>}`` with the
matching HTTP status.
"""


class DefectTrackerError(Exception):
    """Base class for errors surfaced to API callers"""
    status_code = 500
    default_message = 'Something went wrong'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'success': False, 'error': self.message}


class ValidationError(DefectTrackerError):
    """Missing or malformed input; user-correctable"""
    status_code = 400
    default_message = 'Invalid request'


class AuthenticationError(DefectTrackerError):
    status_code = 401
    default_message = 'Access token required'


class PermissionDenied(DefectTrackerError):
    status_code = 403
    default_message = 'Access denied'


class NotFound(DefectTrackerError):
    """Stale or unknown id"""
    status_code = 404
    default_message = 'Not found'


class Conflict(DefectTrackerError):
    status_code = 409
    default_message = 'Conflict'


class InvalidTransition(DefectTrackerError):
    """Status change outside the allowed lifecycle"""
    status_code = 409
    default_message = 'Invalid status transition'


class StoreFailure(DefectTrackerError):
    """Underlying persistence error. Not retried."""
    status_code = 500
    default_message = 'Database operation failed'
