"""
Error taxonomy for the dashboard service.

  ValidationFailed       -- blocked locally, no backend call was made
  NotFound               -- unknown id in a sample-data screen or sequence
  AuthenticationExpired  -- backend answered 401 / no dashboard session
  BackendError           -- backend answered 4xx/5xx
  BackendUnavailable     -- transport failure or timeout reaching the backend

Every error renders as the standard failure envelope:
  {"success": false, "error": {"code", "message"}, "notices": [...], "requestId"}
"""

from __future__ import annotations

from typing import Optional


class DashboardError(Exception):
    """Base class. Subclasses fix the error code and default HTTP status."""

    code = "INTERNAL_ERROR"
    status_code = 500
    title = "Error"

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        # Notices to show instead of the default one derived from the message
        self.notices: list = []
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(DashboardError):
    code = "VALIDATION_ERROR"
    status_code = 422
    title = "Invalid input"


class NotFound(DashboardError):
    code = "NOT_FOUND"
    status_code = 404
    title = "Not found"


class AuthenticationExpired(DashboardError):
    code = "UNAUTHORIZED"
    status_code = 401
    title = "Session expired"


class BackendError(DashboardError):
    code = "BACKEND_ERROR"
    status_code = 502
    title = "Request failed"

    def __init__(self, message: str, *, backend_status: Optional[int] = None):
        # Backend 4xx (other than 401) pass through so the UI can tell a bad
        # request from an outage; 5xx collapse to 502.
        status = backend_status if backend_status and 400 <= backend_status < 500 else 502
        super().__init__(message, status_code=status)
        self.backend_status = backend_status


class BackendUnavailable(DashboardError):
    code = "BACKEND_UNAVAILABLE"
    status_code = 503
    title = "Service unavailable"
