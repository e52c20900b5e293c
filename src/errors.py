"""
Error taxonomy for the Disaster Early Warning Platform

Every failure the service reports is one of these, rendered by the API as
{"success": false, "message": ..., "error": ...}.
"""

from typing import Optional


class PlatformError(Exception):
    """Base class for errors surfaced to API clients"""

    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class InvalidInput(PlatformError):
    """Missing or malformed request data"""

    status_code = 400


class NotFound(PlatformError):
    """Unknown identifier (alert id, disaster type)"""

    status_code = 404


class UpstreamFailure(PlatformError):
    """Third-party API or storage failure"""

    status_code = 500
