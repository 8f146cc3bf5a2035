"""
Domain exceptions raised by the service layer.
Each carries the HTTP status the API reports for it.
"""


class MindEaseError(Exception):
    """Base class for errors that are reported to the client."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MindEaseError):
    """Missing, blank or malformed input."""
    status_code = 400


class AuthenticationError(MindEaseError):
    """Bad credentials, or a volunteer account that is not approved yet."""
    status_code = 401


class NotFoundError(MindEaseError):
    status_code = 404


class ConflictError(MindEaseError):
    """Duplicate username or email."""
    status_code = 409


class PlacesAPIError(MindEaseError):
    """The places lookup failed or returned an error status."""
    status_code = 502


class PlacesNotConfiguredError(PlacesAPIError):
    status_code = 503
