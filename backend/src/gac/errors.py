"""API error taxonomy.

Every error carries the HTTP status it maps to and a message that is safe
to return to the caller. The exception handlers in ``gac.api.main`` render
them into the standard response envelope.
"""


class ApiError(Exception):
    """Base class for errors surfaced through the response envelope."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClientInputError(ApiError):
    """Missing or invalid fields, malformed body, empty search keyword."""
    status_code = 400


class AuthenticationError(ApiError):
    """Caller is not authenticated."""
    status_code = 401


class AuthorizationError(ApiError):
    """Caller is authenticated but lacks the required role."""
    status_code = 403


class NotFoundError(ApiError):
    """Requested record does not exist."""
    status_code = 404


class MethodNotAllowedError(ApiError):
    """Wrong HTTP verb for the operation."""
    status_code = 405


class ConstraintViolationError(ApiError):
    """Delete blocked by a foreign reference."""
    status_code = 400


class PersistenceError(ApiError):
    """Unexpected store failure."""
    status_code = 500
