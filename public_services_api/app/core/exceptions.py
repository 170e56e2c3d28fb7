"""
Domain exceptions shared by the service layer and the API.

Services raise these instead of ``HTTPException`` so they stay usable
outside of a request.  ``main.create_app`` registers a handler that
turns any ``AppError`` into a JSON body ``{"error": message}`` with
the exception's ``status_code``.
"""


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 400

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__name__


class UnauthorizedError(AppError):
    """Missing, invalid or expired bearer token."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class PermissionDeniedError(AppError):
    """The caller is authenticated but does not own the record."""

    status_code = 403

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404


class ValidationError(AppError):
    status_code = 400


class StoreError(AppError):
    """An operation on the key-value store failed.

    Reported to clients exactly like a validation failure.
    """

    status_code = 400
