"""Application error types.

Route handlers raise these; the handlers registered in ``catgallery.main``
turn the ones that escape into redirects or error pages.
"""


class AppError(Exception):
    """Base class for errors raised by the application."""


class ValidationError(AppError):
    """Submitted form data is missing or malformed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(AppError):
    """Credentials did not match a stored user."""

    def __init__(self, message: str = "User and password not found."):
        super().__init__(message)
        self.message = message


class AuthorizationError(AppError):
    """The request lacks a session or the session lacks the required role."""

    def __init__(self, redirect_to: str | None = None):
        super().__init__(redirect_to or "Not authorized")
        self.redirect_to = redirect_to


class StoreError(AppError):
    """The database rejected or failed an operation."""


class ConflictError(StoreError):
    """A write violated a uniqueness constraint."""
