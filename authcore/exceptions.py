"""
Error kinds raised by the authentication core.

Authentication errors are ValueError subclasses, so callers that already
translate ValueError into an HTTP error keep working. Store readiness
failures are a RuntimeError.
"""


class AuthError(ValueError):
    """Base class for authentication errors."""


class UserAlreadyExists(AuthError):
    """Email or username is already taken by another record."""

    def __init__(self, message: str = "User already exists"):
        super().__init__(message)


class InvalidCredentials(AuthError):
    """Identifier or password did not match. Never says which one."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class UserNotFound(AuthError):
    """No record with the given id."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class InvalidToken(AuthError):
    """Token is forged, malformed, expired, stale or points to a deleted user."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class StoreNotReady(RuntimeError):
    """The store connection did not become ready in time. Not a client error."""

    def __init__(self, message: str = "Database connection is not ready"):
        super().__init__(message)
