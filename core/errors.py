"""Exception hierarchy shared by the infrastructure and UI layers."""

from __future__ import annotations


class GalleryError(Exception):
    """Base class for all gallery errors."""


class ApiError(GalleryError):
    """A backend request failed.

    Attributes:
        status: HTTP status code, or None for transport failures.
        message: Server-provided or transport error message.
    """

    def __init__(self, status: int | None, message: str) -> None:
        super().__init__(message if status is None else f"HTTP {status}: {message}")
        self.status = status
        self.message = message


class AuthenticationError(ApiError):
    """No authentication token is configured."""

    def __init__(self, message: str = "No authentication token") -> None:
        super().__init__(None, message)


class SessionExpiredError(ApiError):
    """The backend rejected the token (HTTP 401)."""

    def __init__(self, message: str = "Session expired") -> None:
        super().__init__(401, message)
