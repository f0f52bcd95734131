"""Session client failures.

None of these are retried by the client. Callers decide:
AuthError means sign out, ApiError/NetworkError are retryable,
ProtocolError is a client/server contract mismatch.
"""

from __future__ import annotations


class SessionError(Exception):
    """Base for every failure raised by SessionClient."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProtocolError(SessionError):
    """Response was not the JSON the client expects."""


class AuthError(SessionError):
    """Server answered 401. The access token has already been cleared."""

    def __init__(self, message: str = "unauthorized") -> None:
        super().__init__(message, status_code=401)


class ApiError(SessionError):
    """Non-2xx other than 401, or a `success: false` envelope."""


class NetworkError(SessionError):
    """No response arrived (connect, DNS, timeout)."""
