"""Exceptions for content gateway operations."""


class GatewayError(Exception):
    """Base exception for all content gateway operations."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GatewayAuthError(GatewayError):
    """Raised when the credential is rejected (401/403)."""


class GatewayNotFoundError(GatewayError):
    """Raised when the requested repository, ref or path does not exist."""


class GatewayConflictError(GatewayError):
    """Raised when a write carries a stale or missing revision marker."""


class GatewayRequestError(GatewayError):
    """Raised for any other non-success response or transport failure."""
