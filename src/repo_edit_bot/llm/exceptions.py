"""Exceptions raised by generation backends."""


class BackendError(Exception):
    """Generic generation backend failure."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class BackendRateLimitError(BackendError):
    """Raised when the backend signals rate limiting (HTTP 429)."""


class BackendAuthError(BackendError):
    """Raised when the backend rejects the credential. Never retried."""


class BackendQuotaError(BackendError):
    """Raised when the backend reports exhausted credits or quota (HTTP 402)."""
