"""Exceptions for the persistence sink."""


class StoreError(Exception):
    """Raised when a history store operation is invalid or fails."""
