"""Exceptions for agent operations."""


class AgentError(Exception):
    """Base exception for all agent operations."""


class UndoPreconditionError(AgentError):
    """Raised when a commit cannot be undone (e.g. it has no parent)."""
