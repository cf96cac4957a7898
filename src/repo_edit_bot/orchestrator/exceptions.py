"""Exceptions for orchestrator operations."""

from repo_edit_bot.models import FailureKind


class OrchestratorError(Exception):
    """Base exception for all orchestrator operations."""


class GraphBuildError(OrchestratorError):
    """Raised when graph construction fails."""


class PipelineError(OrchestratorError):
    """Terminal failure of an entry point, tagged with its kind."""

    def __init__(self, message: str, kind: FailureKind = FailureKind.UNEXPECTED) -> None:
        super().__init__(message)
        self.kind = kind
