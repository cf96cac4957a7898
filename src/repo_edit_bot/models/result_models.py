"""Result models returned by the pipeline and undo entry points."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Intent(str, Enum):
    """Classification of a user utterance."""

    CONVERSATION = "chat"
    EDIT_REQUEST = "code"


class ProjectType(str, Enum):
    """Coarse project archetype used to tailor generation instructions."""

    NEXTJS = "nextjs"
    VITE_REACT = "vite-react"
    REACT = "react"
    STATIC_HTML = "static-html"
    GENERIC = "generic"


class FailureKind(str, Enum):
    """Tag carried by errors that escape an entry point."""

    CREDENTIAL = "credential"
    BACKEND = "backend"
    GATEWAY = "gateway"
    PRECONDITION = "precondition"
    UNEXPECTED = "unexpected"


class SafetyVerdict(BaseModel):
    model_config = ConfigDict(frozen=False)

    allowed: bool
    offending_path: str | None = None
    message: str | None = None


class CommitFailure(BaseModel):
    model_config = ConfigDict(frozen=False)

    path: str
    error: str


class ApplyReport(BaseModel):
    model_config = ConfigDict(frozen=False)

    changed_paths: list[str] = Field(default_factory=list)
    errors: list[CommitFailure] = Field(default_factory=list)
    commit_sha: str | None = None  # Commit created by the last successful write
    commit_shas: list[str] = Field(default_factory=list)  # One per successful write, oldest first

    @property
    def all_failed(self) -> bool:
        return not self.changed_paths and bool(self.errors)


class PipelineResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    response: str
    files_changed: list[str] = Field(default_factory=list)
    commit_sha: str | None = None
    commit_shas: list[str] = Field(default_factory=list)
    commit_message: str | None = None
    intent: Intent = Intent.CONVERSATION


class UndoResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    commit_sha: str
    files_reverted: list[str] = Field(default_factory=list)
