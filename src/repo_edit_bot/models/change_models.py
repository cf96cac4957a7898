"""Models for generated change sets."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EditAction(str, Enum):
    """How a file edit lands on the remote repository."""

    CREATE = "create"
    UPDATE = "update"


class FileEdit(BaseModel):
    """A full replacement body for one path.

    ``content`` is always the complete file, never a patch. It is optional
    only so that a model response omitting it can still be parsed and then
    rejected downstream.
    """

    model_config = ConfigDict(frozen=False)

    path: str = ""
    action: EditAction = EditAction.UPDATE
    content: str | None = None


class ChangeSet(BaseModel):
    """Structured output of the change generator."""

    model_config = ConfigDict(frozen=False)

    explanation: str | None = ""
    changes: list[FileEdit] = Field(default_factory=list)
    commit_message: str | None = None


class ParseStatus(str, Enum):
    SUCCESS = "success"
    MALFORMED = "malformed"
    EMPTY = "empty"


class GenerationOutcome(BaseModel):
    """Tagged result of parsing untrusted model output into a change set."""

    model_config = ConfigDict(frozen=False)

    status: ParseStatus
    change_set: ChangeSet | None = None
    message: str = ""  # User-facing text for MALFORMED / EMPTY outcomes

    @property
    def is_actionable(self) -> bool:
        return self.status == ParseStatus.SUCCESS and self.change_set is not None
