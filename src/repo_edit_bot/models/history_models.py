"""Models written to the persistence sink."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TurnRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ConversationTurn(BaseModel):
    model_config = ConfigDict(frozen=False)

    role: TurnRole
    content: str
    files_changed: list[str] = Field(default_factory=list)
    user_id: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    def as_message(self) -> dict[str, str]:
        """Role-tagged message for a generation backend."""
        return {"role": self.role.value, "content": self.content}


class CommitRecord(BaseModel):
    model_config = ConfigDict(frozen=False)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    commit_sha: str
    commit_shas: list[str] = Field(default_factory=list)
    commit_message: str
    files_changed: list[str] = Field(default_factory=list)
    can_undo: bool = True
    user_id: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def all_shas(self) -> list[str]:
        """Every commit this record covers, oldest first."""
        return list(self.commit_shas) or [self.commit_sha]
