"""Models for remote repository state."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_API_URL = "https://api.github.com"


class RepoRef(BaseModel):
    """Reference to a remote repository plus the credential used to reach it."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str
    token: str = Field(repr=False)
    api_url: str = DEFAULT_API_URL

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def key(self) -> str:
        """Key used by the persistence sink."""
        return self.full_name.lower()


class TreeEntry(BaseModel):
    """One entry of a recursive tree listing."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: Literal["blob", "tree", "commit"]


class LoadedFile(BaseModel):
    """A decoded file together with its revision marker (blob sha)."""

    model_config = ConfigDict(frozen=False)

    path: str
    content: str
    sha: str


class CommitFileChange(BaseModel):
    """One file entry of a commit detail response."""

    model_config = ConfigDict(frozen=False)

    filename: str
    status: str  # "added" | "modified" | "removed" | "renamed" | ...
    previous_filename: str | None = None


class CommitDetail(BaseModel):
    """Commit metadata needed to revert it."""

    model_config = ConfigDict(frozen=False)

    sha: str
    parent_sha: str | None = None
    message: str = ""
    files: list[CommitFileChange] = Field(default_factory=list)
