"""Data models for the repo edit bot."""

from repo_edit_bot.models.change_models import (
    ChangeSet,
    EditAction,
    FileEdit,
    GenerationOutcome,
    ParseStatus,
)
from repo_edit_bot.models.history_models import CommitRecord, ConversationTurn, TurnRole
from repo_edit_bot.models.repo_models import (
    CommitDetail,
    CommitFileChange,
    LoadedFile,
    RepoRef,
    TreeEntry,
)
from repo_edit_bot.models.result_models import (
    ApplyReport,
    CommitFailure,
    FailureKind,
    Intent,
    PipelineResult,
    ProjectType,
    SafetyVerdict,
    UndoResult,
)

__all__ = [
    "ApplyReport",
    "ChangeSet",
    "CommitDetail",
    "CommitFailure",
    "CommitFileChange",
    "CommitRecord",
    "ConversationTurn",
    "EditAction",
    "FailureKind",
    "FileEdit",
    "GenerationOutcome",
    "Intent",
    "LoadedFile",
    "ParseStatus",
    "PipelineResult",
    "ProjectType",
    "RepoRef",
    "SafetyVerdict",
    "TreeEntry",
    "TurnRole",
    "UndoResult",
]
