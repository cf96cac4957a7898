"""Conversation session: ties the agent to the persistence sink."""

import logging

from repo_edit_bot.config import DEFAULT_HISTORY_TURNS
from repo_edit_bot.models import (
    CommitRecord,
    ConversationTurn,
    FailureKind,
    PipelineResult,
    RepoRef,
    TurnRole,
    UndoResult,
)
from repo_edit_bot.orchestrator.exceptions import PipelineError
from repo_edit_bot.orchestrator.service import CodeAgent
from repo_edit_bot.storage import HistoryStore

logger = logging.getLogger(__name__)


class AgentSession:
    """One user talking to the agent about one repository.

    Records every turn, records a commit entry for each run that committed,
    and undoes the newest undoable commit on request.
    """

    def __init__(
        self,
        agent: CodeAgent,
        store: HistoryStore,
        repo: RepoRef,
        user_id: str | None = None,
        history_limit: int = DEFAULT_HISTORY_TURNS,
    ) -> None:
        self.agent = agent
        self.store = store
        self.repo = repo
        self.user_id = user_id
        self.history_limit = history_limit

    def send(self, utterance: str) -> PipelineResult:
        """Run the pipeline for ``utterance`` and persist its outcome.

        The user turn is stored even if the run fails.
        """
        key = self.repo.key
        history = self.store.recent_turns(key, self.history_limit)
        self.store.append_turn(
            key,
            ConversationTurn(role=TurnRole.USER, content=utterance, user_id=self.user_id),
        )

        result = self.agent.run(utterance, self.repo, history=history, user_id=self.user_id)

        self.store.append_turn(
            key,
            ConversationTurn(
                role=TurnRole.ASSISTANT,
                content=result.response,
                files_changed=list(result.files_changed),
                user_id=self.user_id,
            ),
        )
        if result.commit_sha:
            self.store.append_commit(
                key,
                CommitRecord(
                    commit_sha=result.commit_sha,
                    commit_shas=list(result.commit_shas),
                    commit_message=result.commit_message or "",
                    files_changed=list(result.files_changed),
                    user_id=self.user_id,
                ),
            )
        return result

    def undo_last(self) -> UndoResult:
        """Undo the newest commit record that has not been undone yet.

        Raises:
            PipelineError: PRECONDITION when there is nothing to undo, or any
                failure raised by ``CodeAgent.undo``. The record stays undoable
                unless every one of its commits was reverted.
        """
        record = self.store.latest_undoable(self.repo.key)
        if record is None:
            raise PipelineError("Nothing to undo: no undoable commit found", FailureKind.PRECONDITION)
        return self._undo_record(record)

    def undo(self, commit_sha: str) -> UndoResult:
        """Undo a specific commit.

        When ``commit_sha`` belongs to a recorded run, the whole run is
        reverted and its record flagged. Commits the session never recorded
        are reverted on their own.
        """
        record = self.store.find_commit(self.repo.key, commit_sha)
        if record is None:
            return self.agent.undo(commit_sha, self.repo)
        if not record.can_undo:
            raise PipelineError(
                f"Commit {commit_sha[:7]} was already undone", FailureKind.PRECONDITION
            )
        return self._undo_record(record)

    def _undo_record(self, record: CommitRecord) -> UndoResult:
        # One commit per file write; revert them newest first.
        reverted: list[str] = []
        for sha in reversed(record.all_shas):
            result = self.agent.undo(sha, self.repo)
            for path in result.files_reverted:
                if path not in reverted:
                    reverted.append(path)

        self.store.mark_not_undoable(self.repo.key, record.id)
        logger.info("Undid %s: %d file(s) reverted", record.commit_sha[:7], len(reverted))
        return UndoResult(commit_sha=record.commit_sha, files_reverted=reverted)
