"""Undo engine: restores every file a commit touched to its parent state."""

import logging

from repo_edit_bot.agents.exceptions import UndoPreconditionError
from repo_edit_bot.gateway import ContentGateway, FreshRevisionWriter
from repo_edit_bot.models import CommitFileChange, UndoResult

logger = logging.getLogger(__name__)

ADDED_STATUS = "added"


class UndoEngine:
    """Reverts a commit file by file through the fresh-marker writer.

    Mirrors the commit applier's policy: sequential, best effort, and a
    failure on one file never aborts the others.
    """

    def __init__(self, gateway: ContentGateway, writer: FreshRevisionWriter) -> None:
        self.gateway = gateway
        self.writer = writer

    def undo(self, commit_sha: str) -> UndoResult:
        """Revert ``commit_sha``.

        Returns:
            UndoResult listing the paths that were successfully reverted.

        Raises:
            UndoPreconditionError: If the commit has no parent. No write is issued.
            GatewayError: If the commit metadata cannot be fetched.
        """
        detail = self.gateway.get_commit(commit_sha)
        if not detail.parent_sha:
            raise UndoPreconditionError(
                f"Cannot revert {commit_sha[:7]}: no parent commit found"
            )

        reverted: list[str] = []
        for change in detail.files:
            try:
                if self._revert_file(change, detail.parent_sha):
                    reverted.append(change.filename)
            except Exception as exc:
                logger.error("Error reverting %s: %s", change.filename, exc)

        logger.info("Reverted %d of %d files from %s", len(reverted), len(detail.files), commit_sha[:7])
        return UndoResult(commit_sha=commit_sha, files_reverted=reverted)

    def _revert_file(self, change: CommitFileChange, parent_sha: str) -> bool:
        path = change.filename
        if change.status == ADDED_STATUS:
            return self.writer.delete(path, f"revert: undo {path}") is not None

        previous = self.gateway.get_file(path, ref=parent_sha)
        if previous is None:
            logger.warning("Skipping %s: not present at parent %s", path, parent_sha[:7])
            return False
        self.writer.write(path, previous.content, f"revert: undo changes to {path}")
        return True
