"""Commit applier: writes each accepted file edit, one at a time."""

import logging

from repo_edit_bot.gateway import FreshRevisionWriter
from repo_edit_bot.models import ApplyReport, ChangeSet, CommitFailure

logger = logging.getLogger(__name__)

DEFAULT_COMMIT_MESSAGE = "update via repo-edit-bot"
DEFAULT_SUCCESS_TEXT = "Done, changes applied!"
NOTHING_HAPPENED_TEXT = "Something went wrong and I couldn't process that. Try again?"
SHORT_SHA = 7


class CommitApplier:
    """Sequential, best-effort application of a change set.

    One file's failure never stops the remaining edits; each failure is
    recorded in the report instead.
    """

    def __init__(
        self,
        writer: FreshRevisionWriter,
        default_message: str = DEFAULT_COMMIT_MESSAGE,
    ) -> None:
        self.writer = writer
        self.default_message = default_message

    def apply(self, change_set: ChangeSet) -> ApplyReport:
        message = change_set.commit_message or self.default_message
        report = ApplyReport()

        for change in change_set.changes:
            if not change.path or not change.content:
                logger.error("Invalid change entry: missing path or content (%r)", change.path)
                continue
            try:
                commit_sha = self.writer.write(change.path, change.content, message)
            except Exception as exc:
                logger.error("Failed to commit %s: %s", change.path, exc)
                report.errors.append(CommitFailure(path=change.path, error=str(exc)))
                continue

            if commit_sha:
                report.commit_sha = commit_sha
                report.commit_shas.append(commit_sha)
            report.changed_paths.append(change.path)
            logger.info(
                "Committed %s (commit: %s)",
                change.path,
                commit_sha[:SHORT_SHA] if commit_sha else "unknown",
            )

        return report


def compose_response(explanation: str | None, report: ApplyReport) -> str:
    """Build the user-facing text for an applied change set."""
    response = ""
    if report.changed_paths:
        response = explanation or DEFAULT_SUCCESS_TEXT
        response += f"\n\nFiles updated: {', '.join(report.changed_paths)}"
        if report.commit_sha:
            response += f"\nCommit: `{report.commit_sha[:SHORT_SHA]}`"

    if report.errors:
        bullets = "\n".join(f"• {e.path}: {e.error}" for e in report.errors)
        if report.all_failed:
            response = (
                f"I couldn't make the changes.\n\n{bullets}\n\n"
                'Check that the token has the "repo" permission enabled.'
            )
        else:
            response += f"\n\nSome files failed:\n{bullets}"

    return response or NOTHING_HAPPENED_TEXT
