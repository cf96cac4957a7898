"""Fetch-marker-then-write: the only mutation surface used by agents."""

import logging

from repo_edit_bot.gateway.content_gateway import ContentGateway

logger = logging.getLogger(__name__)


class FreshRevisionWriter:
    """Writes through a gateway, re-resolving the revision marker every time.

    Callers never pass a marker, so a marker captured earlier in a run cannot
    be reused. A stale marker surfaces as ``GatewayConflictError`` from the
    gateway.
    """

    def __init__(self, gateway: ContentGateway) -> None:
        self._gateway = gateway

    def current_marker(self, path: str) -> str | None:
        current = self._gateway.get_file(path)
        return current.sha if current else None

    def write(self, path: str, content: str, message: str) -> str | None:
        """Create or overwrite ``path`` with ``content``.

        Returns:
            Identifier of the resulting commit.
        """
        sha = self.current_marker(path)
        logger.info(
            "Writing %s (sha: %s, %d chars)",
            path,
            sha[:7] if sha else "new file",
            len(content),
        )
        return self._gateway.put_file(path, content, message, sha=sha)

    def delete(self, path: str, message: str) -> str | None:
        """Delete ``path`` at its current marker.

        Returns:
            Identifier of the resulting commit, or None if the file is already gone.
        """
        sha = self.current_marker(path)
        if sha is None:
            logger.info("Skipping delete of %s: file no longer exists", path)
            return None
        logger.info("Deleting %s (sha: %s)", path, sha[:7])
        return self._gateway.delete_file(path, sha, message)
