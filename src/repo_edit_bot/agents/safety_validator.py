"""Safety validator: all-or-nothing gate protecting critical project files."""

import logging

from repo_edit_bot.models import ChangeSet, SafetyVerdict

logger = logging.getLogger(__name__)

CRITICAL_FILES = (
    "package.json",
    "index.html",
    "tsconfig.json",
    "vite.config.ts",
    "vite.config.js",
    "tailwind.config.ts",
    "tailwind.config.js",
)
MIN_CRITICAL_CONTENT_LENGTH = 10


class SafetyValidator:
    """Rejects a whole change set that would blank or remove a critical file."""

    def __init__(
        self,
        critical_files: tuple[str, ...] | list[str] = CRITICAL_FILES,
        min_length: int = MIN_CRITICAL_CONTENT_LENGTH,
    ) -> None:
        self.critical_files = frozenset(critical_files)
        self.min_length = min_length

    def is_critical(self, path: str) -> bool:
        return path in self.critical_files

    def check(self, change_set: ChangeSet) -> SafetyVerdict:
        for change in change_set.changes:
            if not self.is_critical(change.path):
                continue
            body = (change.content or "").strip()
            if len(body) < self.min_length:
                logger.warning("Refusing change set: %s would be emptied", change.path)
                return SafetyVerdict(
                    allowed=False,
                    offending_path=change.path,
                    message=(
                        f"I can't modify {change.path} that way - it's a critical "
                        "project file. Tell me exactly what you want to change in it?"
                    ),
                )
        return SafetyVerdict(allowed=True)
