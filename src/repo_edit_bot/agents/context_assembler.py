"""Context assembler: loads selected files concurrently."""

import logging
from concurrent.futures import ThreadPoolExecutor

from repo_edit_bot.gateway import ContentGateway
from repo_edit_bot.models import LoadedFile

logger = logging.getLogger(__name__)

MAX_FILE_CHARS = 20_000
MAX_WORKERS = 8


def render_context(files: list[LoadedFile]) -> str:
    """Concatenate loaded files into one prompt section."""
    return "\n\n".join(f"=== {f.path} ===\n{f.content}" for f in files)


class ContextAssembler:
    """Fetches file contents in parallel, skipping oversized or failed files."""

    def __init__(
        self,
        gateway: ContentGateway,
        max_chars: int = MAX_FILE_CHARS,
        max_workers: int = MAX_WORKERS,
    ) -> None:
        self.gateway = gateway
        self.max_chars = max_chars
        self.max_workers = max_workers

    def _fetch(self, path: str) -> LoadedFile | None:
        try:
            return self.gateway.get_file(path)
        except Exception as exc:
            logger.warning("Could not load %s: %s", path, exc)
            return None

    def load(self, paths: list[str]) -> list[LoadedFile]:
        """Load ``paths`` and return the usable files in selection order."""
        if not paths:
            return []
        workers = max(1, min(self.max_workers, len(paths)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(self._fetch, paths))

        loaded: list[LoadedFile] = []
        for path, file in zip(paths, results):
            if file is None:
                continue
            if len(file.content) >= self.max_chars:
                logger.info("Skipping %s: %d chars exceeds limit", path, len(file.content))
                continue
            loaded.append(file)
        logger.info("Loaded %d of %d selected files", len(loaded), len(paths))
        return loaded
