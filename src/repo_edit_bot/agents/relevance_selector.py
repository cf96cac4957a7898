"""Relevance selector: picks the repository paths an edit request needs."""

import logging

from repo_edit_bot.llm import BackendAuthError, BackendError, GenerationAdapter
from repo_edit_bot.models import ParseStatus
from repo_edit_bot.utils import parse_json_output

logger = logging.getLogger(__name__)

MAX_SELECTED_FILES = 15
FALLBACK_FILE_LIMIT = 12
SELECTOR_TEMPERATURE = 0.1
FALLBACK_EXTENSIONS = (
    ".html",
    ".css",
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".json",
    ".py",
    ".vue",
    ".svelte",
    ".scss",
)


def fallback_selection(paths: list[str], limit: int = FALLBACK_FILE_LIMIT) -> list[str]:
    """Deterministic selection by file extension, in tree order."""
    return [p for p in paths if p.endswith(FALLBACK_EXTENSIONS)][:limit]


def build_selection_prompt(paths: list[str], utterance: str, max_files: int) -> str:
    listing = "\n".join(paths)
    return (
        f"Repository files:\n{listing}\n\n"
        f'User request: "{utterance}"\n\n'
        "Return a JSON array of file paths that are relevant to this request. "
        f"Max {max_files} files. Include files that import/reference the target files "
        "too so you understand the context. Only return the JSON array, nothing else.\n"
        'Example: ["src/App.css", "index.html"]'
    )


class RelevanceSelector:
    """Semantic selection with a syntactic fallback.

    Whatever the model returns, the result only contains paths present in
    the tree listing it was given.
    """

    def __init__(
        self,
        adapter: GenerationAdapter,
        model: str,
        max_files: int = MAX_SELECTED_FILES,
        fallback_limit: int = FALLBACK_FILE_LIMIT,
    ) -> None:
        self.adapter = adapter
        self.model = model
        self.max_files = max_files
        self.fallback_limit = fallback_limit

    def select(self, paths: list[str], utterance: str) -> list[str]:
        """Return at most ``max_files`` existing paths relevant to ``utterance``.

        Raises:
            BackendAuthError: If the backend rejects the credential.
        """
        candidates = self._ask_model(paths, utterance)
        if not candidates:
            logger.warning("Model selection unusable, falling back to extension filter")
            candidates = fallback_selection(paths, self.fallback_limit)

        known = set(paths)
        selected: list[str] = []
        for path in candidates:
            if path in known and path not in selected:
                selected.append(path)
        selected = selected[: self.max_files]
        logger.info("Selected files: %s", ", ".join(selected))
        return selected

    def _ask_model(self, paths: list[str], utterance: str) -> list[str]:
        try:
            raw = self.adapter.generate(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": build_selection_prompt(paths, utterance, self.max_files),
                    }
                ],
                temperature=SELECTOR_TEMPERATURE,
            )
        except BackendAuthError:
            raise
        except BackendError as exc:
            logger.warning("Selection call failed: %s", exc)
            return []

        parsed = parse_json_output(raw)
        if parsed.kind != ParseStatus.SUCCESS or not isinstance(parsed.value, list):
            return []
        return [item for item in parsed.value if isinstance(item, str)]
