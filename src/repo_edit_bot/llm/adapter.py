"""Retry, backoff and provider fallback around generation backends."""

import logging
import time
from typing import Callable

from repo_edit_bot.llm.backends import GenerationBackend
from repo_edit_bot.llm.exceptions import BackendRateLimitError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0


class GenerationAdapter:
    """Tries backends in a fixed order under one shared retry policy.

    A rate-limited attempt is followed by an exponential backoff wait
    (``base_delay * 2**attempt``). Once a backend has used ``max_attempts``,
    the next backend in the chain is tried. Authentication and other errors
    are raised immediately.
    """

    def __init__(
        self,
        backends: list[GenerationBackend],
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not backends:
            raise ValueError("GenerationAdapter needs at least one backend")
        self.backends = list(backends)
        self.max_attempts = max(1, max_attempts)
        self.base_delay = base_delay
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        return self.base_delay * (2**attempt)

    def generate(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int | None = None,
    ) -> str:
        """Return generated text from the first backend that answers.

        Raises:
            BackendRateLimitError: If every backend stayed rate limited.
            BackendAuthError: On a rejected credential (no retry).
            BackendError: On any other backend failure (no retry).
        """
        last_error: BackendRateLimitError | None = None

        for index, backend in enumerate(self.backends):
            is_last_backend = index == len(self.backends) - 1
            for attempt in range(self.max_attempts):
                try:
                    return backend.complete(
                        model=model,
                        messages=messages,
                        temperature=temperature,
                        max_tokens=max_tokens,
                    )
                except BackendRateLimitError as exc:
                    last_error = exc
                    if is_last_backend and attempt == self.max_attempts - 1:
                        break
                    delay = self.backoff_delay(attempt)
                    logger.warning(
                        "Backend %s rate limited (attempt %d/%d), waiting %.1fs",
                        backend.name,
                        attempt + 1,
                        self.max_attempts,
                        delay,
                    )
                    self._sleep(delay)

            if not is_last_backend:
                logger.warning(
                    "Backend %s still rate limited, switching to %s",
                    backend.name,
                    self.backends[index + 1].name,
                )

        raise last_error or BackendRateLimitError("All generation backends are rate limited")
