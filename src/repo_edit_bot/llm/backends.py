"""Generation backends behind one call shape.

Each backend turns ``{model, messages, temperature, max_tokens}`` into text and
maps its SDK's errors onto ``repo_edit_bot.llm.exceptions``.
"""

from abc import ABC, abstractmethod
from typing import Any

from anthropic import Anthropic
import anthropic
import openai

from repo_edit_bot.llm.exceptions import (
    BackendAuthError,
    BackendError,
    BackendQuotaError,
    BackendRateLimitError,
)

ANTHROPIC_DEFAULT_MAX_TOKENS = 8192
QUOTA_STATUS_CODE = 402


class GenerationBackend(ABC):
    """Uniform interface to a chat-style text generation service."""

    name: str = "backend"

    def __init__(self, model_override: str | None = None) -> None:
        self.model_override = model_override

    def resolve_model(self, model: str) -> str:
        return self.model_override or model

    @abstractmethod
    def complete(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int | None = None,
    ) -> str:
        """Return the generated text for ``messages``."""


class OpenAIChatBackend(GenerationBackend):
    """Chat-completions backend (OpenAI or any compatible gateway)."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        model_override: str | None = None,
    ) -> None:
        super().__init__(model_override=model_override)
        self._client = openai.OpenAI(api_key=api_key, base_url=base_url, max_retries=0)

    def complete(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int | None = None,
    ) -> str:
        kwargs: dict[str, Any] = {
            "model": self.resolve_model(model),
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        try:
            response = self._client.chat.completions.create(**kwargs)
        except openai.RateLimitError as exc:
            if _is_quota_error(exc):
                raise BackendQuotaError(f"OpenAI quota exhausted: {exc}", self.name) from exc
            raise BackendRateLimitError(f"OpenAI rate limited: {exc}", self.name) from exc
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise BackendAuthError(f"OpenAI rejected the API key: {exc}", self.name) from exc
        except openai.APIStatusError as exc:
            if exc.status_code == QUOTA_STATUS_CODE:
                raise BackendQuotaError(f"OpenAI credits exhausted: {exc}", self.name) from exc
            raise BackendError(f"OpenAI request failed: {exc}", self.name) from exc
        except openai.APIError as exc:
            raise BackendError(f"OpenAI request failed: {exc}", self.name) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


class AnthropicBackend(GenerationBackend):
    """Anthropic messages backend."""

    name = "anthropic"

    def __init__(self, api_key: str, model_override: str | None = None) -> None:
        super().__init__(model_override=model_override)
        self._client = Anthropic(api_key=api_key, max_retries=0)

    def complete(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int | None = None,
    ) -> str:
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        chat = [m for m in messages if m["role"] != "system"]
        kwargs: dict[str, Any] = {
            "model": self.resolve_model(model),
            "messages": chat,
            "temperature": temperature,
            "max_tokens": max_tokens or ANTHROPIC_DEFAULT_MAX_TOKENS,
        }
        if system_parts:
            kwargs["system"] = "\n\n".join(system_parts)
        try:
            response = self._client.messages.create(**kwargs)
        except anthropic.RateLimitError as exc:
            raise BackendRateLimitError(f"Anthropic rate limited: {exc}", self.name) from exc
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as exc:
            raise BackendAuthError(f"Anthropic rejected the API key: {exc}", self.name) from exc
        except anthropic.APIStatusError as exc:
            if exc.status_code == QUOTA_STATUS_CODE:
                raise BackendQuotaError(f"Anthropic credits exhausted: {exc}", self.name) from exc
            raise BackendError(f"Anthropic request failed: {exc}", self.name) from exc
        except anthropic.APIError as exc:
            raise BackendError(f"Anthropic request failed: {exc}", self.name) from exc

        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )


def _is_quota_error(exc: openai.RateLimitError) -> bool:
    # OpenAI reports exhausted billing as a 429 with code "insufficient_quota".
    return getattr(exc, "code", None) == "insufficient_quota"
