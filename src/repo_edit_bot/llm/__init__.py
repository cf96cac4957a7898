"""Generation backend adapter."""

from repo_edit_bot.llm.adapter import GenerationAdapter
from repo_edit_bot.llm.backends import AnthropicBackend, GenerationBackend, OpenAIChatBackend
from repo_edit_bot.llm.exceptions import (
    BackendAuthError,
    BackendError,
    BackendQuotaError,
    BackendRateLimitError,
)
from repo_edit_bot.llm.factory import build_generation_adapter

__all__ = [
    "AnthropicBackend",
    "BackendAuthError",
    "BackendError",
    "BackendQuotaError",
    "BackendRateLimitError",
    "GenerationAdapter",
    "GenerationBackend",
    "OpenAIChatBackend",
    "build_generation_adapter",
]
