"""Runtime settings, read from the environment."""

import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from repo_edit_bot.models.repo_models import DEFAULT_API_URL

DEFAULT_PRIMARY_MODEL = "gpt-4o-mini"
DEFAULT_GENERATOR_MODEL = "gpt-4o"
DEFAULT_FALLBACK_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_HISTORY_TURNS = 10

Provider = Literal["openai", "anthropic"]


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


class AgentSettings(BaseModel):
    """Everything the agent needs besides the repository reference."""

    model_config = ConfigDict(frozen=False)

    openai_api_key: str | None = Field(default=None, repr=False)
    openai_base_url: str | None = None
    anthropic_api_key: str | None = Field(default=None, repr=False)

    provider: Provider = "openai"
    fallback_provider: Provider | None = None
    fallback_model: str = DEFAULT_FALLBACK_MODEL

    classifier_model: str = DEFAULT_PRIMARY_MODEL
    selector_model: str = DEFAULT_PRIMARY_MODEL
    generator_model: str = DEFAULT_GENERATOR_MODEL
    chat_model: str = DEFAULT_PRIMARY_MODEL

    max_attempts: int = Field(default=3, ge=1, le=10)
    backoff_base: float = Field(default=1.0, ge=0.0)
    history_turns: int = Field(default=DEFAULT_HISTORY_TURNS, ge=0)

    github_token: str | None = Field(default=None, repr=False)
    github_api_url: str = DEFAULT_API_URL

    @classmethod
    def from_env(cls) -> "AgentSettings":
        """Build settings from environment variables (call ``load_dotenv`` first)."""
        fallback = os.getenv("REPO_EDIT_BOT_FALLBACK_PROVIDER") or None
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
            provider=os.getenv("REPO_EDIT_BOT_PROVIDER", "openai"),
            fallback_provider=fallback,
            fallback_model=os.getenv("REPO_EDIT_BOT_FALLBACK_MODEL", DEFAULT_FALLBACK_MODEL),
            classifier_model=os.getenv("REPO_EDIT_BOT_CLASSIFIER_MODEL", DEFAULT_PRIMARY_MODEL),
            selector_model=os.getenv("REPO_EDIT_BOT_SELECTOR_MODEL", DEFAULT_PRIMARY_MODEL),
            generator_model=os.getenv("REPO_EDIT_BOT_GENERATOR_MODEL", DEFAULT_GENERATOR_MODEL),
            chat_model=os.getenv("REPO_EDIT_BOT_CHAT_MODEL", DEFAULT_PRIMARY_MODEL),
            max_attempts=_env_int("REPO_EDIT_BOT_MAX_RETRIES", 3),
            backoff_base=_env_float("REPO_EDIT_BOT_BACKOFF_BASE", 1.0),
            history_turns=_env_int("REPO_EDIT_BOT_HISTORY_TURNS", DEFAULT_HISTORY_TURNS),
            github_token=os.getenv("GITHUB_TOKEN"),
            github_api_url=os.getenv("GITHUB_API_URL", DEFAULT_API_URL),
        )
