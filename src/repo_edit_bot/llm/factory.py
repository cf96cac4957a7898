"""Builds the backend chain from settings."""

from repo_edit_bot.config import AgentSettings
from repo_edit_bot.llm.adapter import GenerationAdapter
from repo_edit_bot.llm.backends import AnthropicBackend, GenerationBackend, OpenAIChatBackend
from repo_edit_bot.llm.exceptions import BackendAuthError


def _make_backend(
    provider: str,
    settings: AgentSettings,
    model_override: str | None = None,
) -> GenerationBackend:
    if provider == "openai":
        if not settings.openai_api_key:
            raise BackendAuthError("No OpenAI API key found. Set OPENAI_API_KEY.", provider)
        return OpenAIChatBackend(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            model_override=model_override,
        )
    if provider == "anthropic":
        if not settings.anthropic_api_key:
            raise BackendAuthError(
                "No Anthropic API key found. Set ANTHROPIC_API_KEY.", provider
            )
        return AnthropicBackend(
            api_key=settings.anthropic_api_key,
            model_override=model_override,
        )
    raise ValueError(f"Unsupported provider: {provider}")


def build_generation_adapter(settings: AgentSettings) -> GenerationAdapter:
    """Primary backend first, then the operator-provisioned fallback if any.

    The fallback always answers with ``settings.fallback_model`` since the
    per-stage model identifiers name primary-provider models.
    """
    backends = [_make_backend(settings.provider, settings)]
    fallback = settings.fallback_provider
    if fallback and fallback != settings.provider:
        backends.append(
            _make_backend(fallback, settings, model_override=settings.fallback_model)
        )
    return GenerationAdapter(
        backends,
        max_attempts=settings.max_attempts,
        base_delay=settings.backoff_base,
    )
