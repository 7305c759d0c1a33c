"""Centralized model factory for the recipe generator.

Every supported provider exposes an OpenAI-compatible chat completions API,
so a single pydantic-ai `OpenAIChatModel` construction path serves them all;
providers differ only in endpoint, credentials, default model ids, and
(for Together) a response fix-up transport.

Usage:
    from services.generation.model_factory import get_recipe_generator

    generator = get_recipe_generator()
    await generator.generate(request, sink)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

import httpx
from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from core.config import Settings, get_settings
from services.generation.orchestrator import GeneratorConfig, RecipeGenerator
from services.generation.providers import PydanticAICompletionProvider
from services.generation.transports import NullToolCallsStrippingTransport


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProviderProfile:
    """Static connection details for an OpenAI-compatible provider."""

    base_url: str
    default_model: str
    fast_model: str
    strips_null_tool_calls: bool = False


PROVIDER_PROFILES: dict[str, ProviderProfile] = {
    "fireworks": ProviderProfile(
        base_url="https://api.fireworks.ai/inference/v1",
        default_model="accounts/fireworks/models/llama-v3-70b-instruct",
        fast_model="accounts/fireworks/models/llama-v3-8b-instruct",
    ),
    "together": ProviderProfile(
        base_url="https://api.together.xyz/v1",
        default_model="meta-llama/Llama-3-70b-chat-hf",
        fast_model="meta-llama/Llama-3-8b-chat-hf",
        strips_null_tool_calls=True,
    ),
    "groq": ProviderProfile(
        base_url="https://api.groq.com/openai/v1",
        default_model="llama3-70b-8192",
        fast_model="llama3-8b-8192",
    ),
}


def _get_profile(settings: Settings) -> ProviderProfile:
    try:
        return PROVIDER_PROFILES[settings.LLM_PROVIDER]
    except KeyError as exc:
        raise ValueError(f"Unsupported LLM_PROVIDER: {settings.LLM_PROVIDER}") from exc


def _get_api_key(settings: Settings) -> str:
    keys = {
        "fireworks": settings.FIREWORKS_API_KEY,
        "together": settings.TOGETHER_API_KEY,
        "groq": settings.GROQ_API_KEY,
    }
    key = keys.get(settings.LLM_PROVIDER)
    if not key:
        raise ValueError(
            f"No API key configured for LLM_PROVIDER={settings.LLM_PROVIDER}. "
            f"Set {settings.LLM_PROVIDER.upper()}_API_KEY."
        )
    return key


def _create_http_client(profile: ProviderProfile) -> httpx.AsyncClient | None:
    if not profile.strips_null_tool_calls:
        return None
    logger.info("Installing tool_calls fix-up transport for provider responses")
    return httpx.AsyncClient(transport=NullToolCallsStrippingTransport())


@lru_cache
def _get_openai_provider() -> OpenAIProvider:
    settings = get_settings()
    profile = _get_profile(settings)
    return OpenAIProvider(
        base_url=settings.LLM_BASE_URL or profile.base_url,
        api_key=_get_api_key(settings),
        http_client=_create_http_client(profile),
    )


def get_model(model_id: str) -> Model:
    """Create a pydantic-ai model for `model_id` on the configured provider."""
    logger.info(
        "Using %s model: %s", get_settings().LLM_PROVIDER, model_id
    )
    return OpenAIChatModel(model_id, provider=_get_openai_provider())


def get_generator_config(settings: Settings | None = None) -> GeneratorConfig:
    """Resolve default and fast model ids, honoring settings overrides."""
    settings = settings or get_settings()
    profile = _get_profile(settings)
    return GeneratorConfig(
        default_model=settings.DEFAULT_MODEL or profile.default_model,
        fast_model=settings.FAST_MODEL or profile.fast_model,
    )


@lru_cache
def get_completion_provider() -> PydanticAICompletionProvider:
    return PydanticAICompletionProvider(get_model)


def get_recipe_generator() -> RecipeGenerator:
    """FastAPI dependency provider for the recipe generator."""
    return RecipeGenerator(get_completion_provider(), get_generator_config())


def clear_model_cache() -> None:
    """Drop cached providers, e.g. after settings change in tests."""
    _get_openai_provider.cache_clear()
    get_completion_provider.cache_clear()
