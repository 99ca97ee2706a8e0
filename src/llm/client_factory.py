# src/llm/client_factory.py — v3
"""Factory: instantiate LLM client from provider name.

Adapters are imported lazily so only the configured provider's SDK needs to
be installed.
"""

from __future__ import annotations

import importlib
import logging

from careerpath.config.settings import Settings
from careerpath.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "anthropic": "careerpath.llm.adapters.anthropic_adapter.AnthropicAdapter",
    "openai": "careerpath.llm.adapters.openai_adapter.OpenAIAdapter",
    "google": "careerpath.llm.adapters.google_adapter.GoogleAdapter",
    "ollama": "careerpath.llm.adapters.ollama_adapter.OllamaAdapter",
}

# Providers that run without an API key
_KEYLESS_PROVIDERS = {"ollama"}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the correct adapter from provider name.

    Args:
        provider: Provider identifier (google, openai, anthropic, ollama).
        model: Model name (e.g. gemini-2.5-flash).
        settings: Application settings (for API keys).
        **kwargs: Additional provider-specific arguments.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    init_kwargs = dict(kwargs)
    init_kwargs["model"] = model

    if settings is not None:
        if provider == "ollama":
            init_kwargs.setdefault("host", settings.ollama_base_url)
        else:
            init_kwargs.setdefault("api_key", settings.api_key_for(provider))

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    return adapter_cls(**init_kwargs)


def create_default_client(settings: Settings) -> BaseLLMClient | None:
    """Build the default provider's client, or None when it has no credentials."""
    provider = settings.llm_default_provider
    if provider not in _KEYLESS_PROVIDERS and not settings.api_key_for(provider):
        logger.warning(
            "No API key configured for provider %r; AI generation is disabled", provider,
        )
        return None
    return create_llm_client(provider, settings.llm_default_model, settings)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseLLMClient.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s -> %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
