from typing import Any

from ..config import ConfigRecord
from .base import LLMProvider
from .providers import GeminiProvider, OpenAIProvider
from .providers.openai import OLLAMA_DEFAULT_BASE_URL, OPENROUTER_BASE_URL, XAI_BASE_URL

SUPPORTED_PROVIDERS = ("openai", "openrouter", "xai", "ollama", "gemini")


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create an LLM provider instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type ('openai', 'openrouter', 'xai', 'ollama', 'gemini')
        **config: Provider-specific configuration
            For OpenAI, OpenRouter and xAI:
                - api_key: str (required)
                - model: str
                - base_url: str | None (defaults to the vendor's endpoint)
            For Ollama:
                - base_url: str (default: http://localhost:11434)
                - model: str
            For Gemini:
                - api_key: str (required)
                - model: str (default: 'gemini-2.5-flash')

    Returns:
        Initialized LLM provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_llm_provider("openai", api_key="sk-...", model="o4-mini")
        >>> provider = create_llm_provider("ollama", model="llama3.1")
    """
    provider_lower = provider.lower()

    if provider_lower == "openai":
        if not config.get("api_key"):
            raise TypeError("OpenAI provider requires 'api_key' in config")
        return OpenAIProvider(**config)

    if provider_lower == "openrouter":
        if not config.get("api_key"):
            raise TypeError("OpenRouter provider requires 'api_key' in config")
        config.setdefault("base_url", OPENROUTER_BASE_URL)
        return OpenAIProvider(**config)

    if provider_lower == "xai":
        if not config.get("api_key"):
            raise TypeError("xAI provider requires 'api_key' in config")
        config.setdefault("base_url", XAI_BASE_URL)
        return OpenAIProvider(**config)

    if provider_lower == "ollama":
        base_url = (config.pop("base_url", None) or OLLAMA_DEFAULT_BASE_URL).rstrip("/")
        if not base_url.endswith("/v1"):
            base_url += "/v1"
        # Ollama ignores the key but the client insists on one
        config.setdefault("api_key", "ollama")
        return OpenAIProvider(base_url=base_url, **config)

    if provider_lower == "gemini":
        if not config.get("api_key"):
            raise TypeError("Gemini provider requires 'api_key' in config")
        return GeminiProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: {', '.join(repr(p) for p in SUPPORTED_PROVIDERS)}"
    )


def provider_settings(record: ConfigRecord, provider: str, model: str | None = None) -> dict[str, Any]:
    """Map a configuration record to ``create_llm_provider`` kwargs.

    Args:
        record: The user's configuration
        provider: Provider type
        model: Model override (falls back to the record's default model)

    Returns:
        Keyword arguments for ``create_llm_provider``
    """
    settings: dict[str, Any] = {"model": model or record.default_model}
    provider_lower = provider.lower()

    if provider_lower == "openai":
        settings["api_key"] = record.api_key_openai
    elif provider_lower == "openrouter":
        settings["api_key"] = record.api_key_openrouter
    elif provider_lower == "xai":
        settings["api_key"] = record.api_key_xai
    elif provider_lower == "gemini":
        settings["api_key"] = record.api_key_gemini
    elif provider_lower == "ollama" and record.ollama_base_url:
        settings["base_url"] = record.ollama_base_url

    return settings
