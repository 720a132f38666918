"""Factory for creating content backends."""

from typing import Any

from .base import ContentBackend


def create_content_backend(backend: str = "simulated", **config: Any) -> ContentBackend:
    """Create a content backend.

    Args:
        backend: Backend type ("simulated" or "llm")
        **config: Backend-specific configuration
            For simulated:
                - delay: float (default: 0.0)
            For llm:
                - config_store: ConfigStore (required)
                - provider_factory: callable (default: create_llm_provider)
                - temperature: float | None

    Returns:
        ContentBackend instance

    Raises:
        ValueError: If backend type is not supported
        TypeError: If required configuration is missing
    """
    backend_lower = backend.lower()

    if backend_lower == "simulated":
        from .simulated import SimulatedBackend
        return SimulatedBackend(**config)

    if backend_lower == "llm":
        if "config_store" not in config:
            raise TypeError("LLM backend requires 'config_store'")
        from .llm import LLMBackend
        return LLMBackend(**config)

    raise ValueError(
        f"Unsupported content backend: {backend}. "
        f"Supported backends: simulated, llm"
    )
