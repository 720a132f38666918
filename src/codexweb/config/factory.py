"""Factory for creating configuration stores."""

from typing import Any

from .base import ConfigStore


def create_config_store(backend: str = "json", **kwargs: Any) -> ConfigStore:
    """Create a configuration store.

    Args:
        backend: Backend type ("json" or "memory")
        **kwargs: Backend-specific configuration
            For json:
                - path: str | Path (required)
            For memory:
                - initial: ConfigRecord | None

    Returns:
        ConfigStore instance

    Raises:
        ValueError: If backend type is not supported
        TypeError: If required configuration is missing
    """
    if backend == "json":
        if "path" not in kwargs:
            raise TypeError("JSON config store requires 'path'")
        from .stores import JsonFileConfigStore
        return JsonFileConfigStore(**kwargs)

    if backend == "memory":
        from .stores import InMemoryConfigStore
        return InMemoryConfigStore(**kwargs)

    raise ValueError(
        f"Unsupported config store: {backend}. "
        f"Supported backends: json, memory"
    )
