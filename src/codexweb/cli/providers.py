"""Collaborator factory functions for the CLI.

Centralizes creation of the configuration store and content backend from
process settings. Hides configuration details from command implementations.
"""

from rich.console import Console

from ..backends import ContentBackend, create_content_backend
from ..config import ConfigStore, ServerSettings, create_config_store, load_settings

# Default console for output
_console = Console()


def get_settings() -> ServerSettings:
    """Read process settings from the environment (and ``.env``)."""
    return load_settings()


def get_config_store(settings: ServerSettings) -> ConfigStore:
    """Open the JSON configuration file named by ``CODEXWEB_CONFIG_PATH``."""
    return create_config_store("json", path=settings.config_path)


def get_backend(
    settings: ServerSettings,
    config_store: ConfigStore,
    console: Console | None = None,
    delay: float | None = None,
) -> ContentBackend:
    """Create the content backend named by ``CODEXWEB_BACKEND``.

    Args:
        settings: Process settings
        config_store: Store the LLM backend reads credentials from
        console: Optional Rich console for output
        delay: Override for the simulated backend's step delay

    Raises:
        SystemExit: If the backend name is unknown
    """
    import typer

    con = console or _console
    try:
        if settings.backend == "llm":
            return create_content_backend("llm", config_store=config_store)
        return create_content_backend(
            settings.backend,
            delay=settings.simulated_delay if delay is None else delay,
        )
    except ValueError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
