"""Process settings read from the environment.

Environment variables (a ``.env`` file is loaded first if present):
    CODEXWEB_HOST: Bind address (default: 127.0.0.1)
    CODEXWEB_PORT: Listen port (default: 3001)
    CODEXWEB_CONFIG_PATH: User configuration file (default: temp.config.json)
    CODEXWEB_BACKEND: Content backend, "simulated" or "llm" (default: simulated)
    CODEXWEB_SIMULATED_DELAY: Seconds between simulated steps (default: 1.5)
    CODEXWEB_LOG_LEVEL: Log level (default: INFO)
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class ServerSettings(BaseModel):
    """Settings for one server process."""

    host: str = "127.0.0.1"
    port: int = Field(default=3001, ge=1, le=65535)
    config_path: str = "temp.config.json"
    backend: str = "simulated"
    simulated_delay: float = Field(default=1.5, ge=0.0)
    log_level: str = "INFO"


def load_settings() -> ServerSettings:
    """Build settings from the environment."""
    load_dotenv()
    return ServerSettings(
        host=os.getenv("CODEXWEB_HOST", "127.0.0.1"),
        port=int(os.getenv("CODEXWEB_PORT", os.getenv("PORT", "3001"))),
        config_path=os.getenv("CODEXWEB_CONFIG_PATH", "temp.config.json"),
        backend=os.getenv("CODEXWEB_BACKEND", "simulated").lower(),
        simulated_delay=float(os.getenv("CODEXWEB_SIMULATED_DELAY", "1.5")),
        log_level=os.getenv("CODEXWEB_LOG_LEVEL", "INFO"),
    )
