"""Configuration: the user's settings store and process settings."""

from .base import ConfigStore
from .factory import create_config_store
from .models import ApprovalMode, ConfigRecord
from .settings import ServerSettings, load_settings
from .stores import InMemoryConfigStore, JsonFileConfigStore

__all__ = [
    "ConfigStore",
    "create_config_store",
    "ApprovalMode",
    "ConfigRecord",
    "ServerSettings",
    "load_settings",
    "InMemoryConfigStore",
    "JsonFileConfigStore",
]
