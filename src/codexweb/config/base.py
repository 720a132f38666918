"""Abstract base class for configuration stores.

The store is a collaborator: a single shared record with get/set
semantics, read once at the start of each turn. The abstraction hides
where the record is kept (memory or a JSON file).
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import ConfigRecord


class ConfigStore(ABC):
    """Key/value configuration with whole-record reads and partial writes."""

    @abstractmethod
    def get(self) -> ConfigRecord:
        """Return a copy of the current record."""

    @abstractmethod
    def set(self, partial: dict[str, Any]) -> ConfigRecord:
        """Merge ``partial`` into the record and return the result.

        Raises:
            pydantic.ValidationError: If the merged record is invalid
        """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
