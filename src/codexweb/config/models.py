"""Data models for user configuration."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApprovalMode(str, Enum):
    """How much the user lets proposals through without review."""

    SUGGEST = "suggest"       # Every proposal waits for a human
    AUTO_EDIT = "auto-edit"   # File patches are approved automatically
    FULL_AUTO = "full-auto"   # Everything is approved automatically


class ConfigRecord(BaseModel):
    """Persisted user configuration.

    Field aliases are the camelCase keys used on the wire and on disk.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    api_key_openai: str | None = Field(default=None, alias="apiKeyOpenAI")
    api_key_gemini: str | None = Field(default=None, alias="apiKeyGemini")
    api_key_openrouter: str | None = Field(default=None, alias="apiKeyOpenRouter")
    ollama_base_url: str | None = Field(default=None, alias="ollamaBaseUrl")
    api_key_xai: str | None = Field(default=None, alias="apiKeyXAI")
    default_provider: str = Field(default="openai", alias="defaultProvider")
    default_model: str = Field(default="o4-mini", alias="defaultModel")
    instructions: str | None = Field(default=None, description="Free-text instructions for the assistant")
    approval_mode: ApprovalMode = Field(default=ApprovalMode.SUGGEST, alias="approvalMode")

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting unset optional values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def merged(self, partial: dict[str, Any]) -> "ConfigRecord":
        """Return a new record with ``partial`` applied on top of this one.

        Raises:
            pydantic.ValidationError: If the merged values are invalid
        """
        current = self.model_dump(mode="json", by_alias=True)
        return ConfigRecord.model_validate({**current, **_to_aliases(partial)})


def _to_aliases(partial: dict[str, Any]) -> dict[str, Any]:
    """Accept either field names or aliases in a partial update."""
    fields = ConfigRecord.model_fields
    out = {}
    for key, value in partial.items():
        field = fields.get(key)
        out[field.alias if field is not None and field.alias else key] = value
    return out
