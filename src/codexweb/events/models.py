"""Data models for the server-to-client event stream."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """Type tag carried by every stream event."""

    STATUS = "status"  # Progress or terminal error notice
    TEXT = "text"      # A chunk of assistant content
    ACTION = "action"  # A proposal awaiting human review
    DONE = "done"      # Normal end of the turn


class StreamEvent(BaseModel):
    """One numbered event in a turn's stream.

    The payload is flattened next to ``type`` and ``seq`` on the wire:
    ``{"type": "text", "seq": 1, "content": "..."}``.
    """

    model_config = ConfigDict(frozen=True)

    type: EventType
    seq: int = Field(ge=0, description="Position in the stream, starting at 0")
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        """Flatten into the JSON object sent to the client."""
        return {"type": self.type.value, "seq": self.seq, **self.payload}
