"""Data models for conversation messages.

These models define the structure of one session's history,
independent of the store that keeps it.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..actions import ActionProposal


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_message_id() -> str:
    return f"msg_{uuid4().hex}"


class MessageRole(str, Enum):
    """Who produced a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Attachment(BaseModel):
    """Descriptor of an attached image or context file (content is not carried)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(description="File name as supplied by the client")
    media_type: str = Field(default="", alias="type", description="MIME type")
    size: int = Field(default=0, ge=0, description="Size in bytes")


class Message(BaseModel):
    """One unit of a conversation.

    Frozen once built. The embedded proposal keeps its own review fields,
    which only ``ActionProposal.resolve`` may change.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_message_id)
    role: MessageRole
    content: str = ""
    images: list[Attachment] = Field(default_factory=list)
    context_files: list[Attachment] = Field(default_factory=list)
    proposal: ActionProposal | None = None
    created_at: datetime = Field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for read-only views of the log."""
        data: dict[str, Any] = {
            "id": self.id,
            "role": self.role.value,
            "content": self.content,
            "createdAt": self.created_at.isoformat(),
        }
        if self.images:
            data["images"] = [a.model_dump(by_alias=True) for a in self.images]
        if self.context_files:
            data["contextFiles"] = [a.model_dump(by_alias=True) for a in self.context_files]
        if self.proposal is not None:
            data["action"] = {
                **self.proposal.to_wire(),
                "state": self.proposal.state.value,
                "resolution": self.proposal.resolution.value if self.proposal.resolution else None,
            }
        return data
