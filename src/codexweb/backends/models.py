"""Data models exchanged between the coordinator and content backends."""

from pydantic import BaseModel, ConfigDict, Field

from ..actions import ActionKind
from ..conversation import Attachment
from ..llm import ChatMessage


class TurnRequest(BaseModel):
    """Everything a backend needs to produce one turn."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    provider: str
    model: str
    session_id: str
    images: list[Attachment] = Field(default_factory=list)
    context_files: list[Attachment] = Field(default_factory=list)
    instructions: str | None = None
    history: list[ChatMessage] = Field(
        default_factory=list,
        description="Earlier user/assistant messages of the session, oldest first"
    )


class TextChunk(BaseModel):
    """A piece of assistant content."""

    model_config = ConfigDict(frozen=True)

    content: str


class ActionDraft(BaseModel):
    """A proposal as produced by a backend, before it gets an id."""

    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    command: str | None = None
    diff_string: str | None = None
    file_name: str | None = None
    description: str = ""


BackendItem = TextChunk | ActionDraft
