"""Request bodies accepted by the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field

from ..conversation import Attachment
from ..decisions import Decision


class PromptRequest(BaseModel):
    """Start a turn."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(min_length=1)
    images: list[Attachment] | None = None
    context_files: list[Attachment] | None = Field(default=None, alias="contextFiles")
    provider: str | None = None
    model: str | None = None
    session_id: str | None = Field(default=None, alias="sessionId")


class DecisionRequest(Decision):
    """Report a decision; the session id is optional."""

    session_id: str | None = Field(default=None, alias="sessionId")

    def to_decision(self) -> Decision:
        return Decision(action_id=self.action_id, message_id=self.message_id, approved=self.approved)
