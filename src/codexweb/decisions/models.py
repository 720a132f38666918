"""Data models for review decisions and their confirmations."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Decision(BaseModel):
    """A client's approve/reject report for one proposal.

    Transient: applied to the matching proposal, never stored on its own.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    action_id: str = Field(alias="actionId", min_length=1)
    message_id: str = Field(alias="messageId", min_length=1)
    approved: bool


class DecisionConfirmation(BaseModel):
    """Authoritative result of reconciling a decision."""

    model_config = ConfigDict(frozen=True)

    action_id: str
    message_id: str
    approved: bool
    confirmation: str = Field(description="Deterministic in (action_id, approved)")
    duplicate: bool = Field(default=False, description="True when the same decision was already applied")
    system_message_id: str | None = Field(
        default=None,
        description="System message appended for this outcome (None for duplicates)"
    )

    def to_wire(self) -> dict[str, Any]:
        """Build the decision response body."""
        return {
            "status": "decision_received",
            "actionId": self.action_id,
            "approved": self.approved,
            "messageId": self.message_id,
            "confirmation": self.confirmation,
        }


def confirmation_text(action_id: str, approved: bool) -> str:
    return f"Backend acknowledged {'approval' if approved else 'rejection'} of action {action_id}"
