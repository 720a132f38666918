"""Data models for proposed side-effecting actions.

An ActionProposal has two states. It starts ``proposed`` with no
resolution and moves exactly once to ``reviewed`` carrying ``approved``
or ``rejected``. Executing an approved payload is someone else's job.
"""

import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, PrivateAttr, model_validator

from ..errors import AlreadyReviewed, DecisionConflict


class ActionKind(str, Enum):
    """What the proposal would do if approved."""

    COMMAND = "command"       # A single shell command line
    FILE_PATCH = "filePatch"  # A unified diff against one file


class ReviewState(str, Enum):
    """Lifecycle state of a proposal."""

    PROPOSED = "proposed"
    REVIEWED = "reviewed"


class Resolution(str, Enum):
    """Outcome of the human review."""

    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def from_flag(cls, approved: bool) -> "Resolution":
        return cls.APPROVED if approved else cls.REJECTED


def new_action_id() -> str:
    return f"act_{uuid4().hex}"


class ActionProposal(BaseModel):
    """A suggested operation awaiting human review.

    The kind is fixed at creation; nothing is ever inferred from the id.
    Review fields are read-only properties over private attributes;
    ``resolve()`` is the only method that changes them, and it is atomic
    per proposal.
    """

    id: str = Field(default_factory=new_action_id)
    kind: ActionKind
    command: str | None = Field(default=None, description="Command line for 'command' proposals")
    diff_string: str | None = Field(default=None, description="Unified diff for 'filePatch' proposals")
    file_name: str | None = Field(default=None, description="Target file for 'filePatch' proposals")

    _state: ReviewState = PrivateAttr(default=ReviewState.PROPOSED)
    _resolution: Resolution | None = PrivateAttr(default=None)
    _reviewed_at: datetime | None = PrivateAttr(default=None)
    _lock: threading.Lock = PrivateAttr(default_factory=threading.Lock)

    @model_validator(mode="after")
    def validate_payload(self) -> "ActionProposal":
        """Ensure the payload matches the kind."""
        if self.kind == ActionKind.COMMAND:
            if not self.command or not self.command.strip():
                raise ValueError("command proposals need a non-empty command")
            if "\n" in self.command.strip():
                raise ValueError("command proposals carry a single command line")
        else:
            if not self.diff_string:
                raise ValueError("filePatch proposals need a diff")
            if not self.file_name:
                raise ValueError("filePatch proposals need a target file name")
        return self

    @property
    def state(self) -> ReviewState:
        return self._state

    @property
    def resolution(self) -> Resolution | None:
        return self._resolution

    @property
    def reviewed_at(self) -> datetime | None:
        """When the review was applied (UTC); None while proposed."""
        return self._reviewed_at

    @property
    def is_reviewed(self) -> bool:
        return self._state == ReviewState.REVIEWED

    def resolve(self, approved: bool) -> Resolution:
        """Apply a human decision.

        Args:
            approved: True to approve, False to reject

        Returns:
            The resolution just applied

        Raises:
            AlreadyReviewed: Same outcome already applied (state unchanged)
            DecisionConflict: Opposite outcome already applied (state unchanged)
        """
        requested = Resolution.from_flag(approved)
        with self._lock:
            if self._state == ReviewState.REVIEWED:
                if self._resolution == requested:
                    raise AlreadyReviewed(self.id, self._resolution.value)
                raise DecisionConflict(self.id, self._resolution.value, requested.value)
            self._resolution = requested
            self._reviewed_at = datetime.now(timezone.utc)
            self._state = ReviewState.REVIEWED
        return requested

    def to_wire(self, message_id: str | None = None) -> dict[str, Any]:
        """Build the ``action`` object of an action event."""
        wire: dict[str, Any] = {
            "contentType": self.kind.value,
            "actionId": self.id,
        }
        if self.kind == ActionKind.COMMAND:
            wire["command"] = self.command
        else:
            wire["diffString"] = self.diff_string
            wire["fileName"] = self.file_name
        if message_id is not None:
            wire["messageId"] = message_id
        return wire

    def describe(self) -> str:
        """Short human label, e.g. for system messages."""
        if self.kind == ActionKind.COMMAND:
            return f"command `{self.command}`"
        return f"patch to {self.file_name}"
