"""Data models describing a finished turn."""

from enum import Enum

from pydantic import BaseModel, Field


class TurnOutcome(str, Enum):
    """How a turn ended."""

    COMPLETED = "completed"  # Backend finished; `done` was emitted
    CANCELLED = "cancelled"  # Client disconnected; no `done`
    FAILED = "failed"        # Backend raised; terminal error status, no `done`


class TurnResult(BaseModel):
    """Summary of one turn, for callers and tests."""

    session_id: str
    outcome: TurnOutcome
    events_emitted: int = Field(ge=0)
    action_ids: list[str] = Field(default_factory=list, description="Proposals created, in order")
    error: str | None = None
