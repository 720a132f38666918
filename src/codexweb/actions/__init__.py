"""Action proposals: side-effecting suggestions gated on human review."""

from .models import ActionKind, ActionProposal, Resolution, ReviewState, new_action_id

__all__ = [
    "ActionKind",
    "ActionProposal",
    "Resolution",
    "ReviewState",
    "new_action_id",
]
