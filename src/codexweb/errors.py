"""Error taxonomy for turns and decisions.

Every failure is local to one turn or one decision. Nothing here is
retried automatically; retries are left to the client.
"""

from typing import Any


class CodexWebError(Exception):
    """Base class for all codexweb errors."""

    code = "internal_error"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the error body returned to clients."""
        return {"error": self.code, "detail": str(self)}


class ChannelUnavailable(CodexWebError):
    """The event transport could not be opened or held open."""

    code = "channel_unavailable"

    def __init__(self, message: str = "client is no longer connected"):
        super().__init__(f"Channel unavailable: {message}")


class NotFound(CodexWebError):
    """Unknown message id, or a proposal id that does not belong to it."""

    code = "not_found"

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class AlreadyReviewed(CodexWebError):
    """The proposal was already resolved with the same outcome.

    Not a client-facing error: callers echo the existing resolution.
    """

    code = "already_reviewed"

    def __init__(self, action_id: str, resolution: Any):
        super().__init__(f"Action {action_id} already reviewed: {resolution}")
        self.action_id = action_id
        self.resolution = resolution


class DecisionConflict(CodexWebError):
    """A second decision contradicts the resolution already applied."""

    code = "decision_conflict"

    def __init__(self, action_id: str, existing: Any, requested: Any):
        super().__init__(
            f"Action {action_id} was already {existing}; cannot mark it {requested}"
        )
        self.action_id = action_id
        self.existing = existing
        self.requested = requested


class BackendFailure(CodexWebError):
    """The content-producing backend raised mid-turn."""

    code = "backend_failure"

    def __init__(self, message: str, backend: str | None = None):
        msg = f"Backend failure: {message}"
        if backend:
            msg += f" (backend: {backend})"
        super().__init__(msg)
        self.backend = backend
