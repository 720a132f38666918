"""Auto-resolution policy driven by the user's approval mode.

The policy only answers "would this mode approve this kind without a
human?". Applying the answer is the coordinator's job, and the approval
itself still goes through DecisionReconciler.
"""

from ..actions import ActionKind
from ..config import ApprovalMode

AUTO_APPROVED_KINDS: dict[ApprovalMode, frozenset[ActionKind]] = {
    ApprovalMode.SUGGEST: frozenset(),
    ApprovalMode.AUTO_EDIT: frozenset({ActionKind.FILE_PATCH}),
    ApprovalMode.FULL_AUTO: frozenset({ActionKind.COMMAND, ActionKind.FILE_PATCH}),
}


class ApprovalPolicy:
    """Maps (approval mode, action kind) to an automatic approval."""

    def __init__(self, overrides: dict[ApprovalMode, frozenset[ActionKind]] | None = None):
        self._table = {**AUTO_APPROVED_KINDS, **(overrides or {})}

    def auto_approves(self, mode: ApprovalMode, kind: ActionKind) -> bool:
        return kind in self._table.get(mode, frozenset())

    @staticmethod
    def note(mode: ApprovalMode) -> str:
        """Text appended to the system message of an automatic approval."""
        return f"auto-approved in {mode.value} mode"
