"""Applies client decisions to the conversation log.

This is the only code path that resolves a proposal. A downstream
executor learns about an approval by observing the reviewed proposal,
never by any other signal.
"""

from loguru import logger

from ..actions import ActionKind
from ..conversation import ConversationLog, ConversationStore, Message, MessageRole
from ..errors import AlreadyReviewed, DecisionConflict, NotFound
from .models import Decision, DecisionConfirmation, confirmation_text


class DecisionReconciler:
    """Bridges an inbound decision into the session's log exactly once.

    Concurrent duplicates of one decision race on the proposal's own lock:
    one caller applies it and appends the system message, the others see
    ``AlreadyReviewed`` (same outcome) or ``DecisionConflict`` (opposite).
    """

    def __init__(self, store: ConversationStore):
        self._store = store

    def reconcile(
        self,
        decision: Decision,
        session_id: str | None = None,
        note: str | None = None,
    ) -> DecisionConfirmation:
        """Apply a decision and confirm it.

        Args:
            decision: The client's decision
            session_id: Session to look in; located from the message id if None
            note: Extra text appended to the system message (e.g. policy name)

        Returns:
            Confirmation; ``duplicate`` is True if the same outcome was already applied

        Raises:
            NotFound: Unknown session, message or action id (log untouched)
            DecisionConflict: Opposite outcome already applied (log untouched)
        """
        try:
            log = self._find_log(decision.message_id, session_id)
            resolution = log.update_proposal_review(
                decision.message_id, decision.action_id, decision.approved
            )
        except AlreadyReviewed as e:
            logger.info(f"Duplicate decision for action {decision.action_id}: already {e.resolution}")
            return DecisionConfirmation(
                action_id=decision.action_id,
                message_id=decision.message_id,
                approved=decision.approved,
                confirmation=confirmation_text(decision.action_id, decision.approved),
                duplicate=True,
            )
        except DecisionConflict as e:
            logger.warning(str(e))
            raise
        except NotFound as e:
            logger.warning(f"Rejected decision for action {decision.action_id}: {e}")
            raise

        proposal = log.find(decision.message_id).proposal
        label = "Command" if proposal.kind == ActionKind.COMMAND else "File patch"
        content = f"{label} {resolution.value}: {proposal.describe()}"
        if note:
            content += f" ({note})"
        system_message = log.append(Message(role=MessageRole.SYSTEM, content=content))

        logger.info(
            f"Action {decision.action_id} {resolution.value} "
            f"(session {log.session_id}, message {decision.message_id})"
        )
        return DecisionConfirmation(
            action_id=decision.action_id,
            message_id=decision.message_id,
            approved=decision.approved,
            confirmation=confirmation_text(decision.action_id, decision.approved),
            system_message_id=system_message.id,
        )

    def _find_log(self, message_id: str, session_id: str | None) -> ConversationLog:
        if session_id is not None:
            log = self._store.find_log(session_id)
            log.find(message_id)
            return log
        return self._store.locate(message_id)
