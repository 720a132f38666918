"""Append-only message log for one session."""

import threading
from collections.abc import Iterator

from ..actions import Resolution
from ..errors import NotFound
from .models import Message


class ConversationLog:
    """Ordered, append-only record of one session's messages.

    Order of appends is the only order. Messages are never removed or
    reordered; the only in-place change allowed is a proposal review
    through ``update_proposal_review``.
    """

    def __init__(self, session_id: str):
        self._session_id = session_id
        self._messages: list[Message] = []
        self._index: dict[str, int] = {}
        self._lock = threading.Lock()

    @property
    def session_id(self) -> str:
        return self._session_id

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages())

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._index

    def messages(self) -> list[Message]:
        """Snapshot of the log in order."""
        with self._lock:
            return list(self._messages)

    def append(self, message: Message) -> Message:
        """Add a message at the end.

        The caller supplies the id; it must be unique within the session.

        Raises:
            ValueError: If the id is already in the log
        """
        with self._lock:
            if message.id in self._index:
                raise ValueError(f"Duplicate message id in session {self._session_id}: {message.id}")
            self._index[message.id] = len(self._messages)
            self._messages.append(message)
        return message

    def find(self, message_id: str) -> Message:
        """Look up a message by id.

        Raises:
            NotFound: If no such message exists in this session
        """
        position = self._index.get(message_id)
        if position is None:
            raise NotFound("message", message_id)
        return self._messages[position]

    def update_proposal_review(self, message_id: str, proposal_id: str, approved: bool) -> Resolution:
        """Resolve the proposal embedded in a message.

        Raises:
            NotFound: Unknown message, message without a proposal, or id mismatch
            AlreadyReviewed: Same resolution already applied
            DecisionConflict: Opposite resolution already applied
        """
        message = self.find(message_id)
        proposal = message.proposal
        if proposal is None or proposal.id != proposal_id:
            raise NotFound("action", proposal_id)
        return proposal.resolve(approved)
