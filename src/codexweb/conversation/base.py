"""Abstract base class for conversation stores.

A store owns one ConversationLog per session. The abstraction hides:
- Where logs live (process memory only; history does not survive restarts)
- How a message id is traced back to its session
"""

from abc import ABC, abstractmethod

from .log import ConversationLog


class ConversationStore(ABC):
    """Registry of per-session conversation logs."""

    @abstractmethod
    def get_log(self, session_id: str | None = None) -> ConversationLog:
        """Return the log for a session, creating it if needed.

        A missing session id starts a new session with a fresh id.
        """

    @abstractmethod
    def find_log(self, session_id: str) -> ConversationLog:
        """Return an existing session's log.

        Raises:
            NotFound: If the session has never been started
        """

    @abstractmethod
    def locate(self, message_id: str) -> ConversationLog:
        """Return the log holding a message.

        Raises:
            NotFound: If no session holds the message
        """

    @abstractmethod
    def session_ids(self) -> list[str]:
        """Ids of all sessions started so far."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
