"""In-memory conversation store.

Dict-based storage; everything is lost when the process exits.
"""

import threading
from uuid import uuid4

from ..errors import NotFound
from .base import ConversationStore
from .log import ConversationLog


class InMemoryConversationStore(ConversationStore):
    """Session logs kept in a dict for the life of the process."""

    def __init__(self) -> None:
        self._logs: dict[str, ConversationLog] = {}
        self._lock = threading.Lock()

    def get_log(self, session_id: str | None = None) -> ConversationLog:
        sid = session_id or f"sess_{uuid4().hex}"
        with self._lock:
            if sid not in self._logs:
                self._logs[sid] = ConversationLog(sid)
            return self._logs[sid]

    def find_log(self, session_id: str) -> ConversationLog:
        with self._lock:
            log = self._logs.get(session_id)
        if log is None:
            raise NotFound("session", session_id)
        return log

    def locate(self, message_id: str) -> ConversationLog:
        with self._lock:
            logs = list(self._logs.values())
        for log in logs:
            if message_id in log:
                return log
        raise NotFound("message", message_id)

    def session_ids(self) -> list[str]:
        with self._lock:
            return list(self._logs)

    @property
    def backend_type(self) -> str:
        return "memory"
