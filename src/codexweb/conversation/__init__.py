"""Conversation module: per-session, append-only message history."""

from .base import ConversationStore
from .factory import create_conversation_store
from .log import ConversationLog
from .models import Attachment, Message, MessageRole, new_message_id

__all__ = [
    "ConversationStore",
    "create_conversation_store",
    "ConversationLog",
    "Attachment",
    "Message",
    "MessageRole",
    "new_message_id",
]
