"""
Codexweb: a streaming chat backend that proposes shell commands and file patches.

Each subpackage hides one design decision: how events reach the client,
how proposals are reviewed, where configuration and conversations live,
and which backend produces content.
"""

__version__ = "0.1.0"

from .actions import ActionKind, ActionProposal, Resolution
from .config import ApprovalMode, ConfigRecord, create_config_store
from .conversation import ConversationLog, create_conversation_store
from .decisions import Decision, DecisionReconciler
from .events import EventType, QueueEventChannel, StreamEvent
from .session import SessionCoordinator, TurnOutcome, TurnResult

__all__ = [
    "ActionKind",
    "ActionProposal",
    "ApprovalMode",
    "ConfigRecord",
    "ConversationLog",
    "Decision",
    "DecisionReconciler",
    "EventType",
    "QueueEventChannel",
    "Resolution",
    "SessionCoordinator",
    "StreamEvent",
    "TurnOutcome",
    "TurnResult",
    "create_config_store",
    "create_conversation_store",
]
