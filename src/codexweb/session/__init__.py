"""Session module: orchestration of one conversational turn."""

from .coordinator import THINKING_STATUS, SessionCoordinator
from .models import TurnOutcome, TurnResult

__all__ = [
    "THINKING_STATUS",
    "SessionCoordinator",
    "TurnOutcome",
    "TurnResult",
]
