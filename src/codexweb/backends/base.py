"""Abstract base class for content backends.

A backend produces one turn's content: a lazy, finite sequence of text
chunks and action drafts, interleaved in any order. The abstraction hides
how content is produced (a scripted simulation, a hosted model).
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from ..events import CancellationToken
from .models import BackendItem, TurnRequest


class ContentBackend(ABC):
    """Source of assistant content for a turn.

    ``generate`` is called once per turn and returns a fresh sequence each
    time. Implementations should check ``cancellation`` at every suspension
    point and stop early once it is tripped.
    """

    @abstractmethod
    def generate(
        self,
        request: TurnRequest,
        cancellation: CancellationToken,
    ) -> AsyncIterator[BackendItem]:
        """Produce the turn's content.

        Args:
            request: The prompt and its context
            cancellation: Tripped when the client goes away

        Yields:
            TextChunk and ActionDraft items

        Raises:
            Exception: Any backend error; the coordinator reports it as a
                BackendFailure
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier used in logs and errors."""
