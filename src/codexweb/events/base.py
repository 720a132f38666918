"""Abstract base class for event channels.

This module defines the contract for delivering one turn's events to one
client. The abstraction hides:
- The transport (SSE over HTTP, an in-process queue, a terminal)
- How peer disconnection is detected
- How events are framed on the wire
"""

from abc import ABC, abstractmethod
from typing import Any

from .cancellation import CancellationToken
from .models import EventType, StreamEvent


class EventChannel(ABC):
    """Ordered, numbered, unidirectional event delivery for one turn.

    Guarantees:
    - ``seq`` starts at 0 and increases by one per accepted emit
    - events reach the client in emission order
    - ``close()`` may be called any number of times
    - emitting after close or after disconnect is a silent no-op

    Undelivered events are lost if the peer drops; there is no replay.
    """

    @abstractmethod
    async def open(self) -> None:
        """Establish the channel.

        Raises:
            ChannelUnavailable: If the transport cannot be held open
        """

    @abstractmethod
    def emit(self, event_type: EventType, **payload: Any) -> StreamEvent | None:
        """Append one event to the stream.

        Returns:
            The numbered event, or None when the channel no longer accepts
            events (closed or disconnected)
        """

    @abstractmethod
    async def close(self) -> None:
        """Terminate the stream. Idempotent."""

    @abstractmethod
    def mark_disconnected(self) -> None:
        """Record that the peer has gone away and cancel the producer."""

    @property
    @abstractmethod
    def cancellation(self) -> CancellationToken:
        """Token tripped when the peer disconnects."""

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Whether ``close()`` has been called."""

    @property
    def is_disconnected(self) -> bool:
        """Whether the peer has been seen to disconnect."""
        return self.cancellation.cancelled
