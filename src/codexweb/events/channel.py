"""Queue-backed event channel.

The producer (one SessionCoordinator) emits into an unbounded asyncio.Queue;
exactly one consumer drains it, either event by event with ``receive()`` or
as SSE frames with ``frames()``. A consumer that stops iterating before the
stream is closed counts as a disconnect.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from loguru import logger

from ..errors import ChannelUnavailable
from .base import EventChannel
from .cancellation import CancellationToken
from .framing import format_sse_frame
from .models import EventType, StreamEvent

_CLOSED = object()


class QueueEventChannel(EventChannel):
    """In-process event channel with a single consumer.

    Hidden design decisions:
    - Sequence numbering (assigned at emit time, never reused)
    - Close signalling via a sentinel placed after the last event
    - Disconnect detection when the consumer abandons iteration
    """

    def __init__(
        self,
        is_disconnected: Callable[[], Awaitable[bool]] | None = None,
        label: str = "turn",
        poll_interval: float = 1.0,
    ):
        """Initialize the channel.

        Args:
            is_disconnected: Optional check asked by ``open()`` and, while
                ``frames()`` waits for the producer, every ``poll_interval``
                seconds (e.g. Starlette's ``Request.is_disconnected``)
            label: Name used in log lines
            poll_interval: Seconds between disconnect checks while idle
        """
        self._client_gone = is_disconnected
        self._poll_interval = poll_interval
        self._label = label
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._token = CancellationToken()
        self._next_seq = 0
        self._opened = False
        self._closed = False
        self._drained = False

    @property
    def cancellation(self) -> CancellationToken:
        return self._token

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def emitted(self) -> int:
        """Number of events accepted so far."""
        return self._next_seq

    async def open(self) -> None:
        """Establish the channel; calling it again on an open channel is a no-op."""
        if self._opened and not self._closed and not self._token.cancelled:
            return
        if self._closed or self._token.cancelled:
            raise ChannelUnavailable(f"{self._label} channel is already finished")
        if self._client_gone is not None and await self._client_gone():
            self.mark_disconnected()
            raise ChannelUnavailable("client disconnected before the stream started")
        self._opened = True

    def emit(self, event_type: EventType, **payload: Any) -> StreamEvent | None:
        if not self._opened:
            raise RuntimeError("emit() called before open()")
        if self._closed or self._token.cancelled:
            logger.debug(f"Dropping {event_type.value} event on finished {self._label} channel")
            return None

        event = StreamEvent(type=event_type, seq=self._next_seq, payload=payload)
        self._next_seq += 1
        self._queue.put_nowait(event)
        return event

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    def mark_disconnected(self) -> None:
        if self._token.cancelled:
            return
        logger.info(f"Client disconnected from {self._label} stream after {self._next_seq} event(s)")
        self._token.cancel("client disconnected")

    async def receive(self) -> StreamEvent | None:
        """Wait for the next event; None once the channel is closed and drained."""
        if self._drained:
            return None
        item = await self._queue.get()
        if item is _CLOSED:
            self._drained = True
            return None
        return item

    async def events(self) -> AsyncIterator[StreamEvent]:
        """Iterate events until close. Abandoning iteration early is a disconnect."""
        try:
            while (event := await self.receive()) is not None:
                yield event
        finally:
            if not self._drained:
                self.mark_disconnected()

    async def frames(self) -> AsyncIterator[str]:
        """Iterate SSE frames until close. Abandoning iteration early is a disconnect."""
        try:
            while (event := await self._receive_or_poll()) is not None:
                yield format_sse_frame(event)
        finally:
            if not self._drained:
                self.mark_disconnected()

    async def _receive_or_poll(self) -> StreamEvent | None:
        """Like ``receive()``, but None as soon as ``is_disconnected`` reports true."""
        if self._client_gone is None:
            return await self.receive()
        while True:
            try:
                return await asyncio.wait_for(self.receive(), timeout=self._poll_interval)
            except asyncio.TimeoutError:
                if await self._client_gone():
                    return None
