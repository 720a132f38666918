"""Event stream module: ordered delivery of one turn's events to one client."""

from .base import EventChannel
from .cancellation import CancellationToken
from .channel import QueueEventChannel
from .framing import SSE_HEADERS, SSE_MEDIA_TYPE, format_sse_frame, parse_sse_frames
from .models import EventType, StreamEvent

__all__ = [
    "EventChannel",
    "CancellationToken",
    "QueueEventChannel",
    "SSE_HEADERS",
    "SSE_MEDIA_TYPE",
    "format_sse_frame",
    "parse_sse_frames",
    "EventType",
    "StreamEvent",
]
