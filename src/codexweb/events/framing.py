"""Server-Sent Events framing.

Each event travels as one frame::

    id: <seq>
    data: <json>
    <blank line>
"""

import json
from typing import Any

from .models import StreamEvent

SSE_MEDIA_TYPE = "text/event-stream"
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def format_sse_frame(event: StreamEvent) -> str:
    """Encode one event as an SSE frame."""
    data = json.dumps(event.to_wire(), separators=(",", ":"))
    return f"id: {event.seq}\ndata: {data}\n\n"


def parse_sse_frames(body: str) -> list[dict[str, Any]]:
    """Decode a complete SSE body into wire events, in arrival order.

    Frames without a ``data`` line are skipped. Multi-line data is joined
    with newlines as the SSE format specifies.
    """
    events = []
    for block in body.split("\n\n"):
        data_lines = [
            line[len("data:"):].lstrip()
            for line in block.splitlines()
            if line.startswith("data:")
        ]
        if data_lines:
            events.append(json.loads("\n".join(data_lines)))
    return events
