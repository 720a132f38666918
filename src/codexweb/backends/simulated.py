"""Scripted backend that imitates a model turn.

Useful for UI development and tests: it needs no credentials and always
produces the same shape of turn. The prompt picks which proposals appear:
mentioning a command yields only a command, mentioning a diff or patch
yields only a file patch, anything else yields both.
"""

import asyncio
import shlex
from collections.abc import AsyncIterator

from ..actions import ActionKind
from ..events import CancellationToken
from .base import ContentBackend
from .models import ActionDraft, BackendItem, TextChunk, TurnRequest

COMMAND_KEYWORDS = ("command", "shell", "terminal")
PATCH_KEYWORDS = ("diff", "patch")

SAMPLE_FILE_NAME = "example.txt"
SAMPLE_DIFF = """--- a/example.txt
+++ b/example.txt
@@ -1 +1,2 @@
-Hello world
+Hello backend world!
+This is a new line.
"""


class SimulatedBackend(ContentBackend):
    """Deterministic stand-in for a model provider."""

    def __init__(self, delay: float = 0.0):
        """Initialize the simulation.

        Args:
            delay: Seconds to pause before each step (cut short by cancellation)
        """
        self._delay = delay

    @property
    def name(self) -> str:
        return "simulated"

    async def generate(
        self,
        request: TurnRequest,
        cancellation: CancellationToken,
    ) -> AsyncIterator[BackendItem]:
        wants_command, wants_patch = self.route(request.prompt)

        if not await self._pause(cancellation):
            return
        yield TextChunk(
            content=f'This is a simulated AI response to: "{request.prompt}" '
                    f"from {request.provider}/{request.model}"
        )

        if wants_command:
            if not await self._pause(cancellation):
                return
            yield ActionDraft(
                kind=ActionKind.COMMAND,
                command=self.echo_command(request.prompt),
                description="Run this command?",
            )

        if wants_patch:
            if not await self._pause(cancellation):
                return
            yield ActionDraft(
                kind=ActionKind.FILE_PATCH,
                diff_string=SAMPLE_DIFF,
                file_name=SAMPLE_FILE_NAME,
                description=f"Apply this patch to {SAMPLE_FILE_NAME}?",
            )

    @staticmethod
    def route(prompt: str) -> tuple[bool, bool]:
        """Decide which proposals a prompt gets: (command, patch)."""
        text = prompt.lower()
        wants_command = any(word in text for word in COMMAND_KEYWORDS)
        wants_patch = any(word in text for word in PATCH_KEYWORDS)
        if not wants_command and not wants_patch:
            return True, True
        return wants_command, wants_patch

    @staticmethod
    def echo_command(prompt: str) -> str:
        """Build a harmless single-line command that echoes the prompt."""
        said = " ".join(prompt.split())
        return f"echo {shlex.quote(f'Hello from backend! You said: {said}')} && date"

    async def _pause(self, cancellation: CancellationToken) -> bool:
        """Wait out the step delay; False if the turn was cancelled."""
        if cancellation.cancelled:
            return False
        if self._delay > 0:
            try:
                await asyncio.wait_for(cancellation.wait(), timeout=self._delay)
            except asyncio.TimeoutError:
                pass
        else:
            await asyncio.sleep(0)
        return not cancellation.cancelled
