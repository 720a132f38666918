"""Abstract base class for model providers.

The abstraction hides which vendor answers a turn: client setup, key
handling and conversion of ChatMessage lists to the vendor's format.
Only streaming is offered; a turn always forwards text as it arrives.
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, StreamingResponse


class LLMProvider(ABC):
    """A model endpoint that streams one reply per call.

    Instances are used as async context managers so the HTTP client is
    released at the end of the turn:

        async with create_llm_provider("openai", api_key=key) as provider:
            stream = await provider.chat_completion_stream(messages)
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Model used when a call names none."""

    @abstractmethod
    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Start streaming a reply.

        Args:
            messages: System prompt, history and the new prompt, oldest first
            model: Overrides ``self.model``
            temperature: Left to the model when None
            max_tokens: Reply length cap, left to the model when None
            **kwargs: Vendor-specific request fields

        Returns:
            StreamingResponse yielding text; ``usage`` is set once it ends

        Raises:
            Exception: Whatever the vendor SDK raises; the caller reports it
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying client."""

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # httpx may raise "Event loop is closed" when shutdown races cleanup
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
