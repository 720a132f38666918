"""Data models exchanged with model providers."""

from collections.abc import AsyncIterator

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """One message of the conversation sent to a model."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")


class TokenUsage(BaseModel):
    """Token counts reported at the end of a stream."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)


class StreamingResponse:
    """Text chunks of one model reply, with token usage once the stream ends.

    Providers feed it a source that yields ``str`` chunks and, usually as
    its last item, a ``TokenUsage``. Iterating the response yields only the
    text; the usage record is kept aside.

    Usage:
        stream = await provider.chat_completion_stream(messages)
        async for chunk in stream:
            print(chunk, end="")
        print(stream.usage)  # TokenUsage(prompt_tokens=100, ...)
    """

    def __init__(self, source: AsyncIterator[str | TokenUsage]):
        self._source = source
        self._usage: TokenUsage | None = None

    @property
    def usage(self) -> TokenUsage | None:
        """Token usage, once the provider has reported it."""
        return self._usage

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> str:
        while True:
            item = await self._source.__anext__()
            if isinstance(item, TokenUsage):
                self._usage = item
                continue
            return item

    async def aclose(self) -> None:
        """Stop the underlying stream early."""
        aclose = getattr(self._source, "aclose", None)
        if aclose is not None:
            await aclose()
