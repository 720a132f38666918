"""OpenAI Chat Completions provider and the endpoints that speak its protocol."""

from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from ..base import LLMProvider
from ..models import ChatMessage, StreamingResponse, TokenUsage

# OpenAI-compatible endpoints reachable with the same client
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
XAI_BASE_URL = "https://api.x.ai/v1"
OLLAMA_DEFAULT_BASE_URL = "http://localhost:11434"


class OpenAIProvider(LLMProvider):
    """Streams replies from OpenAI or any endpoint with the same API.

    OpenRouter, xAI and Ollama differ only in ``base_url`` and the key.

    Hidden design decisions:
    - Which endpoint the client talks to
    - Request shape (usage requested on the final chunk)
    - Omitting sampling parameters the caller left unset
    """

    def __init__(
        self,
        api_key: str,
        model: str = "o4-mini",
        base_url: str | None = None,
        organization: str | None = None,
        **client_kwargs: Any
    ):
        """Create the client.

        Args:
            api_key: Key for the endpoint (any placeholder for Ollama)
            model: Model used when a request names none
            base_url: Endpoint root; None means api.openai.com
            organization: Optional OpenAI organization id
            **client_kwargs: Passed through to AsyncOpenAI (timeouts, retries)
        """
        self._model = model
        self._base_url = base_url
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, organization=organization, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    @property
    def base_url(self) -> str | None:
        return self._base_url

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        params: dict[str, Any] = {
            "model": model or self._model,
            "messages": [msg.model_dump() for msg in messages],
            "stream": True,
            "stream_options": {"include_usage": True},
            **kwargs,
        }
        # Reasoning models reject an explicit temperature
        if temperature is not None:
            params["temperature"] = temperature
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        return StreamingResponse(self._stream(params))

    async def _stream(self, params: dict[str, Any]) -> AsyncIterator[str | TokenUsage]:
        completion = await self._client.chat.completions.create(**params)
        async for chunk in completion:
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content
            if chunk.usage is not None:
                yield TokenUsage(
                    prompt_tokens=chunk.usage.prompt_tokens,
                    completion_tokens=chunk.usage.completion_tokens,
                    total_tokens=chunk.usage.total_tokens,
                )

    async def close(self) -> None:
        await self._client.close()
