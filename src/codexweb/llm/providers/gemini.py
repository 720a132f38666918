"""Google Gemini provider on the GenAI SDK's async client."""

from collections.abc import AsyncIterator
from typing import Any

from google import genai
from google.genai import types

from ..base import LLMProvider
from ..models import ChatMessage, StreamingResponse, TokenUsage

# Shell commands and patches trip the default "dangerous content" filter
RELAXED_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


class GeminiProvider(LLMProvider):
    """Streams replies from Gemini.

    Hidden design decisions:
    - System messages become one system instruction; assistant turns are "model"
    - Safety thresholds relaxed to BLOCK_ONLY_HIGH for code content
    """

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", **client_kwargs: Any):
        self._model = model
        self._client = genai.Client(api_key=api_key, **client_kwargs)
        self._safety = [
            types.SafetySetting(category=category, threshold="BLOCK_ONLY_HIGH")
            for category in RELAXED_CATEGORIES
        ]

    @property
    def model(self) -> str:
        return self._model

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        system = "\n\n".join(m.content for m in messages if m.role == "system") or None
        contents = [
            types.Content(role="model" if m.role == "assistant" else "user", parts=[types.Part(text=m.content)])
            for m in messages
            if m.role != "system"
        ]
        config = types.GenerateContentConfig(
            system_instruction=system,
            temperature=temperature,
            max_output_tokens=max_tokens,
            safety_settings=self._safety,
            **kwargs
        )
        return StreamingResponse(self._stream(model or self._model, contents, config))

    async def _stream(
        self,
        model: str,
        contents: list[types.Content],
        config: types.GenerateContentConfig,
    ) -> AsyncIterator[str | TokenUsage]:
        usage = None
        async for chunk in await self._client.aio.models.generate_content_stream(
            model=model, contents=contents, config=config
        ):
            if chunk.usage_metadata:
                usage = chunk.usage_metadata
            if chunk.text:
                yield chunk.text

        if usage is not None:
            yield TokenUsage(
                prompt_tokens=usage.prompt_token_count or 0,
                completion_tokens=usage.candidates_token_count or 0,
                total_tokens=usage.total_token_count or 0,
            )

    async def close(self) -> None:
        """Nothing to release; the GenAI client opens connections per request."""
