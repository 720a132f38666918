"""Unit tests for the llm module."""
import os

import pytest
from hypothesis import given
from hypothesis import strategies as st

from codexweb.config import ConfigRecord
from codexweb.llm import (
    SUPPORTED_PROVIDERS,
    ChatMessage,
    GeminiProvider,
    LLMProvider,
    OpenAIProvider,
    StreamingResponse,
    TokenUsage,
    create_llm_provider,
    provider_settings,
)
from codexweb.llm.providers.openai import OPENROUTER_BASE_URL, XAI_BASE_URL


class TestLLMProviderInterface:
    """Tests for LLMProvider interface."""

    def test_llm_provider_is_abstract(self):
        """Test that LLMProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            LLMProvider()  # type: ignore


class TestStreamingResponse:
    """Tests for StreamingResponse."""

    @pytest.mark.asyncio
    async def test_usage_is_kept_out_of_the_text(self):
        """Test that a usage record in the source is not yielded as text."""
        async def source():
            yield "Hello"
            yield ", world"
            yield TokenUsage(prompt_tokens=12, completion_tokens=3, total_tokens=15)

        stream = StreamingResponse(source())

        assert stream.usage is None
        assert [chunk async for chunk in stream] == ["Hello", ", world"]
        assert stream.usage.total_tokens == 15

    @pytest.mark.asyncio
    async def test_aclose_stops_the_source(self):
        """Test that closing early finalizes the source generator."""
        closed = []

        async def source():
            try:
                yield "a"
                yield "b"
            finally:
                closed.append(True)

        stream = StreamingResponse(source())
        assert await stream.__anext__() == "a"
        await stream.aclose()

        assert closed == [True]


class TestLLMFactory:
    """Tests for create_llm_provider."""

    def test_create_openai_provider(self):
        """Test creating an OpenAI provider."""
        provider = create_llm_provider("openai", api_key="sk-test", model="o4-mini")

        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "o4-mini"
        assert provider.base_url is None

    def test_openai_requires_api_key(self):
        """Test that a missing key is reported before any request."""
        with pytest.raises(TypeError, match="api_key"):
            create_llm_provider("openai", api_key=None, model="o4-mini")

    @pytest.mark.parametrize("name,base_url", [("openrouter", OPENROUTER_BASE_URL), ("xai", XAI_BASE_URL)])
    def test_compatible_endpoints(self, name: str, base_url: str):
        """Test that OpenAI-compatible vendors reuse the OpenAI client."""
        provider = create_llm_provider(name, api_key="key", model="some-model")

        assert isinstance(provider, OpenAIProvider)
        assert provider.base_url == base_url

    @pytest.mark.parametrize(
        "configured,expected",
        [
            (None, "http://localhost:11434/v1"),
            ("http://gpu-box:11434/", "http://gpu-box:11434/v1"),
            ("http://gpu-box:11434/v1", "http://gpu-box:11434/v1"),
        ],
    )
    def test_ollama_base_url(self, configured: str | None, expected: str):
        """Test that Ollama gets the /v1 suffix and needs no key."""
        provider = create_llm_provider("ollama", base_url=configured, model="llama3.1")

        assert provider.base_url == expected

    def test_create_gemini_provider(self):
        """Test creating a Gemini provider."""
        provider = create_llm_provider("gemini", api_key="g-key", model="gemini-2.5-flash")

        assert isinstance(provider, GeminiProvider)
        assert provider.model == "gemini-2.5-flash"

    @given(st.text(min_size=1).filter(lambda s: s.lower() not in SUPPORTED_PROVIDERS))
    def test_unsupported_provider(self, name: str):
        """Property test: unknown providers raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_llm_provider(name, api_key="key")


class TestProviderSettings:
    """Tests for provider_settings."""

    def test_keys_come_from_matching_field(self):
        """Test that each provider reads its own key."""
        record = ConfigRecord(
            api_key_openai="sk-o",
            api_key_gemini="g",
            api_key_openrouter="or",
            api_key_xai="x",
        )

        assert provider_settings(record, "openai")["api_key"] == "sk-o"
        assert provider_settings(record, "gemini")["api_key"] == "g"
        assert provider_settings(record, "openrouter")["api_key"] == "or"
        assert provider_settings(record, "xai")["api_key"] == "x"

    def test_model_override(self):
        """Test that an explicit model beats the default."""
        record = ConfigRecord(default_model="o4-mini")

        assert provider_settings(record, "openai")["model"] == "o4-mini"
        assert provider_settings(record, "openai", "gpt-4.1")["model"] == "gpt-4.1"

    def test_ollama_base_url(self):
        """Test that the configured Ollama URL is passed through."""
        record = ConfigRecord(ollama_base_url="http://gpu-box:11434")

        assert provider_settings(record, "ollama") == {"model": "o4-mini", "base_url": "http://gpu-box:11434"}


@pytest.mark.integration
@pytest.mark.skipif(not os.getenv("OPENAI_API_KEY"), reason="OPENAI_API_KEY not set")
class TestOpenAIStreaming:
    """Live streaming against the OpenAI API."""

    @pytest.mark.asyncio
    async def test_stream_returns_text(self):
        """Test that a short prompt streams at least one chunk."""
        async with create_llm_provider("openai", api_key=os.getenv("OPENAI_API_KEY"), model="o4-mini") as provider:
            stream = await provider.chat_completion_stream(
                [ChatMessage(role="user", content="Reply with the word ok.")]
            )
            chunks = [chunk async for chunk in stream]

        assert "".join(chunks).strip()
        assert stream.usage is not None
