"""Model providers: the vendors an LLM-backed turn can stream from."""

from .base import LLMProvider
from .factory import SUPPORTED_PROVIDERS, create_llm_provider, provider_settings
from .models import ChatMessage, StreamingResponse, TokenUsage
from .providers import GeminiProvider, OpenAIProvider

__all__ = [
    "LLMProvider",
    "SUPPORTED_PROVIDERS",
    "create_llm_provider",
    "provider_settings",
    "ChatMessage",
    "StreamingResponse",
    "TokenUsage",
    "GeminiProvider",
    "OpenAIProvider",
]
