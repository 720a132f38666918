"""Backend that streams a real model's reply.

Text is forwarded as it arrives; fenced ```bash and ```diff blocks in the
reply become proposals as soon as each block closes.
"""

from collections.abc import AsyncIterator, Callable

from loguru import logger

from ..config import ConfigStore
from ..conversation import Attachment
from ..events import CancellationToken
from ..llm import ChatMessage, LLMProvider, create_llm_provider, provider_settings
from .base import ContentBackend
from .extract import ProposalExtractor
from .models import BackendItem, TextChunk, TurnRequest

SYSTEM_PROMPT = """You are a coding assistant working inside the user's project.
When you want to run a shell command, put exactly one command per line in a ```bash block.
When you want to change a file, put a unified diff with ---/+++ headers in a ```diff block.
Nothing you propose runs until the user approves it, so explain what each proposal does."""


class LLMBackend(ContentBackend):
    """Content from a hosted or local model provider.

    Provider credentials are read from the configuration store at the
    start of every turn, so key changes apply to the next prompt.
    """

    def __init__(
        self,
        config_store: ConfigStore,
        provider_factory: Callable[..., LLMProvider] = create_llm_provider,
        temperature: float | None = None,
    ):
        self._config = config_store
        self._factory = provider_factory
        self._temperature = temperature

    @property
    def name(self) -> str:
        return "llm"

    async def generate(
        self,
        request: TurnRequest,
        cancellation: CancellationToken,
    ) -> AsyncIterator[BackendItem]:
        settings = provider_settings(self._config.get(), request.provider, request.model)
        provider = self._factory(request.provider, **settings)
        extractor = ProposalExtractor()

        async with provider:
            stream = await provider.chat_completion_stream(
                self.build_messages(request),
                model=request.model,
                temperature=self._temperature,
            )
            try:
                async for chunk in stream:
                    if cancellation.cancelled:
                        break
                    yield TextChunk(content=chunk)
                    for draft in extractor.feed(chunk):
                        yield draft
            finally:
                await stream.aclose()

        if stream.usage:
            logger.debug(f"{request.provider}/{request.model} used {stream.usage.total_tokens} tokens")

    @staticmethod
    def build_messages(request: TurnRequest) -> list[ChatMessage]:
        """System prompt, then session history, then the new prompt."""
        system = SYSTEM_PROMPT
        if request.instructions:
            system += f"\n\nUser instructions:\n{request.instructions}"

        prompt = request.prompt
        attachments = _describe_attachments("Attached images", request.images)
        attachments += _describe_attachments("Context files", request.context_files)
        if attachments:
            prompt = "\n".join([prompt, "", *attachments])

        return [
            ChatMessage(role="system", content=system),
            *request.history,
            ChatMessage(role="user", content=prompt),
        ]


def _describe_attachments(title: str, attachments: list[Attachment]) -> list[str]:
    if not attachments:
        return []
    lines = [f"{title}:"]
    lines.extend(f"- {a.name} ({a.media_type or 'unknown type'}, {a.size} bytes)" for a in attachments)
    return lines
