"""Content backends: where a turn's text and proposals come from."""

from .base import ContentBackend
from .extract import ProposalExtractor
from .factory import create_content_backend
from .llm import LLMBackend
from .models import ActionDraft, BackendItem, TextChunk, TurnRequest
from .simulated import SimulatedBackend

__all__ = [
    "ContentBackend",
    "ProposalExtractor",
    "create_content_backend",
    "LLMBackend",
    "ActionDraft",
    "BackendItem",
    "TextChunk",
    "TurnRequest",
    "SimulatedBackend",
]
