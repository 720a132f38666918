"""HTTP server: FastAPI application exposing turns, decisions and configuration."""

from .app import STATUS_CODES, create_app
from .schemas import DecisionRequest, PromptRequest

__all__ = [
    "STATUS_CODES",
    "create_app",
    "DecisionRequest",
    "PromptRequest",
]
