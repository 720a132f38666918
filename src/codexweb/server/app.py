"""HTTP surface: configuration, streamed turns and decisions.

Routes:
    GET  /                                   health text
    GET  /api/config                         current configuration
    POST /api/config                         partial configuration update
    POST /api/chat/prompt                    start a turn (text/event-stream)
    POST /api/chat/decision                  approve or reject a proposal
    GET  /api/chat/sessions/{id}/messages    read-only view of a session log
"""

import asyncio
from collections.abc import Sequence
from typing import Any

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from loguru import logger
from pydantic import ValidationError

from ..backends import ContentBackend, create_content_backend
from ..config import ConfigStore
from ..conversation import ConversationStore, create_conversation_store
from ..decisions import DecisionReconciler
from ..errors import ChannelUnavailable, CodexWebError, DecisionConflict, NotFound
from ..events import SSE_HEADERS, SSE_MEDIA_TYPE, QueueEventChannel
from ..session import SessionCoordinator
from .schemas import DecisionRequest, PromptRequest

STATUS_CODES: dict[type[CodexWebError], int] = {
    ChannelUnavailable: 503,
    NotFound: 404,
    DecisionConflict: 409,
}


def create_app(
    config_store: ConfigStore,
    conversation_store: ConversationStore | None = None,
    backend: ContentBackend | None = None,
) -> FastAPI:
    """Build the application around explicit collaborators.

    Args:
        config_store: The user's configuration store
        conversation_store: Session logs (default: in-memory)
        backend: Content backend (default: simulated, no delay)
    """
    conversations = conversation_store or create_conversation_store("memory")
    reconciler = DecisionReconciler(conversations)
    coordinator = SessionCoordinator(
        backend=backend or create_content_backend("simulated"),
        store=conversations,
        config_store=config_store,
        reconciler=reconciler,
    )
    running_turns: set[asyncio.Task] = set()

    app = FastAPI(title="Open Codex Web Backend", version="0.1.0")
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.state.config_store = config_store
    app.state.conversations = conversations
    app.state.coordinator = coordinator
    app.state.running_turns = running_turns

    @app.exception_handler(CodexWebError)
    async def handle_codexweb_error(request: Request, exc: CodexWebError) -> JSONResponse:
        return JSONResponse(status_code=STATUS_CODES.get(type(exc), 500), content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    @app.exception_handler(ValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError | ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": "invalid_request", "detail": _describe_errors(exc.errors())},
        )

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Open Codex Web Backend is running!"

    @app.get("/api/config")
    async def get_config() -> dict[str, Any]:
        return config_store.get().to_wire()

    @app.post("/api/config")
    async def update_config(partial: dict[str, Any] = Body(...)) -> dict[str, Any]:
        return config_store.set(partial).to_wire()

    @app.post("/api/chat/prompt")
    async def prompt(body: PromptRequest, request: Request) -> StreamingResponse:
        channel = QueueEventChannel(is_disconnected=request.is_disconnected, label="prompt")
        await channel.open()

        task = asyncio.create_task(coordinator.run_turn(
            channel,
            body.prompt,
            images=body.images,
            context_files=body.context_files,
            provider=body.provider,
            model=body.model,
            session_id=body.session_id,
        ))
        running_turns.add(task)
        task.add_done_callback(_turn_finished(running_turns))

        return StreamingResponse(channel.frames(), media_type=SSE_MEDIA_TYPE, headers=SSE_HEADERS)

    @app.post("/api/chat/decision")
    async def decision(body: DecisionRequest) -> dict[str, Any]:
        confirmation = reconciler.reconcile(body.to_decision(), session_id=body.session_id)
        return confirmation.to_wire()

    @app.get("/api/chat/sessions/{session_id}/messages")
    async def session_messages(session_id: str) -> list[dict[str, Any]]:
        return [message.to_dict() for message in conversations.find_log(session_id)]

    return app


def _describe_errors(errors: Sequence[Any]) -> str:
    """Flatten pydantic error entries into one line, e.g. ``body.actionId: Field required``."""
    parts = []
    for error in errors:
        message = error.get("msg", "invalid value")
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "invalid request"


def _turn_finished(running: set[asyncio.Task]):
    def callback(task: asyncio.Task) -> None:
        running.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.opt(exception=task.exception()).error("Turn task crashed")

    return callback

