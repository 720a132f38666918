"""Drives one conversational turn from prompt to end of stream.

The coordinator is the only writer to its channel. It pulls items from
the backend one at a time and races every pull against the channel's
cancellation token, so a disconnect stops generation at the next
suspension point.
"""

import asyncio
import contextlib
from collections.abc import AsyncIterator

from loguru import logger
from pydantic import ValidationError

from ..actions import ActionProposal
from ..approval import ApprovalPolicy
from ..backends import ActionDraft, BackendItem, ContentBackend, TextChunk, TurnRequest
from ..config import ConfigRecord, ConfigStore
from ..conversation import Attachment, ConversationLog, ConversationStore, Message, MessageRole
from ..decisions import Decision, DecisionReconciler
from ..errors import BackendFailure
from ..events import CancellationToken, EventChannel, EventType
from ..llm import ChatMessage
from .models import TurnOutcome, TurnResult

THINKING_STATUS = "Thinking..."

_END = object()


class _Cancelled(Exception):
    """Internal signal: the client went away while waiting on the backend."""


class SessionCoordinator:
    """Runs turns against one backend, one store and one configuration.

    One instance may serve many turns; each ``run_turn`` call owns its own
    channel and shares nothing mutable with other turns except the logs of
    the store.
    """

    def __init__(
        self,
        backend: ContentBackend,
        store: ConversationStore,
        config_store: ConfigStore,
        reconciler: DecisionReconciler | None = None,
        policy: ApprovalPolicy | None = None,
    ):
        self._backend = backend
        self._store = store
        self._config = config_store
        self._reconciler = reconciler or DecisionReconciler(store)
        self._policy = policy or ApprovalPolicy()

    @property
    def reconciler(self) -> DecisionReconciler:
        return self._reconciler

    async def run_turn(
        self,
        channel: EventChannel,
        prompt: str,
        *,
        images: list[Attachment] | None = None,
        context_files: list[Attachment] | None = None,
        provider: str | None = None,
        model: str | None = None,
        session_id: str | None = None,
    ) -> TurnResult:
        """Stream one turn into ``channel``.

        Raises:
            ChannelUnavailable: If the channel cannot be opened; nothing
                is emitted or logged for the turn in that case
        """
        await channel.open()

        record = self._config.get()
        log = self._store.get_log(session_id)
        request = TurnRequest(
            prompt=prompt,
            provider=provider or record.default_provider,
            model=model or record.default_model,
            session_id=log.session_id,
            images=images or [],
            context_files=context_files or [],
            instructions=record.instructions,
            history=_history(log),
        )
        logger.info(
            f"Turn started (session {log.session_id}, {request.provider}/{request.model}, "
            f"{len(request.images)} image(s), {len(request.context_files)} context file(s))"
        )

        log.append(Message(
            role=MessageRole.USER,
            content=prompt,
            images=request.images,
            context_files=request.context_files,
        ))
        turn = _Turn(log, channel)
        turn.emit(EventType.STATUS, content=THINKING_STATUS, sessionId=log.session_id)

        outcome, error = TurnOutcome.COMPLETED, None
        items = self._backend.generate(request, channel.cancellation)
        try:
            while True:
                item = await self._next_item(items, channel.cancellation)
                if item is _END:
                    break
                if channel.cancellation.cancelled:
                    raise _Cancelled()
                self._handle(turn, item, record)
            turn.flush_text()
            turn.emit(EventType.DONE)
            logger.info(f"Turn completed (session {log.session_id}, {len(turn.action_ids)} proposal(s))")
        except _Cancelled:
            outcome = TurnOutcome.CANCELLED
            turn.flush_text()
            logger.info(f"Turn cancelled (session {log.session_id}): {channel.cancellation.reason}")
        except Exception as e:
            outcome = TurnOutcome.FAILED
            error = str(BackendFailure(str(e) or type(e).__name__, backend=self._backend.name))
            logger.exception(f"Turn failed (session {log.session_id})")
            turn.flush_text()
            turn.emit(EventType.STATUS, content=error, error=True)
        finally:
            aclose = getattr(items, "aclose", None)
            if aclose is not None:
                await aclose()
            await channel.close()

        return TurnResult(
            session_id=log.session_id,
            outcome=outcome,
            events_emitted=turn.emitted,
            action_ids=turn.action_ids,
            error=error,
        )

    def _handle(self, turn: "_Turn", item: BackendItem, record: ConfigRecord) -> None:
        if isinstance(item, TextChunk):
            if item.content:
                turn.emit(EventType.TEXT, content=item.content)
                turn.text.append(item.content)
            return

        if isinstance(item, ActionDraft):
            self._propose(turn, item, record)
            return

        raise TypeError(f"Backend produced an unsupported item: {type(item).__name__}")

    def _propose(self, turn: "_Turn", draft: ActionDraft, record: ConfigRecord) -> None:
        try:
            proposal = ActionProposal(
                kind=draft.kind,
                command=draft.command,
                diff_string=draft.diff_string,
                file_name=draft.file_name,
            )
        except ValidationError as e:
            logger.warning(f"Dropping malformed {draft.kind.value} proposal: {e.errors()[0]['msg']}")
            return

        # The proposal message must be in the log before the client can see it
        turn.flush_text()
        message = turn.log.append(Message(
            role=MessageRole.ASSISTANT,
            content=draft.description,
            proposal=proposal,
        ))
        turn.action_ids.append(proposal.id)
        turn.emit(EventType.ACTION, action=proposal.to_wire(message.id))
        logger.info(f"Proposed {proposal.kind.value} {proposal.id} (message {message.id})")

        if self._policy.auto_approves(record.approval_mode, proposal.kind):
            confirmation = self._reconciler.reconcile(
                Decision(action_id=proposal.id, message_id=message.id, approved=True),
                session_id=turn.log.session_id,
                note=self._policy.note(record.approval_mode),
            )
            turn.emit(
                EventType.STATUS,
                content=confirmation.confirmation,
                actionId=proposal.id,
                approved=True,
            )

    async def _next_item(self, items: AsyncIterator[BackendItem], token: CancellationToken) -> object:
        """Pull one item, or raise _Cancelled if the token trips first."""
        if token.cancelled:
            raise _Cancelled()

        pull = asyncio.ensure_future(_pull(items))
        cancelled = asyncio.ensure_future(token.wait())
        try:
            done, _ = await asyncio.wait({pull, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            pull.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await pull
            raise
        finally:
            cancelled.cancel()

        if pull in done:
            return pull.result()

        pull.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await pull
        raise _Cancelled()


class _Turn:
    """Mutable state of one in-flight turn."""

    def __init__(self, log: ConversationLog, channel: EventChannel):
        self.log = log
        self.channel = channel
        self.text: list[str] = []
        self.action_ids: list[str] = []
        self.emitted = 0

    def emit(self, event_type: EventType, **payload: object) -> None:
        if self.channel.emit(event_type, **payload) is not None:
            self.emitted += 1

    def flush_text(self) -> None:
        """Record buffered assistant text as one message."""
        if self.text:
            self.log.append(Message(role=MessageRole.ASSISTANT, content="".join(self.text)))
            self.text = []


async def _pull(items: AsyncIterator[BackendItem]) -> object:
    try:
        return await items.__anext__()
    except StopAsyncIteration:
        return _END


def _history(log: ConversationLog) -> list[ChatMessage]:
    """Earlier messages of the session as model context."""
    history = []
    for message in log:
        content = message.content
        if message.proposal is not None:
            content = f"{content}\nProposed {message.proposal.describe()}".strip()
        if content:
            history.append(ChatMessage(role=message.role.value, content=content))
    return history
