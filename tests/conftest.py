"""Pytest configuration and shared fixtures."""
import asyncio
from collections.abc import AsyncIterator

import pytest
from fastapi.testclient import TestClient

from codexweb.backends import ActionDraft, BackendItem, ContentBackend, TurnRequest
from codexweb.config import create_config_store
from codexweb.conversation import create_conversation_store
from codexweb.decisions import DecisionReconciler
from codexweb.events import CancellationToken, QueueEventChannel
from codexweb.server import create_app


class ScriptedBackend(ContentBackend):
    """Backend that yields a fixed list of items, optionally failing or waiting."""

    def __init__(
        self,
        items: list[BackendItem] | None = None,
        fail_after: int | None = None,
        gate: asyncio.Event | None = None,
        gate_from: int = 0,
    ):
        self.items = items or []
        self.fail_after = fail_after
        self.gate = gate
        self.gate_from = gate_from
        self.requests: list[TurnRequest] = []
        self.stopped_early = False

    @property
    def name(self) -> str:
        return "scripted"

    async def generate(
        self,
        request: TurnRequest,
        cancellation: CancellationToken,
    ) -> AsyncIterator[BackendItem]:
        self.requests.append(request)
        finished = False
        try:
            for n, item in enumerate(self.items):
                if self.fail_after is not None and n == self.fail_after:
                    raise RuntimeError("model endpoint returned 500")
                if self.gate is not None and n >= self.gate_from:
                    await self.gate.wait()
                yield item
            finished = True
        finally:
            if not finished:
                self.stopped_early = True


@pytest.fixture
def config_store():
    """Return an in-memory configuration store with defaults."""
    return create_config_store("memory")


@pytest.fixture
def conversation_store():
    """Return an empty in-memory conversation store."""
    return create_conversation_store("memory")


@pytest.fixture
def reconciler(conversation_store):
    """Return a reconciler bound to the conversation store."""
    return DecisionReconciler(conversation_store)


@pytest.fixture
def config_path(tmp_path):
    """Return a path for a JSON configuration file that does not exist yet."""
    return tmp_path / "temp.config.json"


@pytest.fixture
def command_draft():
    """Return a valid command draft."""
    return ActionDraft(kind="command", command="ls -la", description="List files?")


@pytest.fixture
def patch_draft():
    """Return a valid file patch draft."""
    return ActionDraft(
        kind="filePatch",
        diff_string="--- a/app.py\n+++ b/app.py\n@@ -1 +1 @@\n-x = 1\n+x = 2\n",
        file_name="app.py",
        description="Apply this patch?",
    )


@pytest.fixture
async def open_channel():
    """Return an opened queue channel."""
    channel = QueueEventChannel(label="test")
    await channel.open()
    return channel


@pytest.fixture
def client(config_store, conversation_store):
    """Return a test client around the app with the simulated backend."""
    app = create_app(config_store, conversation_store=conversation_store)
    with TestClient(app) as test_client:
        yield test_client
