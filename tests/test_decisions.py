"""Unit tests for the decisions module."""
import threading

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from codexweb.actions import ActionKind, ActionProposal, Resolution
from codexweb.conversation import Message, MessageRole, create_conversation_store
from codexweb.decisions import Decision, DecisionReconciler, confirmation_text
from codexweb.errors import DecisionConflict, NotFound


@pytest.fixture
def proposed(conversation_store):
    """Return (log, message) for a session holding one pending patch proposal."""
    log = conversation_store.get_log("sess_1")
    log.append(Message(role=MessageRole.USER, content="fix the typo"))
    message = log.append(Message(
        role=MessageRole.ASSISTANT,
        content="Apply this patch?",
        proposal=ActionProposal(
            kind=ActionKind.FILE_PATCH,
            diff_string="--- a/README.md\n+++ b/README.md\n@@ -1 +1 @@\n-Helo\n+Hello\n",
            file_name="README.md",
        ),
    ))
    return log, message


def decision_for(message: Message, approved: bool) -> Decision:
    return Decision(action_id=message.proposal.id, message_id=message.id, approved=approved)


class TestDecision:
    """Tests for Decision model."""

    def test_accepts_wire_keys(self):
        """Test that camelCase request keys validate."""
        decision = Decision.model_validate({"actionId": "act_1", "messageId": "msg_1", "approved": True})

        assert decision.action_id == "act_1"
        assert decision.message_id == "msg_1"

    def test_empty_action_id_fails(self):
        """Test that an empty action id fails validation."""
        with pytest.raises(ValueError):
            Decision(action_id="", message_id="msg_1", approved=True)

    def test_confirmation_text(self):
        """Test that confirmation text is deterministic."""
        assert confirmation_text("act_9", True) == "Backend acknowledged approval of action act_9"
        assert confirmation_text("act_9", False) == "Backend acknowledged rejection of action act_9"


class TestDecisionReconciler:
    """Tests for DecisionReconciler."""

    def test_approve_appends_system_message(self, reconciler, proposed):
        """Test that an approval resolves the proposal and records it."""
        log, message = proposed

        confirmation = reconciler.reconcile(decision_for(message, True))

        assert message.proposal.is_reviewed
        assert confirmation.approved is True
        assert not confirmation.duplicate
        last = log.messages()[-1]
        assert last.id == confirmation.system_message_id
        assert last.role == MessageRole.SYSTEM
        assert last.content == "File patch approved: patch to README.md"

    def test_wire_response(self, reconciler, proposed):
        """Test the decision response body."""
        _, message = proposed

        wire = reconciler.reconcile(decision_for(message, False)).to_wire()

        assert wire == {
            "status": "decision_received",
            "actionId": message.proposal.id,
            "approved": False,
            "messageId": message.id,
            "confirmation": f"Backend acknowledged rejection of action {message.proposal.id}",
        }

    def test_duplicate_is_idempotent(self, reconciler, proposed):
        """Test that repeating a decision returns the same answer and logs nothing."""
        log, message = proposed
        first = reconciler.reconcile(decision_for(message, True))
        size = len(log)

        second = reconciler.reconcile(decision_for(message, True))

        assert second.duplicate
        assert second.to_wire() == first.to_wire()
        assert len(log) == size

    def test_conflict_leaves_log_untouched(self, reconciler, proposed):
        """Test that a contradicting decision is refused."""
        log, message = proposed
        reconciler.reconcile(decision_for(message, True))
        size = len(log)

        with pytest.raises(DecisionConflict):
            reconciler.reconcile(decision_for(message, False))
        assert len(log) == size
        assert message.proposal.resolution.value == "approved"

    def test_unknown_message(self, reconciler, proposed):
        """Test that an unknown message id is NotFound and changes nothing."""
        log, message = proposed
        size = len(log)

        with pytest.raises(NotFound):
            reconciler.reconcile(Decision(action_id=message.proposal.id, message_id="msg_x", approved=True))
        assert len(log) == size
        assert not message.proposal.is_reviewed

    def test_unknown_session(self, reconciler, proposed):
        """Test that a named session must exist."""
        _, message = proposed

        with pytest.raises(NotFound):
            reconciler.reconcile(decision_for(message, True), session_id="sess_other")

    def test_mismatched_action_id(self, reconciler, proposed):
        """Test that an action id not in the message is NotFound."""
        _, message = proposed

        with pytest.raises(NotFound):
            reconciler.reconcile(Decision(action_id="act_other", message_id=message.id, approved=True))
        assert not message.proposal.is_reviewed

    def test_note_is_appended(self, reconciler, proposed):
        """Test that a note ends up in the system message."""
        log, message = proposed

        reconciler.reconcile(decision_for(message, True), session_id="sess_1", note="auto-approved in full-auto mode")

        assert log.messages()[-1].content.endswith("(auto-approved in full-auto mode)")

    def test_concurrent_duplicates_log_once(self, reconciler, proposed):
        """Test that racing identical decisions append exactly one system message."""
        log, message = proposed
        barrier = threading.Barrier(6)
        results = []

        def decide():
            barrier.wait()
            results.append(reconciler.reconcile(decision_for(message, True)))

        threads = [threading.Thread(target=decide) for _ in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 6
        assert sum(not r.duplicate for r in results) == 1
        system_messages = [m for m in log if m.role == MessageRole.SYSTEM]
        assert len(system_messages) == 1

    @settings(max_examples=25, deadline=None)
    @given(approve_first=st.booleans())
    def test_opposite_decisions_race(self, approve_first: bool):
        """Property test: of two racing opposite decisions exactly one wins."""
        store = create_conversation_store("memory")
        reconciler = DecisionReconciler(store)
        log = store.get_log("sess_race")
        message = log.append(Message(
            role=MessageRole.ASSISTANT,
            content="Run this command?",
            proposal=ActionProposal(kind=ActionKind.COMMAND, command="make clean"),
        ))
        barrier = threading.Barrier(2)
        confirmations = []
        conflicts = []

        def decide(approved: bool):
            barrier.wait()
            try:
                confirmations.append(reconciler.reconcile(decision_for(message, approved)))
            except DecisionConflict as e:
                conflicts.append(e)

        order = [True, False] if approve_first else [False, True]
        threads = [threading.Thread(target=decide, args=(approved,)) for approved in order]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(confirmations) == 1
        assert len(conflicts) == 1
        winner = confirmations[0]
        assert not winner.duplicate
        assert message.proposal.resolution == Resolution.from_flag(winner.approved)
        system_messages = [m for m in log if m.role == MessageRole.SYSTEM]
        assert len(system_messages) == 1
        assert system_messages[0].id == winner.system_message_id
