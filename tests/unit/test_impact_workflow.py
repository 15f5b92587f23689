# File: tests/unit/test_impact_workflow.py
"""
Unit tests for the impact resolution workflow.
"""

import asyncio
import pytest
from datetime import date, time
from unittest.mock import Mock

from academy_scheduler.core.exceptions import MutationRejectedError, TransientStoreError
from academy_scheduler.core.impact_workflow import ImpactResolutionWorkflow
from academy_scheduler.models import (
    ImpactedSession, CancelAction, RescheduleAction, MutationResult,
    ResolutionState, SubmissionPhase, SessionStatus, WorkflowState
)


@pytest.fixture
def items(make_session, vacation_i1):
    """Two pending items for instructor I1."""
    return [
        ImpactedSession(session=make_session("S1", start_date="2024-06-11"), vacation=vacation_i1),
        ImpactedSession(session=make_session("S5", start_date="2024-06-12"), vacation=vacation_i1),
    ]


@pytest.fixture
def workflow(mock_store, vacation_i1, items):
    return ImpactResolutionWorkflow(mock_store, vacation_i1, items)


class TestCancel:
    """Tests for cancelling impacted sessions."""

    def test_cancel_success(self, workflow, mock_store):
        """Test Pending -> Cancelled and the store call."""
        result = asyncio.run(workflow.cancel("S1", "Instructor on vacation"))

        assert result.is_success()
        mock_store.cancel_session.assert_awaited_once_with("S1", "Instructor on vacation")
        item = workflow.get_item("S1")
        assert item.state == ResolutionState.CANCELLED
        assert item.phase == SubmissionPhase.DONE
        assert item.session.status == SessionStatus.CANCELLED

    def test_cancel_failure_keeps_pending(self, workflow, mock_store):
        """Test a rejected cancel leaves the item retryable with its error."""
        mock_store.cancel_session.return_value = MutationResult.fail("Class already started")

        result = asyncio.run(workflow.cancel("S1"))

        item = workflow.get_item("S1")
        assert not result.is_success()
        assert item.state == ResolutionState.PENDING
        assert item.phase == SubmissionPhase.IDLE
        assert item.last_error == "Class already started"
        assert item.session.status == SessionStatus.SCHEDULED

    def test_raised_store_error_becomes_result(self, workflow, mock_store):
        """Test store exceptions do not escape the workflow."""
        mock_store.cancel_session.side_effect = TransientStoreError("Server unavailable")

        result = asyncio.run(workflow.cancel("S1"))

        assert not result.is_success()
        assert result.retryable is True
        assert workflow.get_item("S1").is_pending()

    def test_retry_after_failure(self, workflow, mock_store):
        """Test a failed item can be submitted again."""
        mock_store.cancel_session.side_effect = [
            MutationRejectedError("Locked by admin"),
            MutationResult.ok(),
        ]

        assert not asyncio.run(workflow.cancel("S1")).is_success()
        assert asyncio.run(workflow.cancel("S1")).is_success()
        assert workflow.get_item("S1").state == ResolutionState.CANCELLED

    def test_unexpected_error_propagates_and_resets_phase(self, workflow, mock_store):
        """Test non-store exceptions propagate without wedging the item."""
        mock_store.cancel_session.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            asyncio.run(workflow.cancel("S1"))

        item = workflow.get_item("S1")
        assert item.phase == SubmissionPhase.IDLE
        assert item.is_pending()


class TestReschedule:
    """Tests for rescheduling impacted sessions."""

    def test_reschedule_success(self, workflow, mock_store):
        """Test Pending -> Rescheduled with new start fields."""
        result = asyncio.run(workflow.reschedule("S5", date(2024, 6, 20), time(16, 0), "Moved"))

        assert result.is_success()
        mock_store.reschedule_session.assert_awaited_once_with(
            "S5", date(2024, 6, 20), time(16, 0), "Moved"
        )
        item = workflow.get_item("S5")
        assert item.state == ResolutionState.RESCHEDULED
        assert item.session.start_date == "2024-06-20"
        assert item.session.start_time == "16:00"

    def test_resolve_dispatches_actions(self, workflow, mock_store):
        """Test resolve() with both action types."""
        asyncio.run(workflow.resolve("S1", CancelAction(reason="Away")))
        asyncio.run(workflow.resolve("S5", RescheduleAction(date(2024, 6, 20), time(16, 0))))

        assert workflow.get_item("S1").state == ResolutionState.CANCELLED
        assert workflow.get_item("S5").state == ResolutionState.RESCHEDULED

    def test_resolve_unknown_action(self, workflow):
        """Test unsupported actions are a programming error."""
        with pytest.raises(TypeError):
            asyncio.run(workflow.resolve("S1", "cancel"))


class TestGuards:
    """Tests for terminal states, membership and double submission."""

    def test_resolved_item_is_idempotent(self, workflow, mock_store):
        """Test a second action on a resolved item makes no store call."""
        asyncio.run(workflow.cancel("S1"))
        result = asyncio.run(workflow.reschedule("S1", date(2024, 6, 20), time(16, 0)))

        assert not result.is_success()
        assert "already cancelled" in result.message
        mock_store.reschedule_session.assert_not_called()
        assert mock_store.cancel_session.await_count == 1

    def test_item_from_other_workflow_refused(self, workflow, mock_store, make_session, vacation_i1):
        """Test only members of this batch can be resolved."""
        stranger = ImpactedSession(session=make_session("S9"), vacation=vacation_i1)

        result = asyncio.run(workflow.cancel(stranger))

        assert not result.is_success()
        mock_store.cancel_session.assert_not_called()

    def test_double_submission_refused(self, mock_store, vacation_i1, items):
        """Test a second submit while the first is in flight."""
        async def scenario():
            gate = asyncio.Event()

            async def slow_cancel(session_id, reason=None):
                await gate.wait()
                return MutationResult.ok()

            mock_store.cancel_session.side_effect = slow_cancel
            workflow = ImpactResolutionWorkflow(mock_store, vacation_i1, items)

            first = asyncio.create_task(workflow.cancel("S1"))
            await asyncio.sleep(0)
            phase_during = workflow.get_item("S1").phase
            second = await workflow.reschedule("S1", date(2024, 6, 20), time(16, 0))
            gate.set()
            return phase_during, second, await first

        phase_during, second, first = asyncio.run(scenario())

        assert phase_during == SubmissionPhase.IN_FLIGHT
        assert "already in progress" in second.message
        assert first.is_success()
        assert mock_store.cancel_session.await_count == 1
        mock_store.reschedule_session.assert_not_called()

    def test_failure_on_one_item_does_not_block_others(self, workflow, mock_store):
        """Test items are independent."""
        mock_store.cancel_session.side_effect = [
            MutationResult.fail("Nope"),
            MutationResult.ok(),
        ]

        asyncio.run(workflow.cancel("S1"))
        asyncio.run(workflow.cancel("S5"))

        assert workflow.get_item("S1").is_pending()
        assert workflow.get_item("S5").state == ResolutionState.CANCELLED


class TestLifecycle:
    """Tests for workflow state, dismissal and summary."""

    def test_closes_when_all_resolved(self, workflow):
        """Test Open -> Closed once nothing is pending."""
        assert workflow.state == WorkflowState.OPEN

        asyncio.run(workflow.cancel("S1"))
        assert workflow.state == WorkflowState.OPEN

        asyncio.run(workflow.cancel("S5"))
        assert workflow.state == WorkflowState.CLOSED
        assert workflow.is_fully_resolved is True

    def test_empty_workflow_is_closed(self, mock_store, vacation_i1):
        """Test no impacted sessions means nothing to do."""
        workflow = ImpactResolutionWorkflow(mock_store, vacation_i1, [])
        assert workflow.state == WorkflowState.CLOSED

    def test_dismiss_leaves_items_pending(self, workflow, mock_store):
        """Test dismissal closes without resolving."""
        workflow.dismiss()

        assert workflow.state == WorkflowState.CLOSED
        assert workflow.is_fully_resolved is False
        result = asyncio.run(workflow.cancel("S1"))
        assert not result.is_success()
        mock_store.cancel_session.assert_not_called()

    def test_response_after_dismiss_is_ignored(self, mock_store, vacation_i1, items):
        """Test a late response does not resolve an item of a dismissed workflow."""
        async def scenario():
            gate = asyncio.Event()

            async def slow_cancel(session_id, reason=None):
                await gate.wait()
                return MutationResult.ok()

            mock_store.cancel_session.side_effect = slow_cancel
            workflow = ImpactResolutionWorkflow(mock_store, vacation_i1, items)
            task = asyncio.create_task(workflow.cancel("S1"))
            await asyncio.sleep(0)
            workflow.dismiss()
            gate.set()
            return workflow, await task

        workflow, result = asyncio.run(scenario())

        assert result.ignored is True
        item = workflow.get_item("S1")
        assert item.is_pending()
        assert item.phase == SubmissionPhase.IDLE
        assert item.session.status == SessionStatus.SCHEDULED

    def test_on_resolved_callback(self, mock_store, vacation_i1, items):
        """Test the host is notified per resolved item."""
        callback = Mock()
        workflow = ImpactResolutionWorkflow(mock_store, vacation_i1, items, on_resolved=callback)

        asyncio.run(workflow.cancel("S1"))

        callback.assert_called_once_with(workflow.get_item("S1"))

    def test_summary(self, workflow):
        """Test counts per state."""
        asyncio.run(workflow.cancel("S1"))
        summary = workflow.summary()

        assert summary['vacation'] == "Jun 10, 2024 - Jun 14, 2024"
        assert summary['total'] == 2
        assert summary['Pending'] == 1
        assert summary['Cancelled'] == 1
        assert summary['Rescheduled'] == 0
        assert summary['state'] == "Open"
