# File: academy_scheduler/core/impact_workflow.py
"""
Impact resolution workflow.
Drives each session hit by a vacation to Cancelled or Rescheduled.

Items are independent: a failure on one never blocks the others, and each item
carries its own in-flight guard so the same session cannot be submitted twice.
"""

import datetime
from typing import Awaitable, Callable, Dict, List, Optional, Union

from academy_scheduler.core.exceptions import SchedulingError
from academy_scheduler.utils.logger import LoggerMixin
from academy_scheduler.models import (
    ImpactedSession, ImpactAction, CancelAction, RescheduleAction, VacationPeriod,
    ResolutionState, SubmissionPhase, WorkflowState, MutationResult,
    format_date, format_time
)
from academy_scheduler.services.session_store import SessionStore, result_from_error

ItemRef = Union[ImpactedSession, str]


class ImpactResolutionWorkflow(LoggerMixin):
    """One resolution batch for a single vacation period."""

    def __init__(
        self,
        store: SessionStore,
        vacation: VacationPeriod,
        items: List[ImpactedSession],
        on_resolved: Optional[Callable[[ImpactedSession], None]] = None
    ):
        """
        Initialize the workflow.

        Args:
            store: Session store receiving cancel/reschedule mutations
            vacation: The vacation being resolved
            items: Fresh impacted set from the resolver
            on_resolved: Called after an item reaches a terminal state
        """
        self.store = store
        self.vacation = vacation
        self.items = list(items)
        self._on_resolved = on_resolved
        self._dismissed = False

    @property
    def state(self) -> WorkflowState:
        if self._dismissed or not self.pending_items:
            return WorkflowState.CLOSED
        return WorkflowState.OPEN

    @property
    def pending_items(self) -> List[ImpactedSession]:
        return [item for item in self.items if item.is_pending()]

    @property
    def is_fully_resolved(self) -> bool:
        """True only when no item is left Pending (dismissal does not count)."""
        return not self.pending_items

    def get_item(self, ref: ItemRef) -> Optional[ImpactedSession]:
        """Look up an item by object or session id."""
        session_id = ref if isinstance(ref, str) else ref.session_id
        for item in self.items:
            if item.session_id == session_id:
                return item
        return None

    def summary(self) -> Dict[str, object]:
        """Counts per resolution state, for the dialog header."""
        counts = {state.value: 0 for state in ResolutionState}
        for item in self.items:
            counts[item.state.value] += 1
        return {
            'vacation': self.vacation.label(),
            'instructor_id': self.vacation.instructor_id,
            'state': self.state.value,
            'total': len(self.items),
            **counts,
        }

    def _refuse(self, item: Optional[ImpactedSession], ref: ItemRef) -> Optional[MutationResult]:
        if self._dismissed:
            return MutationResult.fail("The impacted-classes workflow is closed")
        if item is None:
            session_id = ref if isinstance(ref, str) else ref.session_id
            return MutationResult.fail(f"Session {session_id} is not part of this workflow")
        if item.is_in_flight():
            return MutationResult.fail(f"An action for '{item.session.title}' is already in progress")
        if not item.is_pending():
            return MutationResult.fail(f"'{item.session.title}' is already {item.state.value.lower()}")
        return None

    async def _submit(
        self,
        ref: ItemRef,
        target: ResolutionState,
        call: Callable[[ImpactedSession], Awaitable[MutationResult]],
        apply: Callable[[ImpactedSession], None]
    ) -> MutationResult:
        item = self.get_item(ref)
        refusal = self._refuse(item, ref)
        if refusal is not None:
            return refusal

        item.phase = SubmissionPhase.IN_FLIGHT
        item.last_error = None

        result: Optional[MutationResult] = None
        try:
            result = await call(item)
        except SchedulingError as e:
            result = result_from_error(e)
        finally:
            if result is None:
                # Unexpected exception: leave the item retryable
                item.phase = SubmissionPhase.IDLE
                item.last_error = "Unexpected error"

        if self._dismissed:
            item.phase = SubmissionPhase.IDLE
            self.logger.info(
                f"Workflow dismissed before '{item.session.title}' returned; ignoring result"
            )
            result.ignored = True
            return result

        if not result.is_success():
            item.phase = SubmissionPhase.IDLE
            item.last_error = result.message
            self.logger.warning(f"Could not resolve '{item.session.title}': {result.message}")
            return result

        apply(item)
        item.state = target
        item.phase = SubmissionPhase.DONE
        self.logger.info(
            f"'{item.session.title}' {target.value.lower()} "
            f"({len(self.pending_items)} pending left)"
        )
        if self._on_resolved is not None:
            self._on_resolved(item)
        return result

    async def cancel(self, ref: ItemRef, reason: Optional[str] = None) -> MutationResult:
        """Pending -> Cancelled."""
        def apply(item: ImpactedSession) -> None:
            item.session = item.session.cancelled(reason)

        return await self._submit(
            ref, ResolutionState.CANCELLED,
            lambda item: self.store.cancel_session(item.session_id, reason),
            apply
        )

    async def reschedule(
        self,
        ref: ItemRef,
        new_date: datetime.date,
        new_time: datetime.time,
        reason: Optional[str] = None
    ) -> MutationResult:
        """Pending -> Rescheduled."""
        def apply(item: ImpactedSession) -> None:
            item.session = item.session.rescheduled_to(format_date(new_date), format_time(new_time))

        return await self._submit(
            ref, ResolutionState.RESCHEDULED,
            lambda item: self.store.reschedule_session(item.session_id, new_date, new_time, reason),
            apply
        )

    async def resolve(self, ref: ItemRef, action: ImpactAction) -> MutationResult:
        """Apply a CancelAction or RescheduleAction to one item."""
        if isinstance(action, CancelAction):
            return await self.cancel(ref, action.reason)
        if isinstance(action, RescheduleAction):
            return await self.reschedule(ref, action.new_date, action.new_time, action.reason)
        raise TypeError(f"Unsupported impact action: {action!r}")

    def dismiss(self) -> None:
        """Close the workflow, possibly leaving items Pending."""
        if not self._dismissed:
            self._dismissed = True
            pending = len(self.pending_items)
            if pending:
                self.logger.info(f"Workflow dismissed with {pending} sessions still pending")
