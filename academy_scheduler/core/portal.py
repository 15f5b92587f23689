# File: academy_scheduler/core/portal.py
"""
Scheduling portal facade.
The operations the host UI calls: calendar reads, drag-reschedule, and the
vacation impact workflow.

Nothing here caches session data between calls. Every calendar read goes back
to the store, so projections never outlive a mutation.
"""

import datetime
from pathlib import Path
from typing import Callable, List, Optional

from academy_scheduler.utils.logger import setup_logger
from academy_scheduler.core.calendar_controller import CalendarViewController
from academy_scheduler.core.impact_workflow import ImpactResolutionWorkflow, ItemRef
from academy_scheduler.services.session_store import SessionStore
from academy_scheduler.services.service_factory import ServiceFactory
from academy_scheduler.processors.impact_resolver import resolve
from academy_scheduler.models import (
    CalendarEvent, TimeWindow, SessionFilter, VacationPeriod, ImpactedSession,
    ImpactAction, MutationResult, ViewSessionIntent
)

logger = setup_logger(__name__)


class SchedulingPortal:
    """
    Host-facing entry point for class scheduling.

    Wires one CalendarViewController and at most one open
    ImpactResolutionWorkflow to a single session store.
    """

    def __init__(
        self,
        store: SessionStore,
        timezone: Optional[str] = None,
        today_provider: Optional[Callable[[], datetime.date]] = None,
        week_start: Optional[int] = None
    ):
        """
        Initialize the portal.

        Args:
            store: Session store (REST backend or in-memory)
            timezone: Display timezone
            today_provider: Returns the current date (tests pin it)
            week_start: First weekday of a week view, 0=Monday ... 6=Sunday
        """
        self.store = store
        self.calendar = CalendarViewController(
            store,
            timezone=timezone,
            today_provider=today_provider,
            week_start=week_start
        )
        self.workflow: Optional[ImpactResolutionWorkflow] = None

    # ==================== Calendar ====================

    async def get_visible_events(self, window: Optional[TimeWindow] = None) -> List[CalendarEvent]:
        """Read sessions fresh from the store and project those overlapping the window."""
        if not await self.calendar.refresh(window):
            return []
        events = self.calendar.visible_events(window)
        logger.info(f"{len(events)} events visible in {window or self.calendar.visible_window}")
        return events

    def on_event_clicked(self, session_id: str) -> Optional[ViewSessionIntent]:
        return self.calendar.on_event_clicked(session_id)

    async def on_event_dropped(self, session_id: str, new_start: datetime.datetime) -> MutationResult:
        return await self.calendar.on_event_dropped(session_id, new_start)

    # ==================== Vacations ====================

    async def list_vacations(self, instructor_id: str) -> List[VacationPeriod]:
        return await self.store.list_vacation_periods(instructor_id)

    async def compute_impacted_sessions(
        self,
        instructor_id: str,
        vacation: VacationPeriod
    ) -> List[ImpactedSession]:
        """
        Compute the impacted set and open a fresh resolution workflow for it.

        Any workflow still open for a previous vacation is dismissed.

        Raises:
            ValueError: If the vacation belongs to another instructor
        """
        if vacation.instructor_id != instructor_id:
            raise ValueError(
                f"Vacation belongs to instructor {vacation.instructor_id}, not {instructor_id}"
            )

        session_filter = SessionFilter(
            instructor_id=instructor_id,
            start_date=vacation.start_date - datetime.timedelta(days=1),
            end_date=vacation.end_date,
        )
        sessions = await self.store.list_sessions(session_filter)
        items = resolve(sessions, vacation)

        self.close_impact_workflow()
        self.workflow = ImpactResolutionWorkflow(self.store, vacation, items)
        return items

    async def resolve_impacted_session(self, item: ItemRef, action: ImpactAction) -> MutationResult:
        """Cancel or reschedule one item of the open workflow."""
        if self.workflow is None:
            return MutationResult.fail("No impacted-classes workflow is open")
        return await self.workflow.resolve(item, action)

    def close_impact_workflow(self) -> None:
        """Dismiss the open workflow, if any. Pending items are allowed."""
        if self.workflow is not None:
            self.workflow.dismiss()
            self.workflow = None

    def close(self) -> None:
        """Tear down the calendar and any open workflow."""
        self.calendar.close()
        self.close_impact_workflow()


class PortalFactory:
    """Factory for creating SchedulingPortal instances with dependency injection."""

    @staticmethod
    def create(fixture_path: Optional[Path] = None, **kwargs) -> SchedulingPortal:
        """
        Create a portal wired to the configured session store.

        Args:
            fixture_path: Use an in-memory store seeded from this JSON fixture
            **kwargs: Passed through to SchedulingPortal

        Raises:
            ValueError: If the backend configuration is invalid
            FileNotFoundError: If the fixture does not exist
        """
        logger.info("Creating SchedulingPortal via factory")
        store = ServiceFactory.create_session_store(fixture_path)
        return SchedulingPortal(store, **kwargs)
