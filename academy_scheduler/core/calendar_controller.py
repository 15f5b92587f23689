# File: academy_scheduler/core/calendar_controller.py
"""
Calendar view controller.
Owns the visible window and navigation, and turns clicks and drags into intents.

The controller never edits events directly. It keeps the last session records
it read plus optimistic placements for drags still awaiting the store, and
re-projects both on every read.
"""

import calendar
import datetime
from typing import Callable, Dict, List, Optional, Set, Tuple, Union

import pytz

from academy_scheduler.core.config_manager import Config
from academy_scheduler.core.exceptions import SchedulingError
from academy_scheduler.utils.logger import LoggerMixin
from academy_scheduler.models import (
    SessionRecord, SessionFilter, CalendarEvent, SkippedRecord, TimeWindow, Granularity,
    MutationResult, ViewSessionIntent, RescheduleProposal, format_date, format_time
)
from academy_scheduler.processors.event_projector import project
from academy_scheduler.services.session_store import SessionStore, result_from_error

Intent = Union[ViewSessionIntent, RescheduleProposal]


def add_months(day: datetime.date, months: int) -> datetime.date:
    """Shift a date by whole months, clamping the day (Jan 31 + 1 -> Feb 28/29)."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return datetime.date(year, month, min(day.day, last_day))


class CalendarViewController(LoggerMixin):
    """State machine over (granularity, anchor date) for the class calendar."""

    def __init__(
        self,
        store: SessionStore,
        timezone: Optional[str] = None,
        today_provider: Optional[Callable[[], datetime.date]] = None,
        week_start: Optional[int] = None,
        granularity: Optional[Granularity] = None
    ):
        """
        Initialize the controller.

        Args:
            store: Session store used for reads and reschedule mutations
            timezone: Display timezone for the window boundaries
            today_provider: Returns the current date (tests pin it)
            week_start: First weekday of a week view, 0=Monday ... 6=Sunday
            granularity: Initial granularity (default: Week)
        """
        self.store = store
        self.timezone = timezone or Config.TARGET_TIMEZONE
        self._today = today_provider or datetime.date.today
        self.week_start = Config.WEEK_START_DAY if week_start is None else week_start
        self.granularity = granularity or Config.DEFAULT_GRANULARITY
        self.anchor_date = self._today()

        self._records: Dict[str, SessionRecord] = {}
        self._placements: Dict[str, Tuple[str, str]] = {}
        self._in_flight: Set[str] = set()
        self._listeners: List[Callable[[Intent], None]] = []
        self._closed = False
        self.last_diagnostics: List[SkippedRecord] = []

    # ==================== Navigation ====================

    @property
    def visible_window(self) -> TimeWindow:
        """Day, week or month containing the anchor date."""
        anchor = self.anchor_date
        if self.granularity == Granularity.DAY:
            return TimeWindow(anchor, anchor + datetime.timedelta(days=1))
        if self.granularity == Granularity.WEEK:
            offset = (anchor.weekday() - self.week_start) % 7
            start = anchor - datetime.timedelta(days=offset)
            return TimeWindow(start, start + datetime.timedelta(days=7))
        start = anchor.replace(day=1)
        return TimeWindow(start, add_months(start, 1))

    def _shift(self, step: int) -> None:
        if self.granularity == Granularity.DAY:
            self.anchor_date += datetime.timedelta(days=step)
        elif self.granularity == Granularity.WEEK:
            self.anchor_date += datetime.timedelta(weeks=step)
        else:
            self.anchor_date = add_months(self.anchor_date, step)
        self.logger.debug(f"Anchor moved to {self.anchor_date} ({self.granularity.value})")

    def next(self) -> TimeWindow:
        self._shift(1)
        return self.visible_window

    def prev(self) -> TimeWindow:
        self._shift(-1)
        return self.visible_window

    def today(self) -> TimeWindow:
        self.anchor_date = self._today()
        return self.visible_window

    def set_granularity(self, granularity: Union[Granularity, str]) -> TimeWindow:
        """Change the view resolution, keeping the anchor date."""
        if isinstance(granularity, str):
            granularity = Granularity(granularity.capitalize())
        self.granularity = granularity
        return self.visible_window

    def window_bounds(self, window: TimeWindow) -> Tuple[datetime.datetime, datetime.datetime]:
        """Absolute instants of a window's first and last midnight."""
        tz = pytz.timezone(self.timezone)
        start = tz.localize(datetime.datetime.combine(window.start, datetime.time.min))
        end = tz.localize(datetime.datetime.combine(window.end, datetime.time.min))
        return start, end

    # ==================== Reads ====================

    def window_filter(self, window: Optional[TimeWindow] = None) -> SessionFilter:
        """
        Store query covering a window by session wall-clock date.

        One day of slack on each side: classes crossing midnight into the
        window, and classes in timezones ahead of or behind the display one.
        visible_events trims to the exact window afterwards.
        """
        window = window or self.visible_window
        return SessionFilter(
            start_date=window.start - datetime.timedelta(days=1),
            end_date=window.end,
        )

    def load(self, sessions: List[SessionRecord]) -> None:
        """Replace the local snapshot with a fresh read. Pending drags keep their placement."""
        self._records = {s.id: s for s in sessions}
        self._placements = {
            sid: placement for sid, placement in self._placements.items()
            if sid in self._in_flight
        }

    async def refresh(self, window: Optional[TimeWindow] = None) -> bool:
        """
        Re-read sessions for a window from the store.

        Returns:
            False if the controller was closed while the read was in flight
        """
        sessions = await self.store.list_sessions(self.window_filter(window))
        if self._closed:
            self.logger.info("Calendar closed before session list arrived; ignoring it")
            return False
        self.load(sessions)
        return True

    def get_session(self, session_id: str) -> Optional[SessionRecord]:
        return self._records.get(session_id)

    def _displayed_records(self) -> List[SessionRecord]:
        displayed = []
        for record in self._records.values():
            placement = self._placements.get(record.id)
            if placement:
                record = record.rescheduled_to(*placement)
            displayed.append(record)
        return displayed

    def visible_events(self, window: Optional[TimeWindow] = None) -> List[CalendarEvent]:
        """Project the snapshot and keep events overlapping the window, ordered by start."""
        window = window or self.visible_window
        window_start, window_end = self.window_bounds(window)

        result = project(self._displayed_records(), self.timezone)
        self.last_diagnostics = result.skipped

        events = [e for e in result.events if e.start < window_end and e.end > window_start]
        events.sort(key=lambda e: (e.start, e.event_id))
        return events

    # ==================== Interactions ====================

    def subscribe(self, listener: Callable[[Intent], None]) -> None:
        """Register a callback for view and reschedule intents."""
        self._listeners.append(listener)

    def _emit(self, intent: Intent) -> None:
        for listener in list(self._listeners):
            try:
                listener(intent)
            except Exception as e:
                self.logger.error(f"Intent listener failed: {e}", exc_info=True)

    def on_event_clicked(self, session_id: str) -> Optional[ViewSessionIntent]:
        """Emit a 'view session' intent. Does not change any state."""
        record = self._records.get(session_id)
        if record is None:
            self.logger.warning(f"Click on unknown session {session_id}")
            return None
        intent = ViewSessionIntent(session=record)
        self._emit(intent)
        return intent

    def _to_slot(
        self,
        new_start: datetime.datetime,
        record: SessionRecord
    ) -> Tuple[datetime.date, datetime.time]:
        """Wall-clock date and time of a drop target in the session's own timezone."""
        if new_start.tzinfo is not None:
            tz = pytz.timezone(record.timezone or self.timezone)
            new_start = new_start.astimezone(tz)
        return new_start.date(), new_start.time().replace(second=0, microsecond=0)

    async def on_event_dropped(self, session_id: str, new_start: datetime.datetime) -> MutationResult:
        """
        Handle a drag-and-drop reschedule.

        The event is moved optimistically, then the store is asked to persist it.
        Any failure puts the event back at the start the session record holds.

        Returns:
            MutationResult of the reschedule (failed without a store call if refused locally)
        """
        if self._closed:
            return MutationResult.fail("Calendar is closed")

        record = self._records.get(session_id)
        if record is None:
            self.logger.warning(f"Drop of unknown session {session_id}")
            return MutationResult.fail(f"Session {session_id} is not on the calendar")

        if record.is_locked():
            message = f"{record.status.value} classes cannot be rescheduled"
            self.logger.info(f"Refused drag of '{record.title}': {message}")
            return MutationResult.fail(message)

        if session_id in self._in_flight:
            return MutationResult.fail("A reschedule for this class is already in progress")

        new_date, new_time = self._to_slot(new_start, record)
        self._emit(RescheduleProposal(session_id, new_date, new_time))

        placement = (format_date(new_date), format_time(new_time))
        self._placements[session_id] = placement
        self._in_flight.add(session_id)
        self.logger.info(f"Moving '{record.title}' to {placement[0]} {placement[1]}")

        result: Optional[MutationResult] = None
        try:
            result = await self.store.reschedule_session(session_id, new_date, new_time)
        except SchedulingError as e:
            result = result_from_error(e)
        finally:
            self._in_flight.discard(session_id)
            if not self._closed:
                self._settle(session_id, placement, result)

        if self._closed:
            self.logger.info(f"Calendar closed before reschedule of {session_id} returned; ignoring")
            result.ignored = True
            return result

        if not result.is_success():
            self.logger.warning(f"Reschedule of '{record.title}' failed, reverted: {result.message}")
        return result

    def _settle(
        self,
        session_id: str,
        placement: Tuple[str, str],
        result: Optional[MutationResult]
    ) -> None:
        """Confirm or revert an optimistic placement."""
        self._placements.pop(session_id, None)
        current = self._records.get(session_id)
        if result is not None and result.is_success() and current is not None:
            self._records[session_id] = current.rescheduled_to(*placement)

    def close(self) -> None:
        """Tear down the view. Later store responses are ignored."""
        self._closed = True
        self._listeners.clear()

    @property
    def is_closed(self) -> bool:
        return self._closed
