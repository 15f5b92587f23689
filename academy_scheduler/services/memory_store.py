# File: academy_scheduler/services/memory_store.py

import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from academy_scheduler.core.config_manager import Config
from academy_scheduler.utils.logger import setup_logger
from academy_scheduler.models import (
    SessionRecord, SessionFilter, SessionStatus, VacationPeriod, MutationResult,
    session_from_dict, vacation_from_dict, format_date, format_time
)
from academy_scheduler.processors.event_projector import session_interval
from academy_scheduler.services.session_store import SessionStore

logger = setup_logger(__name__)


class InMemorySessionStore(SessionStore):
    """
    Local session store for offline runs and tests.

    Applies the same slot checks the backend does: sessions must exist, must
    not be cancelled or completed, and the new slot must not double-book an
    assigned instructor.
    """

    def __init__(
        self,
        sessions: Iterable[SessionRecord] = (),
        vacations: Iterable[VacationPeriod] = ()
    ):
        self.sessions: Dict[str, SessionRecord] = {s.id: s for s in sessions}
        self.vacations: List[VacationPeriod] = list(vacations)

    @classmethod
    def from_fixture(cls, path: Path) -> 'InMemorySessionStore':
        """Seed the store from a JSON fixture with 'sessions' and 'vacations' lists."""
        data = Config.load_fixture(path)

        sessions = []
        for row in data.get('sessions', []):
            try:
                sessions.append(session_from_dict(row))
            except (ValueError, TypeError) as e:
                logger.error(f"Failed to convert session {row.get('title', 'Unknown')}: {e}")

        vacations = []
        for row in data.get('vacations', []):
            try:
                vacations.append(vacation_from_dict(row))
            except (ValueError, TypeError) as e:
                logger.error(f"Failed to convert vacation {row.get('id', 'Unknown')}: {e}")

        logger.info(f"Loaded fixture {path}: {len(sessions)} sessions, {len(vacations)} vacations")
        return cls(sessions, vacations)

    async def list_sessions(self, session_filter: Optional[SessionFilter] = None) -> List[SessionRecord]:
        session_filter = session_filter or SessionFilter()
        return [s for s in self.sessions.values() if session_filter.matches(s)]

    def _find_conflict(self, moved: SessionRecord) -> Optional[SessionRecord]:
        """Another live session of the same instructor overlapping the moved one."""
        try:
            start, end = session_interval(moved)
        except ValueError:
            return None

        for other in self.sessions.values():
            if other.id == moved.id or other.status == SessionStatus.CANCELLED:
                continue
            if not set(other.instructor_ids) & set(moved.instructor_ids):
                continue
            try:
                other_start, other_end = session_interval(other)
            except ValueError:
                continue
            if other_start < end and other_end > start:
                return other
        return None

    async def reschedule_session(
        self,
        session_id: str,
        new_start_date: datetime.date,
        new_start_time: datetime.time,
        reason: Optional[str] = None
    ) -> MutationResult:
        session = self.sessions.get(session_id)
        if session is None:
            return MutationResult.fail(f"Session {session_id} not found")
        if session.is_locked():
            return MutationResult.fail(
                f"Session {session_id} is {session.status.value} and cannot be rescheduled"
            )

        moved = session.rescheduled_to(format_date(new_start_date), format_time(new_start_time))
        conflict = self._find_conflict(moved)
        if conflict is not None:
            return MutationResult.fail(
                f"Instructor is already booked for '{conflict.title}' at "
                f"{conflict.start_date} {conflict.start_time}"
            )

        self.sessions[session_id] = moved
        logger.info(f"Session {session_id} moved to {moved.start_date} {moved.start_time}")
        return MutationResult.ok()

    async def cancel_session(self, session_id: str, reason: Optional[str] = None) -> MutationResult:
        session = self.sessions.get(session_id)
        if session is None:
            return MutationResult.fail(f"Session {session_id} not found")
        if session.status == SessionStatus.CANCELLED:
            return MutationResult.fail(f"Session {session_id} is already cancelled")

        self.sessions[session_id] = session.cancelled(reason)
        logger.info(f"Session {session_id} cancelled ({reason or 'no reason given'})")
        return MutationResult.ok()

    async def list_vacation_periods(self, instructor_id: str) -> List[VacationPeriod]:
        return [v for v in self.vacations if v.instructor_id == instructor_id]
