# File: academy_scheduler/processors/impact_resolver.py
"""
Vacation impact resolution.
Finds the sessions an instructor's vacation collides with.

Overlap is checked at date granularity: vacations are whole-day ranges, so a
session on any date inside the range is impacted whatever its time of day.
"""

import datetime
from typing import Iterable, List, Optional, Tuple

from academy_scheduler.utils.logger import setup_logger
from academy_scheduler.models import (
    SessionRecord, SessionStatus, VacationPeriod, ImpactedSession
)

logger = setup_logger(__name__)


def session_date_span(session: SessionRecord) -> Optional[Tuple[datetime.date, datetime.date]]:
    """
    First and last calendar date a session touches, in its own wall-clock time.

    Returns None when the start date/time cannot be parsed.
    """
    start_day = session.start_day()
    start_clock = session.start_clock()
    if start_day is None or start_clock is None:
        return None

    start = datetime.datetime.combine(start_day, start_clock)
    minutes = session.duration if isinstance(session.duration, int) and session.duration > 0 else 0
    # Half-open interval: a class ending exactly at midnight stays on its start date
    try:
        last = start + datetime.timedelta(minutes=minutes - 1) if minutes else start
    except OverflowError:
        return None
    return start.date(), last.date()


def is_impacted(session: SessionRecord, vacation: VacationPeriod) -> bool:
    """Selection predicate for a single session."""
    if session.status == SessionStatus.CANCELLED:
        return False
    if not session.is_assigned_to(vacation.instructor_id):
        return False

    span = session_date_span(session)
    if span is None:
        return False
    first_day, last_day = span
    return first_day <= vacation.end_date and last_day >= vacation.start_date


def resolve(sessions: Iterable[SessionRecord], vacation: VacationPeriod) -> List[ImpactedSession]:
    """
    Compute the impacted set for one vacation.

    Args:
        sessions: Candidate session records (any instructor, any date)
        vacation: The instructor's vacation period

    Returns:
        Fresh Pending ImpactedSession items, ordered by start date, start time, id
    """
    if not vacation.is_active():
        logger.info(f"Vacation {vacation.id or ''} is cancelled; nothing is impacted")
        return []

    impacted: List[ImpactedSession] = []
    for session in sessions:
        if session_date_span(session) is None:
            logger.warning(
                f"Cannot place session '{session.title}' ({session.id}) "
                f"for impact check: {session.start_date} {session.start_time} "
                f"({session.duration} min)"
            )
            continue
        if is_impacted(session, vacation):
            impacted.append(ImpactedSession(session=session, vacation=vacation))

    impacted.sort(key=lambda item: (item.session.start_day(), item.session.start_clock(), item.session.id))

    logger.info(
        f"Vacation {vacation.label()} for instructor {vacation.instructor_id}: "
        f"{len(impacted)} impacted sessions"
    )
    return impacted
