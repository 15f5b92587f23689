# File: academy_scheduler/processors/event_projector.py
"""
Event projection module.
Turns stored session records into calendar events. Pure: no I/O, no state.
"""

import datetime
from typing import Iterable, Optional, Tuple

import pytz

from academy_scheduler.core.config_manager import Config
from academy_scheduler.utils.logger import setup_logger
from academy_scheduler.models import (
    SessionRecord, CalendarEvent, SkippedRecord, ProjectionResult
)
from academy_scheduler.processors.color_policy import event_colors

logger = setup_logger(__name__)


def session_interval(
    session: SessionRecord,
    default_timezone: str = Config.TARGET_TIMEZONE
) -> Tuple[datetime.datetime, datetime.datetime]:
    """
    Compute the absolute [start, end) interval of a session.

    Raises:
        ValueError: with a ``field: message`` text when the record cannot be placed
    """
    start_day = session.start_day()
    if start_day is None:
        raise ValueError(f"start_date: unparseable date '{session.start_date}'")

    start_clock = session.start_clock()
    if start_clock is None:
        raise ValueError(f"start_time: unparseable time '{session.start_time}'")

    if not isinstance(session.duration, (int, float)) or session.duration <= 0:
        raise ValueError(f"duration: must be positive, got {session.duration}")

    tz_name = session.timezone or default_timezone
    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"timezone: unknown timezone '{tz_name}'")

    try:
        start = tz.localize(datetime.datetime.combine(start_day, start_clock))
        # Normalize across DST transitions
        end = tz.normalize(start + datetime.timedelta(minutes=session.duration))
    except OverflowError:
        raise ValueError(
            f"duration: {session.duration} minutes from {session.start_date} "
            f"{session.start_time} is out of range"
        )
    return start, end


def project_session(
    session: SessionRecord,
    default_timezone: str = Config.TARGET_TIMEZONE
) -> CalendarEvent:
    """Project a single record. Raises ValueError if the record is malformed."""
    start, end = session_interval(session, default_timezone)
    colors = event_colors(session)
    return CalendarEvent(
        event_id=session.id,
        title=session.title,
        start=start,
        end=end,
        session=session,
        color=colors.background,
        border_color=colors.border,
        text_color=colors.text,
    )


def project(
    sessions: Iterable[SessionRecord],
    default_timezone: Optional[str] = None
) -> ProjectionResult:
    """
    Turn session records into calendar events.

    Records that cannot be placed (bad date/time, unknown timezone,
    non-positive duration) are left out and reported in ``skipped``.

    Args:
        sessions: Any collection of records, inside or outside the visible window
        default_timezone: Timezone for records that do not declare one

    Returns:
        ProjectionResult with events in input order and skip diagnostics
    """
    tz_name = default_timezone or Config.TARGET_TIMEZONE
    result = ProjectionResult()

    for session in sessions:
        try:
            result.events.append(project_session(session, tz_name))
        except ValueError as e:
            field, _, message = str(e).partition(': ')
            diagnostic = SkippedRecord(
                session_id=session.id,
                field=field if message else 'session',
                message=message or str(e),
            )
            result.skipped.append(diagnostic)
            logger.warning(f"Skipping session '{session.title}': {diagnostic}")

    logger.debug(
        f"Projected {len(result.events)} events ({len(result.skipped)} skipped)"
    )
    return result
