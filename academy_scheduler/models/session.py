# File: academy_scheduler/models/session.py

import datetime
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional
from .enums import SessionStatus, SessionType
from .common import parse_date, parse_time, format_date

@dataclass
class SessionRecord:
    """One scheduled class occurrence, as held by the session store."""
    id: str
    title: str
    start_date: str  # "YYYY-MM-DD"
    start_time: str  # "HH:MM"
    duration: int    # minutes
    category: str
    primary_instructor_id: str
    secondary_instructor_id: Optional[str] = None
    student_ids: List[str] = field(default_factory=list)
    group_id: Optional[str] = None
    status: SessionStatus = SessionStatus.SCHEDULED
    location: Optional[str] = None
    timezone: Optional[str] = None  # IANA name; None means the configured default

    # Optional metadata
    session_type: Optional[str] = None
    class_code: Optional[str] = None
    course: Optional[str] = None
    max_students: int = 0
    enrolled_students: int = 0
    notes: Optional[str] = None
    cancel_reason: Optional[str] = None
    vacation_impacted: bool = False

    def __post_init__(self):
        """Convert string status to enum."""
        if isinstance(self.status, str):
            self.status = SessionStatus(self.status)

    def start_day(self) -> Optional[datetime.date]:
        """Start date, or None if upstream sent garbage."""
        return parse_date(self.start_date)

    def start_clock(self) -> Optional[datetime.time]:
        """Start time-of-day, or None if upstream sent garbage."""
        return parse_time(self.start_time)

    @property
    def instructor_ids(self) -> List[str]:
        return [i for i in (self.primary_instructor_id, self.secondary_instructor_id) if i]

    def is_assigned_to(self, instructor_id: str) -> bool:
        """Check primary and secondary assignment."""
        return instructor_id in self.instructor_ids

    def is_locked(self) -> bool:
        """Cancelled and completed sessions can no longer be moved."""
        return self.status in (SessionStatus.CANCELLED, SessionStatus.COMPLETED)

    def rescheduled_to(self, new_date: str, new_time: str) -> 'SessionRecord':
        """Copy with new start fields; a moved session is no longer vacation-impacted."""
        return replace(self, start_date=new_date, start_time=new_time, vacation_impacted=False)

    def cancelled(self, reason: Optional[str] = None) -> 'SessionRecord':
        """Copy with status Cancelled."""
        return replace(self, status=SessionStatus.CANCELLED, cancel_reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for event metadata and JSON output."""
        return {
            'id': self.id,
            'title': self.title,
            'start_date': self.start_date,
            'start_time': self.start_time,
            'duration': self.duration,
            'category': self.category,
            'primary_instructor_id': self.primary_instructor_id,
            'secondary_instructor_id': self.secondary_instructor_id,
            'student_ids': list(self.student_ids),
            'group_id': self.group_id,
            'status': self.status.value,
            'location': self.location,
            'timezone': self.timezone,
            'session_type': self.session_type,
            'class_code': self.class_code,
            'course': self.course,
            'max_students': self.max_students,
            'enrolled_students': self.enrolled_students,
            'notes': self.notes,
            'cancel_reason': self.cancel_reason,
            'vacation_impacted': self.vacation_impacted,
        }


@dataclass
class SessionFilter:
    """Query for listing sessions. Empty values and "all" mean no constraint."""
    search: str = ""
    instructor_id: Optional[str] = None
    category: Optional[str] = None
    session_type: Optional[str] = None
    status: Optional[SessionStatus] = None
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None  # inclusive

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = None if self.status.lower() == "all" else _normalize_status(self.status)
        for attr in ('instructor_id', 'category', 'session_type'):
            if getattr(self, attr) == "all":
                setattr(self, attr, None)

    def matches(self, record: SessionRecord) -> bool:
        """Apply the filter to a record held locally."""
        if self.search:
            needle = self.search.lower()
            haystack = [record.title.lower()] + [i.lower() for i in record.instructor_ids]
            if not any(needle in text for text in haystack):
                return False
        if self.instructor_id and not record.is_assigned_to(self.instructor_id):
            return False
        if self.category and record.category.lower() != self.category.lower():
            return False
        if self.session_type and (record.session_type or "").lower() != self.session_type.lower():
            return False
        if self.status and record.status != self.status:
            return False
        if self.start_date or self.end_date:
            day = record.start_day()
            if day is None:
                # Keep unplaceable rows so the projector can report them
                return True
            if self.start_date and day < self.start_date:
                return False
            if self.end_date and day > self.end_date:
                return False
        return True

    def to_params(self) -> Dict[str, str]:
        """Query-string parameters for the REST backend."""
        params = {}
        if self.search:
            params['search'] = self.search
        if self.instructor_id:
            params['instructor'] = self.instructor_id
        if self.category:
            params['category'] = self.category
        if self.session_type:
            params['type'] = self.session_type
        if self.status:
            params['status'] = self.status.value.lower()
        if self.start_date:
            params['start_date'] = format_date(self.start_date)
        if self.end_date:
            params['end_date'] = format_date(self.end_date)
        return params


def _normalize_status(raw: Any) -> SessionStatus:
    """Map backend status spellings onto SessionStatus; unknown values default to Scheduled."""
    if isinstance(raw, SessionStatus):
        return raw
    text = str(raw or '').strip().lower()
    mapping = {
        'scheduled': SessionStatus.SCHEDULED,
        'reschedule': SessionStatus.SCHEDULED,
        'rescheduled': SessionStatus.SCHEDULED,
        'ongoing': SessionStatus.ONGOING,
        'completed': SessionStatus.COMPLETED,
        'cancelled': SessionStatus.CANCELLED,
        'canceled': SessionStatus.CANCELLED,
    }
    return mapping.get(text, SessionStatus.SCHEDULED)


def _normalize_type(raw: Any) -> Optional[str]:
    """Canonical spelling for known class types; other values pass through."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, dict):
        raw = raw.get('name')
        if raw is None:
            return None
    text = str(raw).strip()
    for session_type in SessionType:
        if session_type.value.lower() == text.lower():
            return session_type.value
    return text


def _ref_id(value: Any) -> Optional[str]:
    """Backend references are either bare ids or {'id': ...} objects."""
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        value = value.get('id')
        if value is None:
            return None
    return str(value)


def _to_int(value: Any) -> int:
    """Whole number from a numeric field; 0 when missing, garbage, infinite or NaN."""
    try:
        return int(float(value or 0))
    except (TypeError, ValueError, OverflowError):
        return 0


def _first(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


def session_from_dict(data: dict) -> SessionRecord:
    """Create SessionRecord from a backend payload (camelCase or snake_case)."""
    session_id = _ref_id(data.get('id'))
    if not session_id:
        raise ValueError(f"Session payload has no id: {data.get('title', 'Unknown')}")

    additional = _first(data, 'additionalInstructors', 'additional_instructors', default=[]) or []
    secondary = _ref_id(_first(data, 'secondaryInstructor', 'secondary_instructor',
                               'secondary_instructor_id'))
    if secondary is None and additional:
        secondary = _ref_id(additional[0])

    students = _first(data, 'students', 'student_ids', default=[]) or []

    duration = _to_int(data.get('duration', 0))  # Handles "60.0" strings

    return SessionRecord(
        id=session_id,
        title=str(data.get('title', 'Untitled Class')),
        start_date=str(_first(data, 'startDate', 'start_date', default='')),
        start_time=str(_first(data, 'startTime', 'start_time', default='')),
        duration=duration,
        category=str(data.get('category') or ''),
        primary_instructor_id=_ref_id(_first(data, 'primaryInstructor', 'primary_instructor',
                                             'primary_instructor_id', 'instructor')) or '',
        secondary_instructor_id=secondary,
        student_ids=[s for s in (_ref_id(s) for s in students) if s],
        group_id=_ref_id(_first(data, 'group', 'groupId', 'group_id')),
        status=_normalize_status(data.get('status')),
        location=_first(data, 'location', 'meetingLink', 'meeting_link'),
        timezone=data.get('timezone'),
        session_type=_normalize_type(_first(data, 'type', 'session_type')),
        class_code=_first(data, 'classCode', 'class_code'),
        course=_ref_id(data.get('course')),
        max_students=_to_int(_first(data, 'maxStudents', 'max_students')),
        enrolled_students=_to_int(_first(data, 'enrolledStudents', 'enrolled_students')),
        notes=data.get('notes'),
        cancel_reason=_first(data, 'cancelReason', 'cancel_reason'),
        vacation_impacted=bool(_first(data, 'vacationImpacted', 'vacation_impacted', default=False)),
    )
