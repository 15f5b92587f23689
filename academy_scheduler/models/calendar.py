# File: academy_scheduler/models/calendar.py

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from .session import SessionRecord

@dataclass
class CalendarEvent:
    """Time-boxed display object derived from one SessionRecord. Never stored."""
    event_id: str
    title: str
    start: datetime.datetime
    end: datetime.datetime
    session: SessionRecord
    color: str
    border_color: Optional[str] = None
    text_color: str = "#ffffff"

    def __post_init__(self):
        """Validate event data."""
        if self.end <= self.start:
            raise ValueError(f"Event end time must be after start time: {self.title}")
        if self.border_color is None:
            self.border_color = self.color

    def duration_minutes(self) -> int:
        """Calculate event duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps_with(self, other: 'CalendarEvent') -> bool:
        """Check if this event overlaps with another."""
        return self.start < other.end and self.end > other.start

    @property
    def metadata(self) -> Dict[str, Any]:
        """All originating session fields, for tooltips and detail panels."""
        return self.session.to_dict()

    def tooltip(self) -> str:
        return (
            f"{self.title}\n"
            f"Instructor: {self.session.primary_instructor_id}\n"
            f"Students: {self.session.enrolled_students}/{self.session.max_students}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Calendar widget shape."""
        return {
            'id': self.event_id,
            'title': self.title,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'backgroundColor': self.color,
            'borderColor': self.border_color,
            'textColor': self.text_color,
            'extendedProps': self.metadata,
        }


@dataclass
class SkippedRecord:
    """Diagnostic for a session the projector could not place."""
    session_id: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"Session {self.session_id} - {self.field}: {self.message}"


@dataclass
class ProjectionResult:
    """Output of one projection pass."""
    events: List[CalendarEvent] = field(default_factory=list)
    skipped: List[SkippedRecord] = field(default_factory=list)

    def has_diagnostics(self) -> bool:
        return bool(self.skipped)


@dataclass(frozen=True)
class TimeWindow:
    """Visible calendar range: whole days, end exclusive."""
    start: datetime.date
    end: datetime.date

    def __post_init__(self):
        if self.end <= self.start:
            raise ValueError(f"Window end must be after start: {self.start} - {self.end}")

    def days(self) -> int:
        return (self.end - self.start).days

    def contains(self, day: datetime.date) -> bool:
        return self.start <= day < self.end
