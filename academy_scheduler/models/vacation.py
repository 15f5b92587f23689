# File: academy_scheduler/models/vacation.py

import datetime
from dataclasses import dataclass
from typing import Optional
from .enums import VacationStatus
from .common import parse_date, format_display_date

@dataclass
class VacationPeriod:
    """Instructor unavailability window (whole days, inclusive)."""
    instructor_id: str
    start_date: datetime.date
    end_date: datetime.date
    reason: Optional[str] = None

    # Optional metadata
    id: Optional[str] = None
    instructor_name: Optional[str] = None
    status: VacationStatus = VacationStatus.APPROVED

    def __post_init__(self):
        """Validate the range and convert types."""
        if isinstance(self.status, str):
            self.status = VacationStatus(self.status)
        if isinstance(self.start_date, str):
            self.start_date = parse_date(self.start_date)
        if isinstance(self.end_date, str):
            self.end_date = parse_date(self.end_date)
        if self.start_date is None or self.end_date is None:
            raise ValueError(f"Vacation dates are required: {self.instructor_id}")
        if self.start_date > self.end_date:
            raise ValueError(
                f"Vacation start must not be after end: {self.start_date} > {self.end_date}"
            )

    def covers(self, day: datetime.date) -> bool:
        """Check whether a calendar date falls inside the vacation."""
        return self.start_date <= day <= self.end_date

    def is_active(self) -> bool:
        """Cancelled vacation requests no longer block anything."""
        return self.status != VacationStatus.CANCELLED

    def label(self) -> str:
        """Display range, e.g. 'Jun 10, 2024 - Jun 14, 2024'."""
        return f"{format_display_date(self.start_date)} - {format_display_date(self.end_date)}"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'instructor_id': self.instructor_id,
            'instructor_name': self.instructor_name,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'reason': self.reason,
            'status': self.status.value,
        }


def vacation_from_dict(data: dict) -> VacationPeriod:
    """Create VacationPeriod from a backend payload (camelCase or snake_case)."""
    instructor = data.get('instructorId', data.get('instructor_id', data.get('instructor')))
    if isinstance(instructor, dict):
        instructor = instructor.get('id')
    if not instructor:
        raise ValueError("Vacation payload has no instructor")

    raw_status = str(data.get('status', 'Approved')).strip().capitalize()
    try:
        status = VacationStatus(raw_status)
    except ValueError:
        status = VacationStatus.APPROVED

    return VacationPeriod(
        instructor_id=str(instructor),
        start_date=parse_date(data.get('startDate', data.get('start_date'))),
        end_date=parse_date(data.get('endDate', data.get('end_date'))),
        reason=data.get('reason'),
        id=str(data['id']) if data.get('id') is not None else None,
        instructor_name=data.get('instructorName', data.get('instructor_name')),
        status=status,
    )
