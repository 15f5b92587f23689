# File: academy_scheduler/models/enums.py

from enum import Enum

class SessionStatus(Enum):
    """Lifecycle status of a class session."""
    SCHEDULED = "Scheduled"
    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class SessionCategory(Enum):
    """Known art-form categories. Upstream may send others."""
    DANCE = "Dance"
    VOCAL = "Vocal"
    INSTRUMENT = "Instrument"
    WORKSHOP = "Workshop"


class SessionType(Enum):
    """Class format."""
    PRIVATE = "Private"
    GROUP = "Group"
    TRIAL = "Trial"


class VacationStatus(Enum):
    """Approval status of an instructor vacation request."""
    PENDING = "Pending"
    APPROVED = "Approved"
    CANCELLED = "Cancelled"


class Granularity(Enum):
    """Calendar display resolution."""
    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"


class ResolutionState(Enum):
    """Remediation outcome of an impacted session."""
    PENDING = "Pending"
    CANCELLED = "Cancelled"
    RESCHEDULED = "Rescheduled"


class SubmissionPhase(Enum):
    """Per-item guard against double submission."""
    IDLE = "Idle"
    IN_FLIGHT = "InFlight"
    DONE = "Done"


class WorkflowState(Enum):
    """State of one vacation resolution batch."""
    OPEN = "Open"
    CLOSED = "Closed"
