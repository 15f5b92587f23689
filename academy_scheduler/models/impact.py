# File: academy_scheduler/models/impact.py

import datetime
from dataclasses import dataclass
from typing import Optional, Union
from .enums import ResolutionState, SubmissionPhase
from .session import SessionRecord
from .vacation import VacationPeriod

@dataclass
class ImpactedSession:
    """A session that conflicts with a vacation, tracked until remediated."""
    session: SessionRecord
    vacation: VacationPeriod
    state: ResolutionState = ResolutionState.PENDING
    phase: SubmissionPhase = SubmissionPhase.IDLE
    last_error: Optional[str] = None

    @property
    def session_id(self) -> str:
        return self.session.id

    def is_pending(self) -> bool:
        return self.state == ResolutionState.PENDING

    def is_in_flight(self) -> bool:
        return self.phase == SubmissionPhase.IN_FLIGHT

    def to_dict(self) -> dict:
        return {
            'session_id': self.session.id,
            'title': self.session.title,
            'date': self.session.start_date,
            'time': self.session.start_time,
            'duration': self.session.duration,
            'state': self.state.value,
            'phase': self.phase.value,
            'last_error': self.last_error,
        }


@dataclass(frozen=True)
class CancelAction:
    """Remediate by cancelling the session."""
    reason: Optional[str] = None


@dataclass(frozen=True)
class RescheduleAction:
    """Remediate by moving the session to a new slot."""
    new_date: datetime.date
    new_time: datetime.time
    reason: Optional[str] = None


ImpactAction = Union[CancelAction, RescheduleAction]
