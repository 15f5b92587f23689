# File: academy_scheduler/models/api.py
"""
Data models for store responses and controller intents.
"""

import datetime
from dataclasses import dataclass
from typing import Optional
from .session import SessionRecord

@dataclass
class MutationResult:
    """Response from a reschedule or cancel call."""
    status: str  # "success" or "fail"
    message: Optional[str] = None
    retryable: bool = False
    ignored: bool = False  # arrived after the owning view was torn down

    def is_success(self) -> bool:
        """Check if the mutation was applied."""
        return self.status == "success"

    @classmethod
    def ok(cls, message: Optional[str] = None) -> 'MutationResult':
        return cls(status="success", message=message)

    @classmethod
    def fail(cls, message: str, retryable: bool = False) -> 'MutationResult':
        return cls(status="fail", message=message, retryable=retryable)


@dataclass(frozen=True)
class ViewSessionIntent:
    """User clicked an event: open the session detail."""
    session: SessionRecord


@dataclass(frozen=True)
class RescheduleProposal:
    """User dropped an event on a new slot."""
    session_id: str
    new_start_date: datetime.date
    new_start_time: datetime.time
