from .enums import (
    SessionStatus, SessionCategory, SessionType, VacationStatus,
    Granularity, ResolutionState, SubmissionPhase, WorkflowState
)
from .common import parse_date, parse_time, format_date, format_time
from .session import SessionRecord, SessionFilter, session_from_dict
from .vacation import VacationPeriod, vacation_from_dict
from .calendar import CalendarEvent, SkippedRecord, ProjectionResult, TimeWindow
from .impact import ImpactedSession, CancelAction, RescheduleAction, ImpactAction
from .api import MutationResult, ViewSessionIntent, RescheduleProposal

__all__ = [
    "SessionStatus",
    "SessionCategory",
    "SessionType",
    "VacationStatus",
    "Granularity",
    "ResolutionState",
    "SubmissionPhase",
    "WorkflowState",
    "parse_date",
    "parse_time",
    "format_date",
    "format_time",
    "SessionRecord",
    "SessionFilter",
    "session_from_dict",
    "VacationPeriod",
    "vacation_from_dict",
    "CalendarEvent",
    "SkippedRecord",
    "ProjectionResult",
    "TimeWindow",
    "ImpactedSession",
    "CancelAction",
    "RescheduleAction",
    "ImpactAction",
    "MutationResult",
    "ViewSessionIntent",
    "RescheduleProposal"
]
