# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable sessions, vacations and stores for all tests.
"""

import pytest
from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock
import sys

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from academy_scheduler.models import (
    SessionRecord, SessionStatus, VacationPeriod, MutationResult
)
from academy_scheduler.services.memory_store import InMemorySessionStore


# ==================== Session Fixtures ====================

@pytest.fixture
def make_session():
    """Factory fixture for creating session records."""
    def _create(
        session_id: str = "S1",
        title: str = "Kathak Foundations",
        start_date: str = "2024-06-11",
        start_time: str = "09:00",
        duration: int = 60,
        category: str = "Dance",
        instructor: str = "I1",
        secondary: str = None,
        status: SessionStatus = SessionStatus.SCHEDULED,
        timezone: str = "UTC"
    ) -> SessionRecord:
        """Create a session with given parameters."""
        return SessionRecord(
            id=session_id,
            title=title,
            start_date=start_date,
            start_time=start_time,
            duration=duration,
            category=category,
            primary_instructor_id=instructor,
            secondary_instructor_id=secondary,
            status=status,
            timezone=timezone,
        )

    return _create


@pytest.fixture
def morning_rehearsal(make_session):
    """One-hour rehearsal on Tuesday 2024-06-11 at 09:00."""
    return make_session(
        session_id="R1",
        title="Morning Rehearsal",
        start_date="2024-06-11",
        start_time="09:00",
        duration=60,
        category="Workshop",
    )


@pytest.fixture
def scenario_sessions(make_session):
    """S1 impacted, S2 other instructor, S3 already cancelled."""
    return [
        make_session("S1", "Kathak Foundations", "2024-06-11", instructor="I1"),
        make_session("S2", "Hindustani Vocal", "2024-06-12", category="Vocal", instructor="I2"),
        make_session("S3", "Tabla Practice", "2024-06-13", category="Instrument",
                     instructor="I1", status=SessionStatus.CANCELLED),
    ]


# ==================== Vacation Fixtures ====================

@pytest.fixture
def vacation_i1():
    """Instructor I1 away 2024-06-10 .. 2024-06-14."""
    return VacationPeriod(
        instructor_id="I1",
        start_date=date(2024, 6, 10),
        end_date=date(2024, 6, 14),
        reason="Family function",
        id="V1",
    )


# ==================== Store Fixtures ====================

@pytest.fixture
def memory_store(scenario_sessions, vacation_i1):
    """In-memory store seeded with the scenario sessions."""
    return InMemorySessionStore(scenario_sessions, [vacation_i1])


@pytest.fixture
def mock_store():
    """Store whose mutations all succeed."""
    store = AsyncMock()
    store.list_sessions.return_value = []
    store.list_vacation_periods.return_value = []
    store.reschedule_session.return_value = MutationResult.ok()
    store.cancel_session.return_value = MutationResult.ok()
    return store


# ==================== Date Fixtures ====================

@pytest.fixture
def fixed_today():
    """Pinned 'today' for calendar tests (a Tuesday)."""
    return date(2024, 6, 11)


@pytest.fixture
def fixture_file():
    """Path to the bundled sample fixture."""
    return PROJECT_ROOT / "fixtures" / "sample_week.json"


# ==================== Pytest Markers ====================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
    config.addinivalue_line(
        "markers", "external: mark test as requiring external services"
    )
