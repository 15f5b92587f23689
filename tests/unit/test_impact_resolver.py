# File: tests/unit/test_impact_resolver.py
"""
Unit tests for vacation impact resolution.
"""

from datetime import date

from academy_scheduler.models import (
    SessionStatus, VacationPeriod, VacationStatus, ResolutionState
)
from academy_scheduler.processors.impact_resolver import resolve, is_impacted, session_date_span


class TestSessionDateSpan:
    """Tests for the dates a session touches."""

    def test_same_day_session(self, make_session):
        """Test a normal class stays on its date."""
        assert session_date_span(make_session()) == (date(2024, 6, 11), date(2024, 6, 11))

    def test_class_crossing_midnight(self, make_session):
        """Test a late class spills into the next date."""
        session = make_session(start_date="2024-06-09", start_time="23:00", duration=120)
        assert session_date_span(session) == (date(2024, 6, 9), date(2024, 6, 10))

    def test_class_ending_at_midnight(self, make_session):
        """Test an end exactly at midnight does not touch the next date."""
        session = make_session(start_date="2024-06-09", start_time="23:00", duration=60)
        assert session_date_span(session) == (date(2024, 6, 9), date(2024, 6, 9))

    def test_end_past_last_date_returns_none(self, make_session):
        """Test spans that cannot be represented."""
        session = make_session(start_date="9999-12-31", start_time="23:30", duration=60)
        assert session_date_span(session) is None

    def test_unparseable_returns_none(self, make_session):
        """Test garbage start fields."""
        assert session_date_span(make_session(start_time="soon")) is None


class TestResolve:
    """Tests for the impacted set."""

    def test_scenario_only_live_session_of_instructor(self, scenario_sessions, vacation_i1):
        """Test S2 (other instructor) and S3 (cancelled) are excluded."""
        items = resolve(scenario_sessions, vacation_i1)

        assert [item.session_id for item in items] == ["S1"]
        assert items[0].state == ResolutionState.PENDING
        assert items[0].vacation is vacation_i1

    def test_secondary_instructor_is_impacted(self, make_session, vacation_i1):
        """Test additional instructor assignments count."""
        session = make_session("S4", instructor="I3", secondary="I1")
        assert [i.session_id for i in resolve([session], vacation_i1)] == ["S4"]

    def test_vacation_bounds_are_inclusive(self, make_session, vacation_i1):
        """Test first and last vacation days, and the days just outside."""
        sessions = [
            make_session("before", start_date="2024-06-09"),
            make_session("first", start_date="2024-06-10"),
            make_session("last", start_date="2024-06-14", start_time="23:30", duration=30),
            make_session("after", start_date="2024-06-15"),
        ]
        items = resolve(sessions, vacation_i1)

        assert [i.session_id for i in items] == ["first", "last"]

    def test_overnight_class_into_vacation(self, make_session, vacation_i1):
        """Test a class starting the evening before the vacation is impacted."""
        session = make_session("late", start_date="2024-06-09", start_time="23:00", duration=120)
        assert is_impacted(session, vacation_i1) is True

    def test_completed_sessions_are_included(self, make_session, vacation_i1):
        """Test only cancelled sessions are excluded by status."""
        session = make_session(status=SessionStatus.COMPLETED)
        assert len(resolve([session], vacation_i1)) == 1

    def test_ordered_by_start_then_id(self, make_session, vacation_i1):
        """Test output order is deterministic."""
        sessions = [
            make_session("B", start_date="2024-06-12", start_time="10:00"),
            make_session("C", start_date="2024-06-11", start_time="18:00"),
            make_session("A", start_date="2024-06-12", start_time="10:00"),
            make_session("D", start_date="2024-06-11", start_time="08:00"),
        ]
        items = resolve(sessions, vacation_i1)

        assert [i.session_id for i in items] == ["D", "C", "A", "B"]

    def test_unparseable_sessions_are_skipped(self, make_session, vacation_i1):
        """Test bad records never make it into the impacted set."""
        sessions = [make_session("bad", start_date="someday"), make_session("ok")]
        assert [i.session_id for i in resolve(sessions, vacation_i1)] == ["ok"]

    def test_out_of_range_session_is_skipped(self, make_session):
        """Test one unrepresentable row does not fail the whole vacation."""
        vacation = VacationPeriod("I1", date(9999, 12, 30), date(9999, 12, 31))
        sessions = [
            make_session("edge", start_date="9999-12-31", start_time="23:30", duration=60),
            make_session("ok", start_date="9999-12-30"),
            make_session("huge", start_date="9999-12-30", duration=10 ** 12),
        ]

        assert [i.session_id for i in resolve(sessions, vacation)] == ["ok"]

    def test_single_day_vacation(self, make_session):
        """Test start == end vacations."""
        vacation = VacationPeriod("I1", date(2024, 6, 11), date(2024, 6, 11))
        sessions = [make_session("A", start_date="2024-06-11"), make_session("B", start_date="2024-06-12")]

        assert [i.session_id for i in resolve(sessions, vacation)] == ["A"]

    def test_cancelled_vacation_impacts_nothing(self, scenario_sessions):
        """Test withdrawn vacation requests."""
        vacation = VacationPeriod("I1", date(2024, 6, 10), date(2024, 6, 14),
                                  status=VacationStatus.CANCELLED)
        assert resolve(scenario_sessions, vacation) == []

    def test_fresh_items_each_call(self, scenario_sessions, vacation_i1):
        """Test items are not shared between calls."""
        first = resolve(scenario_sessions, vacation_i1)
        second = resolve(scenario_sessions, vacation_i1)

        first[0].state = ResolutionState.CANCELLED
        assert second[0].state == ResolutionState.PENDING

    def test_empty_input(self, vacation_i1):
        """Test no sessions gives no items."""
        assert resolve([], vacation_i1) == []
