"""
Unit Tests for the Copy-Week Planner
"""

from datetime import date, timedelta

import pytest

from visit_scheduler.errors import InvalidWeekError
from visit_scheduler.extensions import db
from visit_scheduler.models import CopyWeekBatch, DraftAppointment
from visit_scheduler.services.copy_week_planner import CopyWeekPlanner

from conftest import SOURCE_MONDAY, SOURCE_WEEK, TARGET_MONDAY, TARGET_WEEK, at


@pytest.fixture
def planner(app):
    return CopyWeekPlanner()


class TestCopyWeek:
    """Tests for cloning a week into drafts."""

    def test_single_appointment_becomes_pending_draft(self, planner, factory, team, visit_client):
        source = factory.appointment(
            visit_client, at(SOURCE_MONDAY, 9), team=team, title="Morning visit"
        )

        result = planner.copy_week(SOURCE_WEEK, TARGET_WEEK, "admin")

        assert len(result.draft_ids) == 1
        assert result.skipped == []
        draft = db.session.get(DraftAppointment, result.draft_ids[0])
        assert draft.validation_status == "pending"
        assert draft.batch_id == result.batch_id
        assert draft.source_appointment_id == source.appointment_id
        assert draft.start_time == at(TARGET_MONDAY, 9)
        assert draft.end_time == at(TARGET_MONDAY, 10)
        assert draft.team_id == team.team_id
        assert draft.title == "Morning visit"
        assert draft.published_at is None

    def test_all_drafts_share_one_batch(self, planner, factory, team, visit_client):
        factory.appointment(visit_client, at(SOURCE_MONDAY, 9), team=team)
        factory.appointment(visit_client, at(SOURCE_MONDAY + timedelta(days=2), 14), team=team)

        result = planner.copy_week(SOURCE_WEEK, TARGET_WEEK, "admin")

        batch_ids = {d.batch_id for d in DraftAppointment.query.all()}
        assert batch_ids == {result.batch_id}
        batch = db.session.get(CopyWeekBatch, result.batch_id)
        assert batch.source_week_start == SOURCE_WEEK
        assert batch.target_week_start == TARGET_WEEK
        assert batch.created_by == "admin"

    def test_target_team_booking_skips_occurrence(self, planner, factory, team, visit_client):
        factory.appointment(visit_client, at(SOURCE_MONDAY, 9), team=team)
        factory.appointment(factory.client("Client D"), at(TARGET_MONDAY, 9), minutes=30, team=team)

        result = planner.copy_week(SOURCE_WEEK, TARGET_WEEK, "admin")

        assert result.draft_ids == []
        assert len(result.skipped) == 1
        skip = result.skipped[0]
        assert skip.conflict_type == "team_overlap"
        assert skip.client_name == "Client C"
        assert skip.team_name == "Team T"
        assert skip.start_time == at(TARGET_MONDAY, 9)

    def test_occurrences_in_same_run_do_not_collide(self, planner, factory, team):
        # source data that already double-books the team
        factory.appointment(factory.client("Client A"), at(SOURCE_MONDAY, 9), team=team)
        factory.appointment(factory.client("Client B"), at(SOURCE_MONDAY, 9, 30), team=team)

        result = planner.copy_week(SOURCE_WEEK, TARGET_WEEK, "admin")

        assert len(result.draft_ids) == 1
        assert [s.conflict_type for s in result.skipped] == ["team_overlap"]
        assert result.skipped[0].client_name == "Client B"

    def test_empty_source_week(self, planner):
        result = planner.copy_week(SOURCE_WEEK, TARGET_WEEK, "admin")

        assert result.batch_id
        assert result.draft_ids == []
        assert result.skipped == []

    def test_cancelled_and_out_of_week_appointments_are_not_copied(self, planner, factory, team, visit_client):
        factory.appointment(visit_client, at(SOURCE_MONDAY, 9), team=team, status="cancelled")
        factory.appointment(visit_client, at(SOURCE_WEEK + timedelta(days=7), 9), team=team)

        result = planner.copy_week(SOURCE_WEEK, TARGET_WEEK, "admin")

        assert result.draft_ids == []

    def test_multi_week_offset_preserves_weekday(self, planner, factory, team, visit_client):
        factory.appointment(visit_client, at(SOURCE_MONDAY, 9), team=team)

        result = planner.copy_week(SOURCE_WEEK, SOURCE_WEEK + timedelta(weeks=3), "admin")

        draft = db.session.get(DraftAppointment, result.draft_ids[0])
        assert draft.start_time == at(SOURCE_MONDAY + timedelta(weeks=3), 9)
        assert draft.start_time.weekday() == SOURCE_MONDAY.weekday()

    @pytest.mark.parametrize("target", [SOURCE_WEEK, SOURCE_WEEK - timedelta(weeks=1), date(2025, 1, 15)])
    def test_target_must_be_whole_weeks_later(self, planner, target):
        with pytest.raises(InvalidWeekError):
            planner.copy_week(SOURCE_WEEK, target, "admin")
        assert CopyWeekBatch.query.count() == 0

    def test_skip_reasons_are_deterministic(self, planner, factory, team, visit_client):
        facility = factory.facility("Oak Lodge", is_paused=True)
        resident = factory.client("Resident R", facility=facility)
        factory.appointment(resident, at(SOURCE_MONDAY, 11))
        factory.appointment(visit_client, at(SOURCE_MONDAY, 9), team=team)
        factory.appointment(factory.client("Client D"), at(TARGET_MONDAY, 9), team=team)

        first = planner.copy_week(SOURCE_WEEK, TARGET_WEEK, "admin")
        second = planner.copy_week(SOURCE_WEEK, TARGET_WEEK, "admin")

        assert [s.to_dict() for s in first.skipped] == [s.to_dict() for s in second.skipped]
        assert {s.conflict_type for s in first.skipped} == {"team_overlap", "facility_paused"}
