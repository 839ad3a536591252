"""
Unit Tests for Draft Maintenance (remove / unassign / reassign / delete)
"""

from datetime import datetime, timedelta

import pytest

from visit_scheduler.errors import DraftNotFoundError, DraftPublishedError
from visit_scheduler.extensions import db
from visit_scheduler.models import DraftAppointment
from visit_scheduler.services import draft_store

from conftest import SOURCE_MONDAY, SOURCE_WEEK, TARGET_MONDAY, at


def reload(draft_id):
    db.session.expire_all()
    return db.session.get(DraftAppointment, draft_id)


def mark_published(draft):
    draft.validation_status = "valid"
    draft.published_at = datetime(2025, 1, 1, 12, 0)
    db.session.commit()
    return draft


class TestRemove:

    def test_remove_draft(self, factory, team, visit_client):
        draft = factory.draft(visit_client, at(SOURCE_MONDAY, 9), team=team)

        draft_id = draft.draft_id

        assert draft_store.remove_draft(draft_id) == 1
        assert DraftAppointment.query.filter_by(draft_id=draft_id).count() == 0

    def test_published_draft_cannot_be_removed(self, factory, team, visit_client):
        draft = mark_published(factory.draft(visit_client, at(SOURCE_MONDAY, 9), team=team))

        with pytest.raises(DraftPublishedError):
            draft_store.remove_draft(draft.draft_id)
        assert reload(draft.draft_id) is not None

    def test_unknown_draft(self, app):
        with pytest.raises(DraftNotFoundError):
            draft_store.remove_draft(404)

    def test_bulk_remove_reports_per_item_errors(self, factory, team, visit_client):
        keep = mark_published(factory.draft(visit_client, at(SOURCE_MONDAY, 9), team=team))
        gone = factory.draft(visit_client, at(SOURCE_MONDAY, 11), team=team)

        removed, errors = draft_store.remove_drafts([keep.draft_id, gone.draft_id, 404])

        assert removed == 1
        assert [e["draft_id"] for e in errors] == [keep.draft_id, 404]


class TestAssignment:

    def test_unassign_resets_to_pending(self, factory, team, visit_client):
        draft = factory.draft(visit_client, at(SOURCE_MONDAY, 9), team=team, validation_status="invalid")
        draft.validation_errors = [{"kind": "time_off", "message": "Team T is on leave"}]
        db.session.commit()

        draft = draft_store.unassign_draft(draft.draft_id)

        assert draft.team_id is None
        assert draft.validation_status == "pending"
        assert draft.validation_errors is None

    def test_bulk_unassign_skips_published(self, factory, team, visit_client):
        published = mark_published(factory.draft(visit_client, at(SOURCE_MONDAY, 9), team=team))
        open_draft = factory.draft(visit_client, at(SOURCE_MONDAY, 11), team=team)

        count, errors = draft_store.unassign_drafts([published.draft_id, open_draft.draft_id])

        assert count == 1
        assert [e["draft_id"] for e in errors] == [published.draft_id]
        assert reload(published.draft_id).team_id == team.team_id
        assert reload(open_draft.draft_id).team_id is None

    def test_reassign_revalidates(self, factory, team, visit_client):
        factory.appointment(factory.client("Client D"), at(SOURCE_MONDAY, 9), team=team)
        draft = factory.draft(visit_client, at(SOURCE_MONDAY, 9))

        draft = draft_store.reassign_draft(draft.draft_id, team.team_id)
        assert draft.validation_status == "invalid"
        assert draft.validation_errors[0]["kind"] == "team_overlap"

        free_team = factory.team("Team U")
        draft = draft_store.reassign_draft(draft.draft_id, free_team.team_id)
        assert draft.team_id == free_team.team_id
        assert draft.validation_status == "valid"


class TestListAndDelete:

    def test_list_hides_published_by_default(self, factory, team, visit_client):
        published = mark_published(factory.draft(visit_client, at(SOURCE_MONDAY, 9), team=team))
        open_draft = factory.draft(visit_client, at(SOURCE_MONDAY, 11), team=team)
        factory.draft(visit_client, at(TARGET_MONDAY, 9), team=team)

        assert [d.draft_id for d in draft_store.list_drafts(SOURCE_WEEK)] == [open_draft.draft_id]
        assert [d.draft_id for d in draft_store.list_drafts(SOURCE_WEEK, include_published=True)] == [
            published.draft_id,
            open_draft.draft_id,
        ]

    def test_create_draft_starts_pending(self, team, visit_client):
        start = at(SOURCE_MONDAY, 9)

        draft = draft_store.create_draft(visit_client.client_id, start, start + timedelta(hours=1),
                                         team_id=team.team_id, title="Check-in")

        assert draft.validation_status == "pending"
        assert draft.batch_id is None
        assert draft.title == "Check-in"

    def test_delete_by_week_crosses_batches_and_keeps_published(self, factory, team, visit_client):
        published = mark_published(factory.draft(visit_client, at(SOURCE_MONDAY, 9), team=team))
        factory.draft(visit_client, at(SOURCE_MONDAY, 11), team=team)
        factory.draft(factory.client("Client D"), at(SOURCE_MONDAY, 13), team=team)
        later = factory.draft(visit_client, at(TARGET_MONDAY, 9), team=team)

        deleted = draft_store.delete_drafts(week_start=SOURCE_WEEK)

        assert deleted == 2
        remaining = {d.draft_id for d in DraftAppointment.query.all()}
        assert remaining == {published.draft_id, later.draft_id}

    def test_delete_without_target_is_a_no_op(self, factory, team, visit_client):
        factory.draft(visit_client, at(SOURCE_MONDAY, 9), team=team)

        assert draft_store.delete_drafts() == 0
        assert draft_store.delete_drafts(draft_ids=[]) == 0
        assert DraftAppointment.query.count() == 1
