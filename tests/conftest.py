"""Shared pytest fixtures for testing."""

from datetime import date, datetime, time, timedelta

import pytest

from config import TestConfig
from visit_scheduler import create_app
from visit_scheduler.extensions import db
from visit_scheduler.models import (
    Appointment,
    Client,
    DraftAppointment,
    Facility,
    Speciality,
    Team,
    TeamSpeciality,
    TeamTimeOff,
    TeamWorkingHours,
)


# Sunday-started weeks, matching the default WEEK_STARTS_ON
SOURCE_WEEK = date(2025, 1, 5)
TARGET_WEEK = date(2025, 1, 12)
SOURCE_MONDAY = date(2025, 1, 6)
TARGET_MONDAY = date(2025, 1, 13)


def at(day, hour, minute=0):
    return datetime.combine(day, time(hour, minute))


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app():
    """Create the app on an in-memory database, inside an app context."""
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


# =============================================================================
# Data Fixtures
# =============================================================================


class Factory:
    """Small helpers that insert and commit one row each."""

    def facility(self, name="Maple House", is_paused=False):
        facility = Facility(facility_name=name, is_paused=is_paused)
        return self._save(facility)

    def speciality(self, name="Nursing"):
        return self._save(Speciality(speciality_name=name))

    def team(self, name="Alice Morgan", speciality_ids=None, working_hours=None):
        """``working_hours`` maps weekday number to (start hour, end hour)."""
        team = self._save(Team(team_name=name, status="active"))
        for speciality_id in speciality_ids or []:
            db.session.add(TeamSpeciality(team_id=team.team_id, speciality_id=speciality_id))
        for day, (start_hour, end_hour) in (working_hours or {}).items():
            db.session.add(TeamWorkingHours(
                team_id=team.team_id,
                day_of_week=day,
                start_time=time(start_hour, 0),
                end_time=time(end_hour, 0),
                is_active=True,
            ))
        db.session.commit()
        return team

    def client(self, name="Client C", facility=None):
        client = Client(client_name=name, facility_id=facility.facility_id if facility else None)
        return self._save(client)

    def time_off(self, team, start_date, end_date, status="approved"):
        return self._save(TeamTimeOff(
            team_id=team.team_id,
            start_date=start_date,
            end_date=end_date,
            status=status,
        ))

    def appointment(self, client, start, minutes=60, team=None, speciality=None,
                    status="scheduled", title=None):
        return self._save(Appointment(
            client_id=client.client_id,
            team_id=team.team_id if team else None,
            speciality_id=speciality.speciality_id if speciality else None,
            start_time=start,
            end_time=start + timedelta(minutes=minutes),
            title=title,
            status=status,
        ))

    def draft(self, client, start, minutes=60, team=None, speciality=None, batch_id=None,
              validation_status="pending"):
        return self._save(DraftAppointment(
            client_id=client.client_id,
            team_id=team.team_id if team else None,
            speciality_id=speciality.speciality_id if speciality else None,
            start_time=start,
            end_time=start + timedelta(minutes=minutes),
            batch_id=batch_id,
            validation_status=validation_status,
        ))

    def _save(self, obj):
        db.session.add(obj)
        db.session.commit()
        return obj


@pytest.fixture
def factory(app):
    return Factory()


@pytest.fixture
def team(factory):
    return factory.team("Team T")


@pytest.fixture
def visit_client(factory):
    return factory.client("Client C")
