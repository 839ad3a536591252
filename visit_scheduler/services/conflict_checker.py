"""
Conflict checker for candidate visits.

A candidate is checked against the live schedule in a fixed order:
team double-booking, client double-booking, qualification, facility
pause state, then team availability (working hours and time off).
Every applicable conflict is collected; the first one is the verdict's
headline. Nothing here writes to the database.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional

from visit_scheduler.extensions import db
from visit_scheduler.models import (
    Appointment,
    Client,
    DraftAppointment,
    Facility,
    Speciality,
    Team,
    TeamTimeOff,
    TeamWorkingHours,
)
from visit_scheduler.utils.qualification import check_qualification
from visit_scheduler.utils.weeks import overlaps


logger = logging.getLogger(__name__)

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class ConflictKind(str, Enum):
    """Typed reasons a visit cannot be scheduled."""

    TEAM_OVERLAP = "team_overlap"
    CLIENT_OVERLAP = "client_overlap"
    UNQUALIFIED = "unqualified"
    FACILITY_PAUSED = "facility_paused"
    OUTSIDE_WORKING_HOURS = "outside_working_hours"
    TIME_OFF = "time_off"


class CheckScope(str, Enum):
    """Which bookings a candidate is compared against."""

    COMMITTED = "committed"
    DRAFTS = "drafts"
    ALL = "all"


@dataclass
class Candidate:
    """A visit that is about to be staged, validated or published."""

    client_id: int
    start_time: datetime
    end_time: datetime
    team_id: Optional[int] = None
    speciality_id: Optional[int] = None
    draft_id: Optional[int] = None

    @property
    def target_date(self):
        return self.start_time.date()

    @classmethod
    def from_draft(cls, draft) -> "Candidate":
        return cls(
            client_id=draft.client_id,
            start_time=draft.start_time,
            end_time=draft.end_time,
            team_id=draft.team_id,
            speciality_id=draft.speciality_id,
            draft_id=draft.draft_id,
        )

    @classmethod
    def from_appointment(cls, appointment, offset=timedelta(0)) -> "Candidate":
        return cls(
            client_id=appointment.client_id,
            start_time=appointment.start_time + offset,
            end_time=appointment.end_time + offset,
            team_id=appointment.team_id,
            speciality_id=appointment.speciality_id,
        )


@dataclass
class Conflict:
    """A single typed conflict record."""

    kind: ConflictKind
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass
class ConflictVerdict:
    """Outcome of a check: ok, or an ordered list of conflicts."""

    conflicts: List[Conflict] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.conflicts

    @property
    def first(self) -> Optional[Conflict]:
        return self.conflicts[0] if self.conflicts else None

    @property
    def kinds(self) -> List[str]:
        return [c.kind.value for c in self.conflicts]

    def add(self, kind: ConflictKind, message: str) -> None:
        self.conflicts.append(Conflict(kind=kind, message=message))

    def to_list(self) -> List[Dict[str, str]]:
        return [c.to_dict() for c in self.conflicts]

    def grouped(self) -> Dict[str, List[str]]:
        return group_errors(self.to_list())


def group_errors(errors: Optional[Iterable[Dict[str, str]]]) -> Dict[str, List[str]]:
    """Project a list of ``{kind, message}`` records onto kind -> messages."""
    grouped = OrderedDict()
    for error in errors or []:
        grouped.setdefault(error["kind"], []).append(error["message"])
    return dict(grouped)


def _describe_range(start, end):
    return f"{start:%H:%M}-{end:%H:%M} on {start:%a %b %d}"


class ConflictChecker:
    """Checks candidates against committed appointments, drafts and team data."""

    def check(
        self,
        candidate: Candidate,
        scope: CheckScope = CheckScope.ALL,
        in_flight: Iterable[Candidate] = (),
    ) -> ConflictVerdict:
        in_flight = list(in_flight)
        verdict = ConflictVerdict()

        if candidate.team_id is not None:
            booking = self._find_overlap("team_id", candidate.team_id, candidate, scope, in_flight)
            if booking:
                verdict.add(
                    ConflictKind.TEAM_OVERLAP,
                    f"{self._team_name(candidate.team_id)} already has {booking[2]} "
                    f"at {_describe_range(booking[0], booking[1])}",
                )

        booking = self._find_overlap("client_id", candidate.client_id, candidate, scope, in_flight)
        if booking:
            verdict.add(
                ConflictKind.CLIENT_OVERLAP,
                f"{self._client_name(candidate.client_id)} already has {booking[2]} "
                f"at {_describe_range(booking[0], booking[1])}",
            )

        if candidate.team_id is not None and not check_qualification(
            candidate.team_id, candidate.speciality_id
        ):
            verdict.add(
                ConflictKind.UNQUALIFIED,
                f"{self._team_name(candidate.team_id)} is not qualified for "
                f"{self._speciality_name(candidate.speciality_id)}",
            )

        facility = self._paused_facility(candidate.client_id)
        if facility:
            verdict.add(
                ConflictKind.FACILITY_PAUSED,
                f"{facility.facility_name} is paused; visits for "
                f"{self._client_name(candidate.client_id)} cannot be scheduled",
            )

        if candidate.team_id is not None:
            message = self._working_hours_violation(candidate)
            if message:
                verdict.add(ConflictKind.OUTSIDE_WORKING_HOURS, message)

            time_off = self._approved_time_off(candidate)
            if time_off:
                verdict.add(
                    ConflictKind.TIME_OFF,
                    f"{self._team_name(candidate.team_id)} has approved time off "
                    f"from {time_off.start_date:%b %d} to {time_off.end_date:%b %d}",
                )

        if not verdict.ok:
            logger.debug(
                f"Conflicts for client {candidate.client_id} at {candidate.start_time}: {verdict.kinds}"
            )
        return verdict

    # ------------------------------------------------------------------
    # Overlaps
    # ------------------------------------------------------------------

    def _find_overlap(self, column, value, candidate, scope, in_flight):
        """Return (start, end, label) of the first booking overlapping the candidate."""
        for other in in_flight:
            if other is candidate:
                continue
            if candidate.draft_id is not None and other.draft_id == candidate.draft_id:
                continue
            if getattr(other, column) != value:
                continue
            if overlaps(candidate.start_time, candidate.end_time, other.start_time, other.end_time):
                return other.start_time, other.end_time, "a visit staged in this run"

        if scope in (CheckScope.COMMITTED, CheckScope.ALL):
            appointment = Appointment.query.filter(
                getattr(Appointment, column) == value,
                Appointment.status != "cancelled",
                Appointment.start_time < candidate.end_time,
                Appointment.end_time > candidate.start_time
            ).order_by(Appointment.start_time).first()
            if appointment:
                return appointment.start_time, appointment.end_time, "an appointment"

        if scope in (CheckScope.DRAFTS, CheckScope.ALL):
            query = DraftAppointment.query.filter(
                getattr(DraftAppointment, column) == value,
                DraftAppointment.published_at.is_(None),
                DraftAppointment.validation_status.in_(["valid", "pending"]),
                DraftAppointment.start_time < candidate.end_time,
                DraftAppointment.end_time > candidate.start_time
            )
            if candidate.draft_id is not None:
                query = query.filter(DraftAppointment.draft_id != candidate.draft_id)
            draft = query.order_by(DraftAppointment.start_time).first()
            if draft:
                return draft.start_time, draft.end_time, "a draft appointment"

        return None

    # ------------------------------------------------------------------
    # Facility and availability
    # ------------------------------------------------------------------

    def _paused_facility(self, client_id):
        client = db.session.get(Client, client_id)
        if not client or client.facility_id is None:
            return None
        facility = db.session.get(Facility, client.facility_id)
        if facility and facility.is_paused:
            return facility
        return None

    def _working_hours_violation(self, candidate):
        hours = TeamWorkingHours.query.filter_by(team_id=candidate.team_id).all()
        # no availability data configured
        if not hours:
            return None

        weekday = candidate.start_time.weekday()
        windows = sorted(
            (h for h in hours if h.is_active and h.day_of_week == weekday),
            key=lambda h: h.start_time
        )
        team_name = self._team_name(candidate.team_id)

        if not windows:
            return f"{team_name} does not work on {DAY_NAMES[weekday]}s"

        day = candidate.target_date
        for window in windows:
            window_start = datetime.combine(day, window.start_time)
            window_end = datetime.combine(day, window.end_time)
            if window_start <= candidate.start_time and candidate.end_time <= window_end:
                return None

        ranges = ", ".join(f"{w.start_time:%H:%M}-{w.end_time:%H:%M}" for w in windows)
        return (
            f"{_describe_range(candidate.start_time, candidate.end_time)} is outside "
            f"{team_name}'s working hours ({ranges})"
        )

    def _approved_time_off(self, candidate):
        last_day = candidate.end_time.date()
        if candidate.end_time > candidate.start_time:
            last_day = (candidate.end_time - timedelta(microseconds=1)).date()

        return TeamTimeOff.query.filter(
            TeamTimeOff.team_id == candidate.team_id,
            TeamTimeOff.status == "approved",
            TeamTimeOff.start_date <= last_day,
            TeamTimeOff.end_date >= candidate.target_date
        ).order_by(TeamTimeOff.start_date).first()

    # ------------------------------------------------------------------
    # Names for messages
    # ------------------------------------------------------------------

    def _team_name(self, team_id):
        team = db.session.get(Team, team_id)
        return team.team_name if team else f"Team member {team_id}"

    def _client_name(self, client_id):
        client = db.session.get(Client, client_id)
        return client.client_name if client else f"Client {client_id}"

    def _speciality_name(self, speciality_id):
        speciality = db.session.get(Speciality, speciality_id)
        return speciality.speciality_name if speciality else f"speciality {speciality_id}"
