import logging

from visit_scheduler.errors import SchedulingConflictError
from visit_scheduler.extensions import db
from visit_scheduler.models import Appointment
from visit_scheduler.services.conflict_checker import Candidate, CheckScope, ConflictChecker
from visit_scheduler.services.draft_query import week_filter

logger = logging.getLogger(__name__)


def list_appointments(week_start, include_cancelled=False):
    query = Appointment.query.filter(week_filter(Appointment, week_start))
    if not include_cancelled:
        query = query.filter(Appointment.status != 'cancelled')
    return query.order_by(Appointment.start_time, Appointment.appointment_id).all()


def create_appointment(client_id, start_time, end_time, team_id=None, speciality_id=None,
                       title=None, notes=None, checker=None, commit=True):
    """Insert a committed appointment, refusing it if it conflicts with the committed schedule."""
    checker = checker or ConflictChecker()
    candidate = Candidate(
        client_id=client_id,
        start_time=start_time,
        end_time=end_time,
        team_id=team_id,
        speciality_id=speciality_id
    )
    
    verdict = checker.check(candidate, scope=CheckScope.COMMITTED)
    if not verdict.ok:
        raise SchedulingConflictError(verdict)
    
    appointment = Appointment(
        client_id=client_id,
        team_id=team_id,
        speciality_id=speciality_id,
        start_time=start_time,
        end_time=end_time,
        title=title,
        notes=notes,
        status='scheduled'
    )
    db.session.add(appointment)
    db.session.flush()
    
    if commit:
        db.session.commit()
        logger.info(f"Created appointment {appointment.appointment_id} for client {client_id}")
    
    return appointment
